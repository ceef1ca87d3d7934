from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...auth import MIN_PASSWORD_LENGTH, hash_password, normalize_email, verify_password
from ...db import commit_or_fail, get_db
from ...models import NotificationSettings, Profile, UserAuth
from ...services.sessions_service import (
    get_active_session,
    get_session_token,
    open_session,
    require_user,
    revoke_session,
)
from ...settings import settings
from .profile import profile_payload

router = APIRouter(tags=["auth"])


class RegisterPayload(BaseModel):
    email: str
    password: str
    display_name: str | None = None


class LoginPayload(BaseModel):
    email: str
    password: str


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.ENV == "prod",
        samesite="lax",
        max_age=int(timedelta(days=settings.SESSION_TTL_DAYS).total_seconds()),
        path="/",
    )


@router.post("/auth/register")
def register(payload: RegisterPayload, response: Response, db: Session = Depends(get_db)):
    email = normalize_email(payload.email)
    if "@" not in email:
        raise HTTPException(status_code=400, detail="invalid_email")
    if len(payload.password.strip()) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="password_too_short")

    existing = db.query(UserAuth).filter(UserAuth.email == email).one_or_none()
    if existing:
        raise HTTPException(status_code=409, detail="email_in_use")

    display_name = (payload.display_name or "").strip() or email.split("@", 1)[0]
    profile = Profile(display_name=display_name, email=email)
    db.add(profile)
    db.flush()

    db.add(UserAuth(user_id=profile.id, email=email, password_hash=hash_password(payload.password)))
    db.add(
        NotificationSettings(
            user_id=profile.id,
            large_trade_alerts=True,
            portfolio_updates=True,
            market_signals=False,
            daily_digest=False,
        )
    )
    session = open_session(db, profile)
    commit_or_fail(db, "account")

    _set_session_cookie(response, session.token)
    return {"ok": True, "user_id": str(profile.id), "token": session.token}


@router.post("/auth/login")
def login(payload: LoginPayload, response: Response, db: Session = Depends(get_db)):
    email = normalize_email(payload.email)
    auth = db.query(UserAuth).filter(UserAuth.email == email).one_or_none()
    if not auth or not verify_password(payload.password, auth.password_hash):
        raise HTTPException(status_code=401, detail="invalid_credentials")

    profile = db.query(Profile).filter(Profile.id == auth.user_id).one_or_none()
    if not profile:
        raise HTTPException(status_code=401, detail="invalid_credentials")

    session = open_session(db, profile)
    commit_or_fail(db, "session")
    _set_session_cookie(response, session.token)
    return {"ok": True, "user_id": str(profile.id), "token": session.token}


@router.post("/auth/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    session = get_active_session(db, get_session_token(request))
    if session:
        revoke_session(session)
        commit_or_fail(db, "session")
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return {"ok": True}


@router.get("/me")
def me(profile: Profile = Depends(require_user)):
    return profile_payload(profile)
