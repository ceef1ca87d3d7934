from datetime import timedelta

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ..auth import create_session_token
from ..db import get_db
from ..models import Profile, UserSession, utcnow
from ..settings import settings

BEARER_PREFIX = "bearer "


def get_session_token(request: Request) -> str | None:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    header = request.headers.get("authorization", "")
    if header.lower().startswith(BEARER_PREFIX):
        return header[len(BEARER_PREFIX):].strip() or None
    return None


def get_active_session(db: Session, token: str | None) -> UserSession | None:
    if not token:
        return None
    return (
        db.query(UserSession)
        .filter(
            UserSession.token == token,
            UserSession.revoked_at.is_(None),
            UserSession.expires_at > utcnow(),
        )
        .one_or_none()
    )


def get_session_profile(db: Session, token: str | None) -> Profile | None:
    session = get_active_session(db, token)
    if not session:
        return None
    return db.query(Profile).filter(Profile.id == session.user_id).one_or_none()


def open_session(db: Session, profile: Profile) -> UserSession:
    session = UserSession(
        token=create_session_token(),
        user_id=profile.id,
        expires_at=utcnow() + timedelta(days=settings.SESSION_TTL_DAYS),
    )
    db.add(session)
    return session


def revoke_session(session: UserSession) -> None:
    session.revoked_at = utcnow()


def require_user(request: Request, db: Session = Depends(get_db)) -> Profile:
    profile = get_session_profile(db, get_session_token(request))
    if not profile:
        raise HTTPException(status_code=401, detail="not_authenticated")
    request.state.user_id = str(profile.id)
    return profile
