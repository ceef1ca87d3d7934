from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...auth import normalize_wallet_address
from ...db import commit_or_fail, get_db
from ...models import Profile
from ...services.sessions_service import require_user

router = APIRouter(tags=["profile"])

MAX_DISPLAY_NAME = 128
MAX_TELEGRAM_HANDLE = 64


class ProfilePatch(BaseModel):
    display_name: str | None = None
    telegram_handle: str | None = None


class WalletLink(BaseModel):
    address: str


def profile_payload(profile: Profile) -> dict:
    return {
        "id": str(profile.id),
        "display_name": profile.display_name,
        "email": profile.email,
        "telegram_handle": profile.telegram_handle,
        "polymarket_wallet": profile.polymarket_wallet,
        "created_at": profile.created_at.isoformat() if profile.created_at else None,
        "updated_at": profile.updated_at.isoformat() if profile.updated_at else None,
    }


def _clean_text(value: str | None, limit: int, field: str) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    if len(cleaned) > limit:
        raise HTTPException(status_code=400, detail=f"{field}_too_long")
    return cleaned or None


@router.get("/profile/me")
def get_profile(profile: Profile = Depends(require_user)):
    return profile_payload(profile)


@router.patch("/profile/me")
def update_profile(
    payload: ProfilePatch,
    profile: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    updates = payload.model_dump(exclude_unset=True)
    if "display_name" in updates:
        profile.display_name = _clean_text(updates["display_name"], MAX_DISPLAY_NAME, "display_name")
    if "telegram_handle" in updates:
        handle = _clean_text(updates["telegram_handle"], MAX_TELEGRAM_HANDLE, "telegram_handle")
        profile.telegram_handle = handle.lstrip("@") if handle else None
    profile.updated_at = func.now()
    commit_or_fail(db, "profile")
    db.refresh(profile)
    return profile_payload(profile)


@router.put("/profile/me/wallet")
def link_wallet(
    payload: WalletLink,
    profile: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        address = normalize_wallet_address(payload.address)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid_wallet_address")
    profile.polymarket_wallet = address
    profile.updated_at = func.now()
    commit_or_fail(db, "wallet")
    db.refresh(profile)
    return profile_payload(profile)


@router.delete("/profile/me/wallet")
def unlink_wallet(profile: Profile = Depends(require_user), db: Session = Depends(get_db)):
    profile.polymarket_wallet = None
    profile.updated_at = func.now()
    commit_or_fail(db, "wallet")
    db.refresh(profile)
    return profile_payload(profile)
