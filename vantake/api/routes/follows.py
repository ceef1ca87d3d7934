from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...auth import normalize_wallet_address
from ...db import commit_or_fail, get_db, insert_or_conflict
from ...errors import ApiError
from ...models import FollowedTrader, Profile
from ...services.sessions_service import require_user

router = APIRouter(tags=["follows"])


class FollowPayload(BaseModel):
    address: str
    name: str | None = None


def follow_payload(row: FollowedTrader) -> dict:
    return {
        "id": row.id,
        "trader_address": row.trader_address,
        "trader_name": row.trader_name,
        "created_at": row.created_at.isoformat() if row.created_at else None,
    }


def _address_or_400(raw: str) -> str:
    try:
        return normalize_wallet_address(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid_wallet_address")


def _find_follow(db: Session, profile: Profile, address: str) -> FollowedTrader | None:
    return (
        db.query(FollowedTrader)
        .filter(FollowedTrader.user_id == profile.id, FollowedTrader.trader_address == address)
        .one_or_none()
    )


@router.get("/follows")
def list_follows(profile: Profile = Depends(require_user), db: Session = Depends(get_db)):
    rows = (
        db.query(FollowedTrader)
        .filter(FollowedTrader.user_id == profile.id)
        .order_by(FollowedTrader.created_at.desc(), FollowedTrader.id.desc())
        .all()
    )
    return [follow_payload(row) for row in rows]


@router.post("/follows")
def follow_trader(
    payload: FollowPayload,
    profile: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    address = _address_or_400(payload.address)
    row = _find_follow(db, profile, address)
    if row:
        if payload.name and payload.name != row.trader_name:
            row.trader_name = payload.name
            commit_or_fail(db, "follow")
        return follow_payload(row)

    row = FollowedTrader(user_id=profile.id, trader_address=address, trader_name=payload.name)
    if insert_or_conflict(db, row, "follow"):
        db.refresh(row)
        return follow_payload(row)
    # A concurrent follow of the same address won the insert.
    existing = _find_follow(db, profile, address)
    if not existing:
        raise ApiError(500, "Failed to save follow")
    return follow_payload(existing)


@router.delete("/follows/{address}")
def unfollow_trader(address: str, profile: Profile = Depends(require_user), db: Session = Depends(get_db)):
    normalized = _address_or_400(address)
    deleted = (
        db.query(FollowedTrader)
        .filter(FollowedTrader.user_id == profile.id, FollowedTrader.trader_address == normalized)
        .delete(synchronize_session=False)
    )
    commit_or_fail(db, "follow")
    return {"ok": True, "deleted": deleted}
