import uuid

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...auth import normalize_wallet_address
from ...db import commit_or_fail, get_db, insert_or_conflict
from ...errors import ApiError
from ...models import Profile, TrackedWallet
from ...services.sessions_service import require_user

router = APIRouter(tags=["wallets"])


class WalletCreate(BaseModel):
    address: str
    label: str | None = None
    alerts_enabled: bool = True


class WalletPatch(BaseModel):
    label: str | None = None
    alerts_enabled: bool | None = None


def wallet_payload(row: TrackedWallet) -> dict:
    return {
        "id": str(row.id),
        "wallet_address": row.wallet_address,
        "label": row.label,
        "alerts_enabled": row.alerts_enabled,
        "created_at": row.created_at.isoformat() if row.created_at else None,
    }


def list_user_wallets(db: Session, profile: Profile) -> list[TrackedWallet]:
    return (
        db.query(TrackedWallet)
        .filter(TrackedWallet.user_id == profile.id)
        .order_by(TrackedWallet.created_at.desc())
        .all()
    )


def _find_wallet(db: Session, profile: Profile, address: str) -> TrackedWallet | None:
    return (
        db.query(TrackedWallet)
        .filter(TrackedWallet.user_id == profile.id, TrackedWallet.wallet_address == address)
        .one_or_none()
    )


def _get_owned_wallet(db: Session, profile: Profile, wallet_id: str) -> TrackedWallet:
    try:
        parsed = uuid.UUID(wallet_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="wallet_not_found")
    row = (
        db.query(TrackedWallet)
        .filter(TrackedWallet.id == parsed, TrackedWallet.user_id == profile.id)
        .one_or_none()
    )
    if not row:
        raise HTTPException(status_code=404, detail="wallet_not_found")
    return row


@router.get("/wallets")
def list_wallets(profile: Profile = Depends(require_user), db: Session = Depends(get_db)):
    return [wallet_payload(row) for row in list_user_wallets(db, profile)]


@router.post("/wallets", status_code=201)
def add_wallet(
    payload: WalletCreate,
    profile: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        address = normalize_wallet_address(payload.address)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid_wallet_address")

    if _find_wallet(db, profile, address):
        raise HTTPException(status_code=409, detail="wallet_already_tracked")

    row = TrackedWallet(
        user_id=profile.id,
        wallet_address=address,
        label=(payload.label or "").strip() or None,
        alerts_enabled=payload.alerts_enabled,
    )
    if not insert_or_conflict(db, row, "wallet"):
        if _find_wallet(db, profile, address):
            raise HTTPException(status_code=409, detail="wallet_already_tracked")
        raise ApiError(500, "Failed to save wallet")
    db.refresh(row)
    return wallet_payload(row)


@router.patch("/wallets/{wallet_id}")
def update_wallet(
    wallet_id: str,
    payload: WalletPatch,
    profile: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    row = _get_owned_wallet(db, profile, wallet_id)
    updates = payload.model_dump(exclude_unset=True)
    if "label" in updates:
        row.label = (updates["label"] or "").strip() or None
    if updates.get("alerts_enabled") is not None:
        row.alerts_enabled = updates["alerts_enabled"]
    commit_or_fail(db, "wallet")
    db.refresh(row)
    return wallet_payload(row)


@router.delete("/wallets/{wallet_id}")
def remove_wallet(wallet_id: str, profile: Profile = Depends(require_user), db: Session = Depends(get_db)):
    row = _get_owned_wallet(db, profile, wallet_id)
    db.delete(row)
    commit_or_fail(db, "wallet")
    return {"ok": True}


@router.delete("/wallets/address/{address}")
def remove_wallet_by_address(
    address: str,
    profile: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        normalized = normalize_wallet_address(address)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid_wallet_address")
    deleted = (
        db.query(TrackedWallet)
        .filter(TrackedWallet.user_id == profile.id, TrackedWallet.wallet_address == normalized)
        .delete(synchronize_session=False)
    )
    commit_or_fail(db, "wallet")
    return {"ok": True, "deleted": deleted}
