from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...db import commit_or_fail, get_db
from ...models import NotificationSettings, Profile
from ...services.sessions_service import require_user

router = APIRouter(tags=["notifications"])

NOTIFICATION_FIELDS = ("large_trade_alerts", "portfolio_updates", "market_signals", "daily_digest")


class NotificationPatch(BaseModel):
    large_trade_alerts: bool | None = None
    portfolio_updates: bool | None = None
    market_signals: bool | None = None
    daily_digest: bool | None = None


def _get_or_create(db: Session, profile: Profile) -> NotificationSettings:
    row = db.query(NotificationSettings).filter(NotificationSettings.user_id == profile.id).one_or_none()
    if row is None:
        row = NotificationSettings(
            user_id=profile.id,
            large_trade_alerts=True,
            portfolio_updates=True,
            market_signals=False,
            daily_digest=False,
        )
        db.add(row)
    return row


def notification_payload(row: NotificationSettings) -> dict:
    payload = {field: bool(getattr(row, field)) for field in NOTIFICATION_FIELDS}
    payload["updated_at"] = row.updated_at.isoformat() if row.updated_at else None
    return payload


@router.get("/notifications/settings")
def get_notification_settings(profile: Profile = Depends(require_user), db: Session = Depends(get_db)):
    row = _get_or_create(db, profile)
    if row in db.new:
        commit_or_fail(db, "notification settings")
        db.refresh(row)
    return notification_payload(row)


@router.patch("/notifications/settings")
def update_notification_settings(
    payload: NotificationPatch,
    profile: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    row = _get_or_create(db, profile)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(row, field, value)
    row.updated_at = func.now()
    commit_or_fail(db, "notification settings")
    db.refresh(row)
    return notification_payload(row)
