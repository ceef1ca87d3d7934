import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Boolean, CheckConstraint, ForeignKey, func, UniqueConstraint, Index, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from .db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        UniqueConstraint("email", name="uq_profiles_email"),
        Index("ix_profiles_polymarket_wallet", "polymarket_wallet"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    display_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    telegram_handle: Mapped[str | None] = mapped_column(String(64), nullable=True)
    polymarket_wallet: Mapped[str | None] = mapped_column(String(42), nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime, default=func.now(), nullable=False)
    updated_at: Mapped[DateTime] = mapped_column(DateTime, default=func.now(), nullable=False)


class UserAuth(Base):
    __tablename__ = "user_auth"
    __table_args__ = (UniqueConstraint("email", name="uq_user_auth_email"),)

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    created_at: Mapped[DateTime] = mapped_column(DateTime, default=func.now(), nullable=False)


class UserSession(Base):
    __tablename__ = "user_sessions"
    __table_args__ = (
        Index("ix_user_sessions_user_id", "user_id"),
        CheckConstraint("expires_at > created_at", name="ck_user_sessions_expires_after_created"),
    )

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[DateTime] = mapped_column(DateTime, default=utcnow, nullable=False)
    expires_at: Mapped[DateTime] = mapped_column(DateTime, nullable=False)
    revoked_at: Mapped[DateTime | None] = mapped_column(DateTime, nullable=True)


class FollowedTrader(Base):
    __tablename__ = "followed_traders"
    __table_args__ = (
        UniqueConstraint("user_id", "trader_address", name="uq_followed_traders_user_address"),
        CheckConstraint("length(trader_address) = 42", name="ck_followed_traders_address_length"),
        Index("ix_followed_traders_user_created", "user_id", text("created_at DESC")),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    trader_address: Mapped[str] = mapped_column(String(42), nullable=False)
    trader_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime, default=utcnow, nullable=False)


class TrackedWallet(Base):
    __tablename__ = "tracked_wallets"
    __table_args__ = (
        UniqueConstraint("user_id", "wallet_address", name="uq_tracked_wallets_user_address"),
        CheckConstraint("length(wallet_address) = 42", name="ck_tracked_wallets_address_length"),
        Index("ix_tracked_wallets_user_created", "user_id", text("created_at DESC")),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    wallet_address: Mapped[str] = mapped_column(String(42), nullable=False)
    label: Mapped[str | None] = mapped_column(String(128), nullable=True)
    alerts_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[DateTime] = mapped_column(DateTime, default=utcnow, nullable=False)


class NotificationSettings(Base):
    __tablename__ = "notification_settings"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    large_trade_alerts: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    portfolio_updates: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    market_signals: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    daily_digest: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    updated_at: Mapped[DateTime] = mapped_column(DateTime, default=func.now(), nullable=False)
