"""Baseline schema: profiles, auth, follows, tracked wallets, notifications.

Revision ID: 20261017_baseline
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20261017_baseline"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("display_name", sa.String(length=128), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("telegram_handle", sa.String(length=64), nullable=True),
        sa.Column("polymarket_wallet", sa.String(length=42), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("email", name="uq_profiles_email"),
    )
    op.create_index("ix_profiles_polymarket_wallet", "profiles", ["polymarket_wallet"])

    op.create_table(
        "user_auth",
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("email", name="uq_user_auth_email"),
    )

    op.create_table(
        "user_sessions",
        sa.Column("token", sa.String(length=64), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("expires_at > created_at", name="ck_user_sessions_expires_after_created"),
    )
    op.create_index("ix_user_sessions_user_id", "user_sessions", ["user_id"])

    op.create_table(
        "followed_traders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("trader_address", sa.String(length=42), nullable=False),
        sa.Column("trader_name", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "trader_address", name="uq_followed_traders_user_address"),
        sa.CheckConstraint("length(trader_address) = 42", name="ck_followed_traders_address_length"),
    )
    op.create_index(
        "ix_followed_traders_user_created",
        "followed_traders",
        ["user_id", sa.text("created_at DESC")],
    )

    op.create_table(
        "tracked_wallets",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("wallet_address", sa.String(length=42), nullable=False),
        sa.Column("label", sa.String(length=128), nullable=True),
        sa.Column("alerts_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "wallet_address", name="uq_tracked_wallets_user_address"),
        sa.CheckConstraint("length(wallet_address) = 42", name="ck_tracked_wallets_address_length"),
    )
    op.create_index(
        "ix_tracked_wallets_user_created",
        "tracked_wallets",
        ["user_id", sa.text("created_at DESC")],
    )

    op.create_table(
        "notification_settings",
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("large_trade_alerts", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("portfolio_updates", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("market_signals", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("daily_digest", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("notification_settings")
    op.drop_index("ix_tracked_wallets_user_created", table_name="tracked_wallets")
    op.drop_table("tracked_wallets")
    op.drop_index("ix_followed_traders_user_created", table_name="followed_traders")
    op.drop_table("followed_traders")
    op.drop_index("ix_user_sessions_user_id", table_name="user_sessions")
    op.drop_table("user_sessions")
    op.drop_table("user_auth")
    op.drop_index("ix_profiles_polymarket_wallet", table_name="profiles")
    op.drop_table("profiles")
