import argparse
import uuid

from vantake.auth import hash_password, normalize_email, normalize_wallet_address
from vantake.db import SessionLocal
from vantake.models import FollowedTrader, NotificationSettings, Profile, TrackedWallet, UserAuth, UserSession, utcnow


def _resolve_profile(db, identifier: str) -> Profile:
    try:
        user_id = uuid.UUID(identifier)
        profile = db.query(Profile).filter(Profile.id == user_id).one_or_none()
    except ValueError:
        profile = db.query(Profile).filter(Profile.email == normalize_email(identifier)).one_or_none()
    if not profile:
        raise SystemExit(f"User not found: {identifier}")
    return profile


def add_user(args: argparse.Namespace) -> None:
    email = normalize_email(args.email)
    db = SessionLocal()
    try:
        if db.query(UserAuth).filter(UserAuth.email == email).one_or_none():
            raise SystemExit(f"email already registered: {email}")
        profile = Profile(display_name=args.name or email.split("@", 1)[0], email=email)
        db.add(profile)
        db.flush()
        db.add(UserAuth(user_id=profile.id, email=email, password_hash=hash_password(args.password)))
        db.add(NotificationSettings(user_id=profile.id))
        db.commit()
        print(str(profile.id))
    finally:
        db.close()


def set_password(args: argparse.Namespace) -> None:
    db = SessionLocal()
    try:
        profile = _resolve_profile(db, args.user)
        auth = db.query(UserAuth).filter(UserAuth.user_id == profile.id).one_or_none()
        if not auth:
            raise SystemExit(f"User has no credentials: {profile.id}")
        auth.password_hash = hash_password(args.password)
        db.commit()
        print(f"updated password for {profile.id}")
    finally:
        db.close()


def revoke_sessions(args: argparse.Namespace) -> None:
    db = SessionLocal()
    try:
        profile = _resolve_profile(db, args.user)
        count = (
            db.query(UserSession)
            .filter(UserSession.user_id == profile.id, UserSession.revoked_at.is_(None))
            .update({UserSession.revoked_at: utcnow()}, synchronize_session=False)
        )
        db.commit()
        print(f"revoked {count} sessions for {profile.id}")
    finally:
        db.close()


def link_wallet(args: argparse.Namespace) -> None:
    try:
        address = normalize_wallet_address(args.address)
    except ValueError:
        raise SystemExit(f"invalid wallet address: {args.address}")
    db = SessionLocal()
    try:
        profile = _resolve_profile(db, args.user)
        profile.polymarket_wallet = address
        profile.updated_at = utcnow()
        db.commit()
        print(f"linked {address} to {profile.id}")
    finally:
        db.close()


def show_user(args: argparse.Namespace) -> None:
    db = SessionLocal()
    try:
        profile = _resolve_profile(db, args.user)
        follows = db.query(FollowedTrader).filter(FollowedTrader.user_id == profile.id).count()
        wallets = db.query(TrackedWallet).filter(TrackedWallet.user_id == profile.id).count()
        print(f"id={profile.id}")
        print(f"email={profile.email}")
        print(f"display_name={profile.display_name}")
        print(f"polymarket_wallet={profile.polymarket_wallet}")
        print(f"follows={follows} tracked_wallets={wallets}")
    finally:
        db.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage Vantake users")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Create a user with email/password credentials")
    add.add_argument("--email", required=True)
    add.add_argument("--password", required=True)
    add.add_argument("--name")
    add.set_defaults(func=add_user)

    password = subparsers.add_parser("set-password", help="Reset a user's password")
    password.add_argument("--user", required=True, help="User ID or email")
    password.add_argument("--password", required=True)
    password.set_defaults(func=set_password)

    revoke = subparsers.add_parser("revoke-sessions", help="Log a user out everywhere")
    revoke.add_argument("--user", required=True, help="User ID or email")
    revoke.set_defaults(func=revoke_sessions)

    wallet = subparsers.add_parser("link-wallet", help="Set a user's Polymarket wallet")
    wallet.add_argument("--user", required=True, help="User ID or email")
    wallet.add_argument("--address", required=True)
    wallet.set_defaults(func=link_wallet)

    show = subparsers.add_parser("show", help="Print a user's profile and counts")
    show.add_argument("--user", required=True, help="User ID or email")
    show.set_defaults(func=show_user)

    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
