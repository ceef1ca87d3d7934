import pytest
from sqlalchemy.orm import Session

from vantake.auth import verify_password
from vantake.models import Profile, UserAuth, UserSession
from vantake.scripts import manage_users


@pytest.fixture()
def cli(db_session, monkeypatch):
    monkeypatch.setattr(manage_users, "SessionLocal", lambda: Session(bind=db_session.get_bind()))

    def _run(*argv):
        args = manage_users.build_parser().parse_args(list(argv))
        args.func(args)

    return _run


def test_add_user_and_reset_password(cli, db_session, capsys):
    cli("add", "--email", "Ops@Example.com", "--password", "first-pass")
    user_id = capsys.readouterr().out.strip()

    profile = db_session.query(Profile).one()
    assert str(profile.id) == user_id
    assert profile.display_name == "ops"

    cli("set-password", "--user", "ops@example.com", "--password", "second-pass")
    db_session.expire_all()
    auth = db_session.query(UserAuth).one()
    assert verify_password("second-pass", auth.password_hash)


def test_duplicate_and_unknown_users_exit(cli):
    cli("add", "--email", "a@example.com", "--password", "x" * 8)
    with pytest.raises(SystemExit):
        cli("add", "--email", "a@example.com", "--password", "x" * 8)
    with pytest.raises(SystemExit):
        cli("show", "--user", "nobody@example.com")


def test_link_wallet_and_revoke_sessions(cli, db_session, make_user, capsys):
    profile, _ = make_user(email="trader@example.com")

    cli("link-wallet", "--user", "trader@example.com", "--address", "0x" + "AB" * 20)
    cli("revoke-sessions", "--user", str(profile.id))
    out = capsys.readouterr().out
    assert "revoked 1 sessions" in out

    db_session.expire_all()
    assert db_session.get(Profile, profile.id).polymarket_wallet == "0x" + "ab" * 20
    assert db_session.query(UserSession).one().revoked_at is not None

    with pytest.raises(SystemExit):
        cli("link-wallet", "--user", "trader@example.com", "--address", "0x12")
