import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .errors import ApiError
from .settings import settings

logger = logging.getLogger(__name__)


def _backend_name(database_url: str) -> str:
    try:
        return make_url(database_url).get_backend_name()
    except Exception:
        return database_url.split(":", 1)[0]


def _build_connect_args(database_url: str) -> dict[str, object]:
    backend = _backend_name(database_url)
    if backend.startswith("postgres") and settings.DB_STATEMENT_TIMEOUT_SECONDS > 0:
        timeout_ms = int(settings.DB_STATEMENT_TIMEOUT_SECONDS * 1000)
        return {"options": f"-c statement_timeout={timeout_ms}"}
    if backend == "sqlite":
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_build_connect_args(settings.DATABASE_URL),
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_fail(db: Session, what: str) -> None:
    """Commit the unit of work or surface a 500 naming what failed to save."""
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("db_commit_failed what=%s", what)
        raise ApiError(500, f"Failed to save {what}")


def insert_or_conflict(db: Session, row: Base, what: str) -> bool:
    """Insert ``row``; False when a unique constraint rejected it as a duplicate."""
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("db_insert_conflict what=%s", what)
        return False
    except SQLAlchemyError:
        db.rollback()
        logger.exception("db_commit_failed what=%s", what)
        raise ApiError(500, f"Failed to save {what}")
    return True
