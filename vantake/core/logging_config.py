import json
import logging
import logging.config
from contextvars import ContextVar
from datetime import datetime, timezone

from ..settings import settings

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id"}
_QUIET_LIBRARIES = ("httpx", "httpcore", "sqlalchemy.engine")

_configured = False


class RequestIdFilter(logging.Filter):
    """Stamp every record with the id of the request being served, or ``-``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=True, default=str)


def resolve_level(value: str | None, env: str) -> int:
    level = logging.getLevelName(str(value or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO
    # prod never logs below INFO
    if env.lower() == "prod":
        level = max(level, logging.INFO)
    return level


def configure_logging(force: bool = False) -> None:
    global _configured
    if _configured and not force:
        return

    level = resolve_level(settings.LOG_LEVEL, settings.ENV)
    library_level = max(level, logging.WARNING)
    loggers = {name: {"level": library_level} for name in _QUIET_LIBRARIES}
    for name in ("uvicorn", "uvicorn.error"):
        loggers[name] = {"level": level, "handlers": ["default"], "propagate": False}
    loggers["uvicorn.access"] = {"level": library_level, "handlers": ["default"], "propagate": False}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"request_id": {"()": RequestIdFilter}},
            "formatters": {
                "json": {"()": JsonFormatter},
                "plain": {"format": "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"},
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if settings.LOG_JSON else "plain",
                    "filters": ["request_id"],
                },
            },
            "root": {"level": level, "handlers": ["default"]},
            "loggers": loggers,
        }
    )
    _configured = True
