import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.router import api_router
from .core.logging_config import configure_logging
from .errors import register_exception_handlers
from .request_logging import RequestLoggingMiddleware
from .settings import settings

configure_logging()
logger = logging.getLogger(__name__)

DESCRIPTION = (
    "Polymarket market data proxy, trader analytics and watchlists. "
    "Read-only: no wallet signing or order submission."
)

app = FastAPI(title="Vantake", description=DESCRIPTION)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)
app.include_router(api_router)

logger.info("app_started env=%s origins=%s", settings.ENV, len(settings.CORS_ALLOW_ORIGINS))
