import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware

from .core.logging_config import request_id_var

logger = logging.getLogger("vantake.http")

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64


def _request_id(incoming: str | None) -> str:
    candidate = (incoming or "").strip()[:MAX_REQUEST_ID_LENGTH]
    return candidate or uuid.uuid4().hex[:16]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One ``http_request`` line per request, correlated by ``X-Request-ID``."""

    async def dispatch(self, request, call_next):
        request_id = _request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            logger.info(
                "http_request method=%s path=%s status=%s duration_ms=%s cache=%s user=%s",
                request.method.upper(),
                request.url.path,
                response.status_code if response is not None else 500,
                int((time.perf_counter() - started) * 1000),
                getattr(request.state, "cache_status", "none"),
                getattr(request.state, "user_id", None) or "anon",
            )
            request_id_var.reset(token)
