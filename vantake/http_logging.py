import logging
import time

import httpx

from .settings import settings

logger = logging.getLogger("vantake.upstream")


def log_upstream_response(response: httpx.Response, elapsed_seconds: float, *, service: str) -> None:
    """Warn about upstream calls that failed or crossed the slow threshold."""
    threshold = max(settings.HTTPX_SLOW_REQUEST_THRESHOLD_SECONDS, 0.0)
    flags = []
    if not response.is_success:
        flags.append("error")
    if threshold and elapsed_seconds >= threshold:
        flags.append("slow")
    if not flags:
        return
    logger.warning(
        "upstream_request_%s service=%s method=%s url=%s status=%s latency_ms=%s",
        "_".join(flags),
        service,
        response.request.method,
        response.request.url,
        response.status_code,
        int(elapsed_seconds * 1000),
    )


def upstream_event_hooks(service: str) -> dict[str, list]:
    """httpx ``event_hooks`` that time each request to ``service``."""
    started: dict[int, float] = {}

    async def _on_request(request: httpx.Request) -> None:
        started[id(request)] = time.monotonic()

    async def _on_response(response: httpx.Response) -> None:
        begun = started.pop(id(response.request), None)
        elapsed = time.monotonic() - begun if begun is not None else 0.0
        log_upstream_response(response, elapsed, service=service)

    return {"request": [_on_request], "response": [_on_response]}
