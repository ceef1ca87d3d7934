from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from .settings import settings


def live_ttl() -> int:
    return settings.CACHE_TTL_LIVE_SECONDS


def default_ttl() -> int:
    return settings.CACHE_TTL_DEFAULT_SECONDS


def tags_ttl() -> int:
    return settings.CACHE_TTL_TAGS_SECONDS


def profile_ttl() -> int:
    return settings.CACHE_TTL_PROFILE_SECONDS


def cache_control_value(ttl_seconds: int) -> str:
    """Shared-cache directive: fresh for ``ttl`` seconds, served stale for twice that."""
    ttl = max(int(ttl_seconds), 0)
    return f"public, s-maxage={ttl}, stale-while-revalidate={ttl * 2}"


def apply_cache_headers(response: Response, *, ttl_seconds: int) -> None:
    response.headers["Cache-Control"] = cache_control_value(ttl_seconds)


def cached_json_response(request: Request, payload: Any, *, ttl_seconds: int) -> JSONResponse:
    response = JSONResponse(content=payload)
    apply_cache_headers(response, ttl_seconds=ttl_seconds)
    _set_cache_status(request, f"s-maxage={max(int(ttl_seconds), 0)}")
    return response


def _set_cache_status(request: Request, status: str) -> None:
    try:
        request.state.cache_status = status
    except Exception:
        return
