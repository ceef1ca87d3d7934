import asyncio
import logging
from typing import Any, Awaitable

logger = logging.getLogger(__name__)


async def gather_legs(view: str, legs: dict[str, tuple[Awaitable[Any], Any]]) -> dict[str, Any]:
    """Run independent upstream calls concurrently.

    ``legs`` maps a name to ``(awaitable, fallback)``. A leg that raises is
    logged and replaced by its fallback so one slow or failing upstream never
    fails the whole view.
    """
    names = list(legs)
    results = await asyncio.gather(*(legs[name][0] for name in names), return_exceptions=True)
    settled: dict[str, Any] = {}
    for name, result in zip(names, results):
        if isinstance(result, Exception):
            logger.warning(
                "view_leg_failed view=%s leg=%s error=%s",
                view,
                name,
                type(result).__name__,
            )
            settled[name] = legs[name][1]
        else:
            settled[name] = result
    return settled
