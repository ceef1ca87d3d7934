import logging

import httpx

from ..http_logging import upstream_event_hooks
from ..settings import settings

logger = logging.getLogger(__name__)

PLACEHOLDER_PRICE = "$—"

# (symbol, CoinGecko id, decimals shown)
TICKER_ASSETS = (
    ("BTC", "bitcoin", 0),
    ("ETH", "ethereum", 0),
    ("MATIC", "matic-network", 3),
)


def placeholder_rows() -> list[dict]:
    return [{"symbol": symbol, "price": PLACEHOLDER_PRICE, "change": 0.0} for symbol, _, _ in TICKER_ASSETS]


def _format_price(value: float, decimals: int) -> str:
    return f"${value:,.{decimals}f}"


def build_ticker_rows(payload: dict) -> list[dict]:
    rows = []
    for symbol, coin_id, decimals in TICKER_ASSETS:
        quote = payload.get(coin_id)
        if not isinstance(quote, dict):
            quote = {}
        price = float(quote.get("usd") or 0.0)
        change = float(quote.get("usd_24h_change") or 0.0)
        rows.append({"symbol": symbol, "price": _format_price(price, decimals), "change": change})
    return rows


class TickerClient:
    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def fetch_rows(self) -> list[dict]:
        """Spot prices, or placeholder rows when the source is slow or broken."""
        try:
            async with httpx.AsyncClient(
                timeout=settings.TICKER_TIMEOUT_SECONDS,
                transport=self._transport,
                event_hooks=upstream_event_hooks("ticker"),
            ) as client:
                r = await client.get(settings.TICKER_URL)
            r.raise_for_status()
            payload = r.json()
            if not isinstance(payload, dict):
                raise ValueError("unexpected ticker payload")
            return build_ticker_rows(payload)
        except (httpx.HTTPError, ValueError, TypeError) as exc:
            logger.warning("ticker_fetch_failed error=%s", type(exc).__name__)
            return placeholder_rows()
