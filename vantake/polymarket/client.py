from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from ..http_logging import upstream_event_hooks
from ..settings import settings


GAMMA = "Gamma"
CLOB = "CLOB"
DATA = "Data"

MARKET_LIST_ENDPOINTS = {"markets", "events"}

_MARKETS_DEFAULTS = (
    ("order", "volume"),
    ("ascending", "false"),
    ("active", "true"),
    ("closed", "false"),
)


class UpstreamError(Exception):
    """A Polymarket service answered with a non-2xx status."""

    def __init__(self, service: str, status_code: int, url: str = "") -> None:
        super().__init__(f"{service} API error: {status_code}")
        self.service = service
        self.status_code = status_code
        self.url = url


class PolymarketClient:
    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        self.gamma_base = settings.GAMMA_API_BASE
        self.clob_base = settings.CLOB_API_BASE
        self.data_base = settings.DATA_API_BASE
        self._transport = transport
        self._timeout = settings.UPSTREAM_TIMEOUT_SECONDS if timeout is None else timeout

    # Gamma: market discovery

    async def get_markets(self, params: Mapping[str, str], endpoint: str = "markets") -> Any:
        if endpoint not in MARKET_LIST_ENDPOINTS:
            raise ValueError(f"unsupported market list endpoint: {endpoint}")
        return await self._get(GAMMA, f"{self.gamma_base}/{endpoint}", params)

    async def get_market(self, market_id: str) -> Any:
        return await self._get(GAMMA, f"{self.gamma_base}/markets/{market_id}")

    async def get_events(self, params: Mapping[str, str]) -> Any:
        return await self._get(GAMMA, f"{self.gamma_base}/events", params)

    async def get_event(self, event_id: str) -> Any:
        return await self._get(GAMMA, f"{self.gamma_base}/events/{event_id}")

    async def search(self, query: str) -> Any:
        return await self._get(GAMMA, f"{self.gamma_base}/search", {"query": query})

    async def get_tags(self) -> Any:
        return await self._get(GAMMA, f"{self.gamma_base}/tags")

    async def get_profile(self, address_or_username: str) -> Any:
        return await self._get(GAMMA, f"{self.gamma_base}/profiles/{address_or_username}")

    # CLOB: pricing and order book

    async def get_order_book(self, token_id: str) -> Any:
        return await self._get(CLOB, f"{self.clob_base}/book", {"token_id": token_id})

    async def get_price(self, token_id: str, side: str) -> Any:
        return await self._get(CLOB, f"{self.clob_base}/price", {"token_id": token_id, "side": side})

    async def get_midpoint(self, token_id: str) -> Any:
        return await self._get(CLOB, f"{self.clob_base}/midpoint", {"token_id": token_id})

    async def get_spread(self, token_id: str) -> Any:
        return await self._get(CLOB, f"{self.clob_base}/spread", {"token_id": token_id})

    async def get_price_history(self, params: Mapping[str, str]) -> Any:
        return await self._get(CLOB, f"{self.clob_base}/prices-history", params)

    # Data: leaderboard, positions, trades

    async def get_leaderboard(self, params: Mapping[str, str]) -> Any:
        return await self._get(DATA, f"{self.data_base}/v1/leaderboard", params)

    async def get_positions(self, params: Mapping[str, str]) -> Any:
        return await self._get(DATA, f"{self.data_base}/positions", params)

    async def get_closed_positions(self, params: Mapping[str, str]) -> Any:
        return await self._get(DATA, f"{self.data_base}/closed-positions", params)

    async def get_trades(self, params: Mapping[str, str]) -> Any:
        return await self._get(DATA, f"{self.data_base}/trades", params)

    async def get_activity(self, params: Mapping[str, str]) -> Any:
        return await self._get(DATA, f"{self.data_base}/activity", params)

    async def get_holders(self, market: str) -> Any:
        return await self._get(DATA, f"{self.data_base}/holders", {"market": market})

    async def get_portfolio_value(self, user: str) -> Any:
        return await self._get(DATA, f"{self.data_base}/value", {"user": user})

    async def _get(self, service: str, url: str, params: Mapping[str, str] | None = None) -> Any:
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
            follow_redirects=True,
            event_hooks=upstream_event_hooks(service),
        ) as client:
            r = await client.get(url, params=dict(params) if params else None)
        if not r.is_success:
            raise UpstreamError(service, r.status_code, str(r.request.url))
        return r.json()


def _coerce_non_negative_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return default


def _coerce_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _set_optional(params: dict[str, str], key: str, value: Any) -> None:
    if value is None or value == "":
        return
    params[key] = str(value)


def _set_paging(params: dict[str, str], limit: int, offset: int) -> None:
    # Zero values are left to the upstream default.
    if limit:
        params["limit"] = str(limit)
    if offset:
        params["offset"] = str(offset)


def build_markets_params(items: Iterable[tuple[str, str]]) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in items:
        if key == "endpoint":
            continue
        params[key] = value
    for key, default in _MARKETS_DEFAULTS:
        params.setdefault(key, default)
    return params


def build_leaderboard_params(
    *,
    category: str | None = None,
    time_period: str | None = None,
    order_by: str | None = None,
    limit: Any = None,
    offset: Any = None,
    user: str | None = None,
    user_name: str | None = None,
) -> dict[str, str]:
    params = {
        "category": (category or "OVERALL").upper(),
        "timePeriod": (time_period or "WEEK").upper(),
        "orderBy": (order_by or "PNL").upper(),
    }
    _set_paging(params, _coerce_non_negative_int(limit, 24), _coerce_non_negative_int(offset, 0))
    _set_optional(params, "user", user)
    _set_optional(params, "userName", user_name)
    return params


def build_positions_params(
    *,
    user: str,
    limit: Any = None,
    offset: Any = None,
    sort_by: str | None = None,
    sort_direction: str | None = None,
    market: str | None = None,
    event_id: str | None = None,
    size_threshold: Any = None,
    redeemable: str | None = None,
    mergeable: str | None = None,
    title: str | None = None,
) -> dict[str, str]:
    params = {"user": user}
    _set_optional(params, "market", market)
    _set_optional(params, "eventId", event_id)
    _set_optional(params, "sizeThreshold", _coerce_float(size_threshold))
    _set_optional(params, "redeemable", redeemable)
    _set_optional(params, "mergeable", mergeable)
    _set_paging(params, _coerce_non_negative_int(limit, 100), _coerce_non_negative_int(offset, 0))
    params["sortBy"] = (sort_by or "CASHPNL").upper()
    params["sortDirection"] = (sort_direction or "DESC").upper()
    _set_optional(params, "title", title)
    return params


def build_trades_params(
    *,
    user: str | None = None,
    market: str | None = None,
    event_id: str | None = None,
    limit: Any = None,
    offset: Any = None,
    taker_only: str | None = None,
    side: str | None = None,
    filter_type: str | None = None,
    filter_amount: Any = None,
) -> dict[str, str]:
    params: dict[str, str] = {}
    _set_optional(params, "user", user)
    if market:
        markets = [part.strip() for part in market.split(",") if part.strip()]
        if markets:
            params["market"] = ",".join(markets)
    _set_optional(params, "eventId", event_id)
    _set_paging(params, _coerce_non_negative_int(limit, 100), _coerce_non_negative_int(offset, 0))
    _set_optional(params, "takerOnly", taker_only)
    _set_optional(params, "filterType", filter_type.upper() if filter_type else None)
    _set_optional(params, "filterAmount", _coerce_float(filter_amount))
    _set_optional(params, "side", side.upper() if side else None)
    return params


def build_user_page_params(*, user: str, limit: Any = None, offset: Any = None) -> dict[str, str]:
    params = {"user": user}
    _set_paging(params, _coerce_non_negative_int(limit, 0), _coerce_non_negative_int(offset, 0))
    return params


def build_price_history_params(
    *,
    token_id: str,
    interval: str | None = None,
    fidelity: Any = None,
    start_ts: Any = None,
    end_ts: Any = None,
) -> dict[str, str]:
    params = {
        "token_id": token_id,
        "interval": interval or "1w",
        "fidelity": str(_coerce_non_negative_int(fidelity, 60) or 60),
    }
    _set_optional(params, "startTs", _coerce_non_negative_int(start_ts, 0) or None)
    _set_optional(params, "endTs", _coerce_non_negative_int(end_ts, 0) or None)
    return params
