import logging
from typing import Any, Awaitable, Callable

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ...cache import cached_json_response, default_ttl, live_ttl, profile_ttl, tags_ttl
from ...core.categories import map_category_to_api, map_timeframe_to_api
from ...deps import get_polymarket_client
from ...errors import error_response
from ...polymarket.client import (
    MARKET_LIST_ENDPOINTS,
    PolymarketClient,
    UpstreamError,
    build_leaderboard_params,
    build_markets_params,
    build_positions_params,
    build_price_history_params,
    build_trades_params,
    build_user_page_params,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/polymarket", tags=["polymarket"])


def _missing(*names: str) -> JSONResponse:
    return error_response(400, f"Missing {' or '.join(names)} parameter")


async def _proxy(
    request: Request,
    fetch: Callable[[], Awaitable[Any]],
    *,
    resource: str,
    ttl_seconds: int,
) -> JSONResponse:
    try:
        payload = await fetch()
    except UpstreamError as exc:
        return error_response(exc.status_code, str(exc))
    except (httpx.HTTPError, ValueError):
        logger.exception("proxy_fetch_failed resource=%s path=%s", resource, request.url.path)
        return error_response(500, f"Failed to fetch {resource}")
    return cached_json_response(request, payload, ttl_seconds=ttl_seconds)


# CLOB


@router.get("/book")
async def order_book(
    request: Request,
    token_id: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not token_id:
        return _missing("token_id")
    return await _proxy(
        request, lambda: client.get_order_book(token_id), resource="order book", ttl_seconds=live_ttl()
    )


@router.get("/price")
async def price(
    request: Request,
    token_id: str | None = None,
    side: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not token_id or not side:
        return _missing("token_id", "side")
    return await _proxy(
        request,
        lambda: client.get_price(token_id, side.upper()),
        resource="price",
        ttl_seconds=live_ttl(),
    )


@router.get("/midpoint")
async def midpoint(
    request: Request,
    token_id: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not token_id:
        return _missing("token_id")
    return await _proxy(
        request, lambda: client.get_midpoint(token_id), resource="midpoint", ttl_seconds=live_ttl()
    )


@router.get("/spread")
async def spread(
    request: Request,
    token_id: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not token_id:
        return _missing("token_id")
    return await _proxy(request, lambda: client.get_spread(token_id), resource="spread", ttl_seconds=live_ttl())


@router.get("/prices-history")
async def prices_history(
    request: Request,
    token_id: str | None = None,
    interval: str | None = None,
    fidelity: str | None = None,
    startTs: str | None = None,
    endTs: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not token_id:
        return _missing("token_id")
    params = build_price_history_params(
        token_id=token_id,
        interval=interval,
        fidelity=fidelity,
        start_ts=startTs,
        end_ts=endTs,
    )
    return await _proxy(
        request,
        lambda: client.get_price_history(params),
        resource="price history",
        ttl_seconds=default_ttl(),
    )


# Gamma


@router.get("/markets")
async def markets(request: Request, client: PolymarketClient = Depends(get_polymarket_client)):
    endpoint = request.query_params.get("endpoint") or "markets"
    if endpoint not in MARKET_LIST_ENDPOINTS:
        return error_response(400, f"Unsupported endpoint parameter: {endpoint}")
    params = build_markets_params(request.query_params.multi_items())
    return await _proxy(
        request,
        lambda: client.get_markets(params, endpoint=endpoint),
        resource="markets",
        ttl_seconds=default_ttl(),
    )


@router.get("/markets/{market_id}")
async def market(request: Request, market_id: str, client: PolymarketClient = Depends(get_polymarket_client)):
    return await _proxy(
        request, lambda: client.get_market(market_id), resource="market", ttl_seconds=default_ttl()
    )


@router.get("/events")
async def events(request: Request, client: PolymarketClient = Depends(get_polymarket_client)):
    params = dict(request.query_params.multi_items())
    return await _proxy(request, lambda: client.get_events(params), resource="events", ttl_seconds=default_ttl())


@router.get("/events/{event_id}")
async def event(request: Request, event_id: str, client: PolymarketClient = Depends(get_polymarket_client)):
    return await _proxy(request, lambda: client.get_event(event_id), resource="event", ttl_seconds=default_ttl())


@router.get("/search")
async def search(
    request: Request,
    query: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not query:
        return _missing("query")
    return await _proxy(request, lambda: client.search(query), resource="search results", ttl_seconds=default_ttl())


@router.get("/tags")
async def tags(request: Request, client: PolymarketClient = Depends(get_polymarket_client)):
    return await _proxy(request, client.get_tags, resource="tags", ttl_seconds=tags_ttl())


@router.get("/profiles/{profile_id}")
async def profile(request: Request, profile_id: str, client: PolymarketClient = Depends(get_polymarket_client)):
    return await _proxy(
        request, lambda: client.get_profile(profile_id), resource="profile", ttl_seconds=profile_ttl()
    )


# Data


@router.get("/leaderboard")
async def leaderboard(
    request: Request,
    category: str | None = None,
    timePeriod: str | None = None,
    orderBy: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
    user: str | None = None,
    userName: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    params = build_leaderboard_params(
        category=map_category_to_api(category),
        time_period=map_timeframe_to_api(timePeriod),
        order_by=orderBy,
        limit=limit,
        offset=offset,
        user=user,
        user_name=userName,
    )
    return await _proxy(
        request, lambda: client.get_leaderboard(params), resource="leaderboard", ttl_seconds=default_ttl()
    )


@router.get("/positions")
async def positions(
    request: Request,
    user: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
    sortBy: str | None = None,
    sortDirection: str | None = None,
    market: str | None = None,
    eventId: str | None = None,
    sizeThreshold: str | None = None,
    redeemable: str | None = None,
    mergeable: str | None = None,
    title: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not user:
        return _missing("user")
    params = build_positions_params(
        user=user,
        limit=limit,
        offset=offset,
        sort_by=sortBy,
        sort_direction=sortDirection,
        market=market,
        event_id=eventId,
        size_threshold=sizeThreshold,
        redeemable=redeemable,
        mergeable=mergeable,
        title=title,
    )
    return await _proxy(
        request, lambda: client.get_positions(params), resource="positions", ttl_seconds=default_ttl()
    )


@router.get("/closed-positions")
async def closed_positions(
    request: Request,
    user: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not user:
        return _missing("user")
    params = build_user_page_params(user=user, limit=limit, offset=offset)
    return await _proxy(
        request,
        lambda: client.get_closed_positions(params),
        resource="closed positions",
        ttl_seconds=default_ttl(),
    )


@router.get("/trades")
async def trades(
    request: Request,
    user: str | None = None,
    market: str | None = None,
    eventId: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
    takerOnly: str | None = None,
    side: str | None = None,
    filterType: str | None = None,
    filterAmount: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    params = build_trades_params(
        user=user,
        market=market,
        event_id=eventId,
        limit=limit,
        offset=offset,
        taker_only=takerOnly,
        side=side,
        filter_type=filterType,
        filter_amount=filterAmount,
    )
    return await _proxy(request, lambda: client.get_trades(params), resource="trades", ttl_seconds=default_ttl())


@router.get("/activity")
async def activity(
    request: Request,
    user: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not user:
        return _missing("user")
    params = build_user_page_params(user=user, limit=limit, offset=offset)
    return await _proxy(
        request, lambda: client.get_activity(params), resource="activity", ttl_seconds=default_ttl()
    )


@router.get("/value")
async def portfolio_value(
    request: Request,
    user: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not user:
        return _missing("user")
    return await _proxy(
        request,
        lambda: client.get_portfolio_value(user),
        resource="portfolio value",
        ttl_seconds=default_ttl(),
    )


@router.get("/holders")
async def holders(
    request: Request,
    market: str | None = None,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not market:
        return _missing("market")
    return await _proxy(request, lambda: client.get_holders(market), resource="holders", ttl_seconds=default_ttl())
