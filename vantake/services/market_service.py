from dataclasses import asdict

from ..core import categories, formatting, markets
from ..polymarket.client import PolymarketClient
from ..polymarket.schemas import MarketHolder, OrderBook
from .fanout import gather_legs

TOP_HOLDERS = 10


def _flatten_holders(payload) -> list[MarketHolder]:
    # Data API groups holders per outcome token: [{"token": ..., "holders": [...]}].
    if not isinstance(payload, list):
        return []
    holders: list[MarketHolder] = []
    for group in payload:
        if not isinstance(group, dict):
            continue
        for item in group.get("holders") or []:
            if isinstance(item, dict):
                holders.append(MarketHolder.model_validate(item))
    holders.sort(key=lambda h: h.amount, reverse=True)
    return holders


async def build_market_summary(client: PolymarketClient, market_id: str) -> dict:
    """Market metadata plus book depth and top holders.

    The market lookup itself is required and raises on failure; the order book
    and holders legs degrade to empty values.
    """
    market = await client.get_market(market_id)
    if not isinstance(market, dict):
        market = {}

    token_ids = markets.parse_clob_token_ids(market)
    condition_id = market.get("conditionId") or ""

    legs: dict = {}
    if token_ids:
        legs["book"] = (client.get_order_book(token_ids[0]), None)
    if condition_id:
        legs["holders"] = (client.get_holders(condition_id), [])
    settled = await gather_legs("market_summary", legs) if legs else {}

    depth = None
    book_payload = settled.get("book")
    if isinstance(book_payload, dict):
        depth = asdict(markets.liquidity_depth(OrderBook.model_validate(book_payload)))

    volume = markets.market_volume(market)
    liquidity = markets.market_liquidity(market)
    outcomes = markets.parse_outcomes(market)
    prices = markets.parse_outcome_prices(market)

    return {
        "id": str(market.get("id") or market_id),
        "question": market.get("question") or "",
        "slug": market.get("slug") or "",
        "condition_id": condition_id,
        "end_date": market.get("endDate"),
        "end_date_display": formatting.format_date(market.get("endDate")) if market.get("endDate") else None,
        "category": categories.map_category(markets.market_category(market)),
        "outcomes": [{"name": name, "price": price} for name, price in zip(outcomes, prices)],
        "implied_probability": markets.implied_probability(market),
        "implied_probability_display": formatting.format_percentage(markets.implied_probability(market)),
        "volume": volume,
        "volume_display": formatting.format_volume(volume),
        "liquidity": liquidity,
        "liquidity_display": formatting.format_volume(liquidity),
        "clob_token_ids": token_ids,
        "depth": depth,
        "top_holders": [
            _holder_payload(holder) for holder in _flatten_holders(settled.get("holders"))[:TOP_HOLDERS]
        ],
    }


def _holder_payload(holder: MarketHolder) -> dict:
    return {
        "address": holder.proxy_wallet,
        "name": holder.name or formatting.format_address(holder.proxy_wallet),
        "amount": holder.amount,
        "outcome_index": holder.outcome_index,
    }
