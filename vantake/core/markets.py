import json
import math
from dataclasses import dataclass
from typing import Any

from ..polymarket.schemas import OrderBook

DEFAULT_OUTCOMES = ["Yes", "No"]
DEFAULT_OUTCOME_PRICES = [0.5, 0.5]


@dataclass(frozen=True)
class LiquidityDepth:
    buy_liquidity: float
    sell_liquidity: float
    mid_price: float


def _parse_float(value) -> float:
    try:
        number = float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _load_json_list(raw: Any) -> list | None:
    # Gamma serializes list fields as JSON strings, e.g. '["0.12","0.88"]'.
    if isinstance(raw, list):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, list) else None


def parse_outcomes(market: dict) -> list[str]:
    parsed = _load_json_list(market.get("outcomes"))
    if not parsed:
        return list(DEFAULT_OUTCOMES)
    return [str(item) for item in parsed]


def parse_outcome_prices(market: dict) -> list[float]:
    parsed = _load_json_list(market.get("outcomePrices"))
    if not parsed:
        return list(DEFAULT_OUTCOME_PRICES)
    try:
        prices = [float(item) for item in parsed]
    except (TypeError, ValueError):
        return list(DEFAULT_OUTCOME_PRICES)
    if not all(math.isfinite(p) for p in prices):
        return list(DEFAULT_OUTCOME_PRICES)
    return prices


def parse_clob_token_ids(market: dict) -> list[str]:
    parsed = _load_json_list(market.get("clobTokenIds") or "[]")
    return [str(item) for item in parsed] if parsed else []


def implied_probability(market: dict) -> float:
    prices = parse_outcome_prices(market)
    return prices[0] if prices and prices[0] else 0.5


def market_volume(market: dict) -> float:
    return _parse_float(market.get("volumeNum")) or _parse_float(market.get("volume"))


def market_liquidity(market: dict) -> float:
    return _parse_float(market.get("liquidityNum")) or _parse_float(market.get("liquidity"))


def market_category(market: dict) -> str:
    if market.get("category"):
        return str(market["category"])
    tags = market.get("tags") or []
    if isinstance(tags, list) and tags and isinstance(tags[0], dict) and tags[0].get("label"):
        return str(tags[0]["label"])
    return "Other"


def liquidity_depth(book: OrderBook, percentage_range: float = 0.1) -> LiquidityDepth:
    """Resting size within ``percentage_range`` of the mid on each side of the book."""
    if not book.bids or not book.asks:
        return LiquidityDepth(0.0, 0.0, 0.5)

    bids = sorted(book.bids, key=lambda level: level.price, reverse=True)
    asks = sorted(book.asks, key=lambda level: level.price)
    mid_price = (bids[0].price + asks[0].price) / 2
    upper = mid_price * (1 + percentage_range)
    lower = mid_price * (1 - percentage_range)

    buy_liquidity = 0.0
    for level in asks:
        if level.price > upper:
            break
        buy_liquidity += level.size

    sell_liquidity = 0.0
    for level in bids:
        if level.price < lower:
            break
        sell_liquidity += level.size

    return LiquidityDepth(buy_liquidity, sell_liquidity, mid_price)
