from typing import Iterable

from ..polymarket.schemas import UserPosition

OTHER = "Other"

# First match wins.
TITLE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Crypto", ("btc", "eth", "crypto", "bitcoin")),
    ("Politics", ("trump", "biden", "election", "president")),
    ("Sports", ("nfl", "nba", "sport")),
    ("Finance", ("stock", "fed", "rate")),
)

_API_TO_UI = {
    "POLITICS": "Politics",
    "SPORTS": "Sports",
    "CRYPTO": "Crypto",
    "CULTURE": "Pop Culture",
    "MENTIONS": "Pop Culture",
    "WEATHER": "Science",
    "ECONOMICS": "Finance",
    "TECH": "Tech",
    "FINANCE": "Finance",
}

_UI_TO_API = {
    "All": "OVERALL",
    "Politics": "POLITICS",
    "Sports": "SPORTS",
    "Crypto": "CRYPTO",
    "Pop Culture": "CULTURE",
    "Finance": "FINANCE",
    "Tech": "TECH",
}

_TIMEFRAMES = {
    "24H": "DAY",
    "7D": "WEEK",
    "30D": "MONTH",
    "All": "ALL",
}

LEADERBOARD_CATEGORIES = frozenset({"OVERALL", *_API_TO_UI})
LEADERBOARD_PERIODS = frozenset(_TIMEFRAMES.values())


def classify_title(title: str | None) -> str:
    text = (title or "").lower()
    for category, keywords in TITLE_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return OTHER


def category_strengths(positions: Iterable[UserPosition], limit: int = 5) -> list[dict]:
    buckets: dict[str, dict[str, float]] = {}
    for position in positions:
        category = classify_title(position.title)
        bucket = buckets.setdefault(category, {"positions": 0, "pnl": 0.0})
        bucket["positions"] += 1
        bucket["pnl"] += position.cash_pnl or 0.0

    rows = [
        {
            "category": category,
            "positions": int(data["positions"]),
            "pnl": data["pnl"],
            "strength": min(100.0, max(0.0, 50 + data["pnl"] / 100)),
        }
        for category, data in buckets.items()
    ]
    rows.sort(key=lambda row: row["strength"], reverse=True)
    return rows[:limit]


def map_category(category: str | None) -> str:
    if not category:
        return OTHER
    return _API_TO_UI.get(category.upper(), category)


def map_category_to_api(category: str | None) -> str:
    """UI label or leaderboard category, normalized to the leaderboard vocabulary."""
    if category in _UI_TO_API:
        return _UI_TO_API[category]
    upper = (category or "").upper()
    if upper in LEADERBOARD_CATEGORIES:
        return upper
    return "OVERALL"


def map_timeframe_to_api(timeframe: str | None) -> str:
    if timeframe in _TIMEFRAMES:
        return _TIMEFRAMES[timeframe]
    upper = (timeframe or "").upper()
    if upper in LEADERBOARD_PERIODS:
        return upper
    return "WEEK"
