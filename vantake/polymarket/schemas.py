import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_number(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class UpstreamModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LeaderboardTrader(UpstreamModel):
    rank: int = 0
    proxy_wallet: str = Field(default="", alias="proxyWallet")
    user_name: str | None = Field(default=None, alias="userName")
    vol: float = 0.0
    pnl: float = 0.0
    profile_image: str | None = Field(default=None, alias="profileImage")
    x_username: str | None = Field(default=None, alias="xUsername")
    verified_badge: bool = Field(default=False, alias="verifiedBadge")

    @field_validator("vol", "pnl", mode="before")
    @classmethod
    def _numbers(cls, value):
        return _coerce_number(value)

    @field_validator("rank", mode="before")
    @classmethod
    def _rank(cls, value):
        return int(_coerce_number(value))

    @field_validator("verified_badge", mode="before")
    @classmethod
    def _badge(cls, value):
        return bool(value)


class UserPosition(UpstreamModel):
    proxy_wallet: str = Field(default="", alias="proxyWallet")
    asset: str = ""
    condition_id: str = Field(default="", alias="conditionId")
    size: float = 0.0
    avg_price: float = Field(default=0.0, alias="avgPrice")
    initial_value: float = Field(default=0.0, alias="initialValue")
    current_value: float = Field(default=0.0, alias="currentValue")
    cash_pnl: float = Field(default=0.0, alias="cashPnl")
    percent_pnl: float = Field(default=0.0, alias="percentPnl")
    total_bought: float = Field(default=0.0, alias="totalBought")
    realized_pnl: float = Field(default=0.0, alias="realizedPnl")
    cur_price: float = Field(default=0.0, alias="curPrice")
    title: str = ""
    slug: str = ""
    icon: str | None = None
    event_slug: str = Field(default="", alias="eventSlug")
    outcome: str = ""
    outcome_index: int = Field(default=0, alias="outcomeIndex")
    end_date: str | None = Field(default=None, alias="endDate")

    @field_validator(
        "size",
        "avg_price",
        "initial_value",
        "current_value",
        "cash_pnl",
        "percent_pnl",
        "total_bought",
        "realized_pnl",
        "cur_price",
        mode="before",
    )
    @classmethod
    def _numbers(cls, value):
        return _coerce_number(value)

    @field_validator("outcome_index", mode="before")
    @classmethod
    def _index(cls, value):
        return int(_coerce_number(value))

    @field_validator("title", "slug", "event_slug", "outcome", "asset", "condition_id", "proxy_wallet", mode="before")
    @classmethod
    def _text(cls, value):
        return "" if value is None else str(value)


class UserTrade(UpstreamModel):
    proxy_wallet: str = Field(default="", alias="proxyWallet")
    side: str = "BUY"
    asset: str = ""
    condition_id: str = Field(default="", alias="conditionId")
    size: float = 0.0
    price: float = 0.0
    timestamp: int | float | str | None = None
    title: str = ""
    slug: str = ""
    icon: str | None = None
    event_slug: str = Field(default="", alias="eventSlug")
    outcome: str = ""
    outcome_index: int = Field(default=0, alias="outcomeIndex")
    name: str | None = None
    transaction_hash: str | None = Field(default=None, alias="transactionHash")

    @field_validator("size", "price", mode="before")
    @classmethod
    def _numbers(cls, value):
        return _coerce_number(value)

    @field_validator("side", mode="before")
    @classmethod
    def _side(cls, value):
        return str(value or "BUY").upper()

    @field_validator("outcome_index", mode="before")
    @classmethod
    def _index(cls, value):
        return int(_coerce_number(value))

    @field_validator("title", "slug", "event_slug", "outcome", "asset", "condition_id", "proxy_wallet", mode="before")
    @classmethod
    def _text(cls, value):
        return "" if value is None else str(value)

    @property
    def notional(self) -> float:
        return self.size * self.price


class MarketHolder(UpstreamModel):
    proxy_wallet: str = Field(default="", alias="proxyWallet")
    name: str | None = None
    amount: float = 0.0
    outcome_index: int = Field(default=0, alias="outcomeIndex")

    @field_validator("amount", mode="before")
    @classmethod
    def _numbers(cls, value):
        return _coerce_number(value)

    @field_validator("outcome_index", mode="before")
    @classmethod
    def _index(cls, value):
        return int(_coerce_number(value))


class OrderBookEntry(UpstreamModel):
    price: float = 0.0
    size: float = 0.0

    @field_validator("price", "size", mode="before")
    @classmethod
    def _numbers(cls, value):
        return _coerce_number(value)


class OrderBook(UpstreamModel):
    bids: list[OrderBookEntry] = Field(default_factory=list)
    asks: list[OrderBookEntry] = Field(default_factory=list)

    @field_validator("bids", "asks", mode="before")
    @classmethod
    def _levels(cls, value):
        return value if isinstance(value, list) else []


def parse_items(model: type[UpstreamModel], payload: Any) -> list:
    """Validate a JSON array into models, skipping entries that are not objects."""
    if not isinstance(payload, list):
        return []
    return [model.model_validate(item) for item in payload if isinstance(item, dict)]
