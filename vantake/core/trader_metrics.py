import math
import statistics
from dataclasses import asdict, dataclass
from typing import Iterable, Sequence

from ..polymarket.schemas import LeaderboardTrader, UserPosition, UserTrade
from .formatting import format_short_date, normalize_timestamp, to_datetime

SMART_SCORE_BASE = 50.0
SMART_SCORE_MAX_PROFIT = 30.0
SMART_SCORE_MAX_LOSS = 20.0
SMART_SCORE_MAX_ACTIVITY = 10.0
SMART_SCORE_POINTS_PER_POSITION = 0.5
SMART_SCORE_MAX_WIN_RATE = 20.0
MAX_BADGES = 3


@dataclass(frozen=True)
class EquityPoint:
    date: str
    label: str
    daily_pnl: float
    value: float

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Badge:
    label: str
    icon: str
    tone: str


@dataclass(frozen=True)
class PortfolioTotals:
    unrealized_pnl: float
    position_value: float


def _finite(value) -> float:
    try:
        number = float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def trade_cash_flow(trade: UserTrade) -> float:
    """SELL brings cash in, BUY spends it."""
    amount = _finite(trade.size) * _finite(trade.price)
    return amount if trade.side == "SELL" else -amount


def build_equity_curve(trades: Iterable[UserTrade], now: int | None = None) -> list[EquityPoint]:
    daily: dict[str, float] = {}
    labels: dict[str, str] = {}
    for trade in sorted(trades, key=lambda t: normalize_timestamp(t.timestamp, now)):
        dt = to_datetime(trade.timestamp, now)
        day = dt.date().isoformat()
        if day not in daily:
            daily[day] = 0.0
            labels[day] = format_short_date(trade.timestamp)
        daily[day] += trade_cash_flow(trade)

    points: list[EquityPoint] = []
    running = 0.0
    for day, delta in daily.items():
        running += delta
        points.append(EquityPoint(date=day, label=labels[day], daily_pnl=delta, value=running))
    return points


def rescale_equity_curve(points: Sequence[EquityPoint], authoritative_pnl: float) -> list[EquityPoint]:
    """Anchor the trade-implied curve so its last value equals the leaderboard PnL."""
    if not points:
        return []
    target = _finite(authoritative_pnl)
    raw_final = points[-1].value
    if raw_final != 0 and target != 0:
        factor = target / raw_final
        return [
            EquityPoint(p.date, p.label, p.daily_pnl * factor, p.value * factor)
            for p in points
        ]

    # Ratio is undefined; spread the gap linearly so the last point lands on target.
    gap = target - raw_final
    count = len(points)
    rescaled: list[EquityPoint] = []
    previous = 0.0
    for i, p in enumerate(points):
        value = p.value + gap * (i + 1) / count
        rescaled.append(EquityPoint(p.date, p.label, value - previous, value))
        previous = value
    return rescaled


def daily_returns(points: Sequence[EquityPoint]) -> list[float]:
    return [p.daily_pnl for p in points]


def sharpe_ratio(returns: Sequence[float]) -> float:
    if len(returns) < 2:
        return 0.0
    deviation = statistics.pstdev(returns)
    return statistics.fmean(returns) / (deviation or 1.0)


def sortino_ratio(returns: Sequence[float]) -> float:
    if len(returns) < 2:
        return 0.0
    downside = [r for r in returns if r < 0]
    deviation = math.sqrt(sum(r * r for r in downside) / len(downside)) if downside else 0.0
    return statistics.fmean(returns) / (deviation or 1.0)


def win_rate(positions: Sequence[UserPosition]) -> float:
    if not positions:
        return 0.0
    winners = sum(1 for p in positions if _finite(p.cash_pnl) > 0)
    return winners / len(positions) * 100


def portfolio_totals(positions: Iterable[UserPosition]) -> PortfolioTotals:
    unrealized = 0.0
    value = 0.0
    for p in positions:
        unrealized += _finite(p.cash_pnl)
        value += _finite(p.current_value)
    return PortfolioTotals(unrealized_pnl=unrealized, position_value=value)


def smart_score(pnl, volume, open_positions, win_rate_pct) -> float:
    pnl = _finite(pnl)
    volume = _finite(volume)
    ratio = pnl / volume if volume > 0 else 0.0

    score = SMART_SCORE_BASE
    if ratio >= 0:
        score += min(SMART_SCORE_MAX_PROFIT, ratio * 100)
    else:
        score -= min(SMART_SCORE_MAX_LOSS, abs(ratio) * 100)
    score += min(SMART_SCORE_MAX_ACTIVITY, max(_finite(open_positions), 0.0) * SMART_SCORE_POINTS_PER_POSITION)
    score += min(SMART_SCORE_MAX_WIN_RATE, max(_finite(win_rate_pct), 0.0) / 5)
    return round(max(0.0, min(100.0, score)), 1)


def trader_badges(trader: LeaderboardTrader, rank: int | None = None) -> list[Badge]:
    rank = rank or trader.rank or 0
    badges: list[Badge] = []

    if rank == 1:
        badges.append(Badge("Top 1", "crown", "gold"))
    elif rank == 2:
        badges.append(Badge("Top 2", "crown", "silver"))
    elif rank == 3:
        badges.append(Badge("Top 3", "crown", "bronze"))
    elif 0 < rank <= 10:
        badges.append(Badge("Top 10", "flame", "orange"))
    elif 0 < rank <= 25:
        badges.append(Badge("Top 25", "flame", "orange-muted"))

    if trader.vol > 10_000_000:
        badges.append(Badge("High Roller", "gem", "amber"))
    elif trader.vol > 1_000_000:
        badges.append(Badge("Big Player", "zap", "blue"))
    elif trader.vol > 100_000:
        badges.append(Badge("Active", "activity", "cyan"))

    if trader.pnl > 500_000:
        badges.append(Badge("Alpha Hunter", "target", "violet"))
    elif trader.pnl > 100_000:
        badges.append(Badge("Consistent", "shield", "emerald"))
    elif trader.pnl > 10_000:
        badges.append(Badge("In Profit", "shield", "green"))
    elif trader.pnl > 0:
        badges.append(Badge("Positive", "shield", "green-muted"))

    return badges[:MAX_BADGES]


def monthly_performance(trades: Iterable[UserTrade], months: int = 6, now: int | None = None) -> list[dict]:
    totals: dict[str, float] = {}
    for trade in trades:
        dt = to_datetime(trade.timestamp, now)
        key = f"{dt.year}-{dt.month:02d}"
        totals[key] = totals.get(key, 0.0) + trade_cash_flow(trade)
    ordered = sorted(totals.items())[-months:] if months > 0 else []
    return [
        {"month": key, "label": to_datetime(f"{key}-01T00:00:00Z").strftime("%b"), "pnl": pnl}
        for key, pnl in ordered
    ]
