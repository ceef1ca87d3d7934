import math
from datetime import datetime, timezone

import pytest

from vantake.core.trader_metrics import (
    EquityPoint,
    build_equity_curve,
    daily_returns,
    monthly_performance,
    portfolio_totals,
    rescale_equity_curve,
    sharpe_ratio,
    smart_score,
    sortino_ratio,
    trader_badges,
    win_rate,
)
from vantake.polymarket.schemas import LeaderboardTrader, UserPosition, UserTrade


def _ts(day: int, hour: int = 12, month: int = 10) -> int:
    return int(datetime(2026, month, day, hour, tzinfo=timezone.utc).timestamp())


def _trade(side: str, size: float, price: float, ts) -> UserTrade:
    return UserTrade.model_validate({"side": side, "size": size, "price": price, "timestamp": ts})


def _points(values: list[float]) -> list[EquityPoint]:
    points = []
    previous = 0.0
    for i, value in enumerate(values):
        points.append(EquityPoint(f"2026-10-{i + 1:02d}", f"Oct {i + 1}", value - previous, value))
        previous = value
    return points


def test_equity_curve_groups_by_day_and_signs_sides():
    trades = [
        _trade("BUY", 100, 0.5, _ts(2, 9)),
        _trade("SELL", 100, 0.8, _ts(2, 15)),
        _trade("sell", 10, 1.0, _ts(1)),
    ]
    curve = build_equity_curve(trades)

    assert [p.date for p in curve] == ["2026-10-01", "2026-10-02"]
    assert [p.label for p in curve] == ["Oct 1", "Oct 2"]
    assert curve[0].daily_pnl == pytest.approx(10.0)
    assert curve[1].daily_pnl == pytest.approx(30.0)
    assert curve[-1].value == pytest.approx(40.0)


def test_equity_curve_empty():
    assert build_equity_curve([]) == []
    assert rescale_equity_curve([], 1000) == []


def test_rescale_final_value_matches_authoritative_pnl():
    curve = rescale_equity_curve(_points([10.0, -5.0, 20.0]), 1000.0)
    assert curve[-1].value == pytest.approx(1000.0)
    assert curve[0].value == pytest.approx(500.0)


def test_rescale_interpolates_when_raw_final_is_zero():
    curve = rescale_equity_curve(_points([10.0, -10.0, 0.0, 0.0]), 400.0)
    assert curve[-1].value == pytest.approx(400.0)
    assert [p.value for p in curve] == pytest.approx([110.0, 190.0, 300.0, 400.0])


def test_rescale_interpolates_when_authoritative_is_zero():
    curve = rescale_equity_curve(_points([50.0, 100.0]), 0.0)
    assert curve[-1].value == pytest.approx(0.0)
    assert all(math.isfinite(p.value) for p in curve)


def test_ratios_need_two_points():
    assert sharpe_ratio([]) == 0.0
    assert sharpe_ratio([5.0]) == 0.0
    assert sortino_ratio([5.0]) == 0.0


def test_ratios_with_zero_deviation_use_unit_denominator():
    assert sharpe_ratio([3.0, 3.0, 3.0]) == pytest.approx(3.0)
    assert sortino_ratio([3.0, 3.0]) == pytest.approx(3.0)


def test_sortino_only_penalizes_downside():
    returns = daily_returns(_points([10.0, 5.0, 25.0]))
    assert returns == pytest.approx([10.0, -5.0, 20.0])
    assert sortino_ratio(returns) == pytest.approx((25.0 / 3) / 5.0)
    assert sharpe_ratio(returns) > 0


def test_smart_score_components():
    assert smart_score(0, 0, 0, 0) == 50.0
    assert smart_score(10_000, 100_000, 0, 0) == 60.0
    # 30% return on volume saturates the profit component.
    assert smart_score(30_000, 100_000, 0, 0) == 80.0
    assert smart_score(90_000, 100_000, 0, 0) == 80.0
    assert smart_score(-50_000, 100_000, 0, 0) == 30.0
    assert smart_score(0, 100, 40, 0) == 60.0
    assert smart_score(0, 100, 0, 100) == 70.0


def test_smart_score_is_bounded_and_finite():
    assert smart_score(1e12, 1, 1000, 100) == 100.0
    assert 0.0 <= smart_score(-1e12, 1, 0, 0) <= 100.0
    assert smart_score(float("nan"), float("inf"), None, "x") == 50.0


def test_win_rate_and_totals():
    positions = [
        UserPosition.model_validate({"cashPnl": 10, "currentValue": 100}),
        UserPosition.model_validate({"cashPnl": -5, "currentValue": "50"}),
        UserPosition.model_validate({"cashPnl": None, "currentValue": None}),
        UserPosition.model_validate({"cashPnl": 1}),
    ]
    assert win_rate(positions) == pytest.approx(50.0)
    assert win_rate([]) == 0.0
    totals = portfolio_totals(positions)
    assert totals.unrealized_pnl == pytest.approx(6.0)
    assert totals.position_value == pytest.approx(150.0)


def test_badges_keep_first_three():
    trader = LeaderboardTrader.model_validate({"rank": "1", "vol": 20_000_000, "pnl": 600_000})
    labels = [badge.label for badge in trader_badges(trader)]
    assert labels == ["Top 1", "High Roller", "Alpha Hunter"]


def test_badges_tiers():
    mid = LeaderboardTrader.model_validate({"rank": 17, "vol": 150_000, "pnl": 20_000})
    assert [b.label for b in trader_badges(mid)] == ["Top 25", "Active", "In Profit"]

    unranked = LeaderboardTrader.model_validate({"rank": 80, "vol": 10, "pnl": -5})
    assert trader_badges(unranked) == []


def test_monthly_performance_groups_by_month():
    trades = [
        _trade("SELL", 10, 1.0, _ts(5, month=9)),
        _trade("BUY", 10, 0.5, _ts(6, month=9)),
        _trade("SELL", 20, 0.5, _ts(1, month=10)),
    ]
    rows = monthly_performance(trades)
    assert [row["month"] for row in rows] == ["2026-09", "2026-10"]
    assert [row["label"] for row in rows] == ["Sep", "Oct"]
    assert [row["pnl"] for row in rows] == pytest.approx([5.0, 10.0])
    assert monthly_performance(trades, months=1)[0]["month"] == "2026-10"
