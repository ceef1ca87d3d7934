from dataclasses import asdict

from ..core import categories, formatting, trader_metrics
from ..models import Profile, TrackedWallet
from ..polymarket.client import (
    PolymarketClient,
    build_leaderboard_params,
    build_positions_params,
    build_trades_params,
)
from ..polymarket.schemas import LeaderboardTrader, UserPosition, UserTrade, parse_items
from ..settings import settings
from .fanout import gather_legs

DASHBOARD_RECENT_TRADES = 5


def _first_trader(payload) -> LeaderboardTrader | None:
    traders = parse_items(LeaderboardTrader, payload)
    return traders[0] if traders else None


def trader_payload(trader: LeaderboardTrader | None) -> dict | None:
    if trader is None:
        return None
    return {
        "rank": trader.rank,
        "address": trader.proxy_wallet,
        "name": trader.user_name or formatting.format_address(trader.proxy_wallet),
        "profile_image": trader.profile_image,
        "x_username": trader.x_username,
        "verified": trader.verified_badge,
        "pnl": trader.pnl,
        "pnl_display": formatting.format_pnl(trader.pnl),
        "volume": trader.vol,
        "volume_display": formatting.format_volume(trader.vol),
    }


def position_payload(position: UserPosition) -> dict:
    return {
        "condition_id": position.condition_id,
        "title": position.title,
        "outcome": position.outcome,
        "outcome_index": position.outcome_index,
        "size": position.size,
        "avg_price": position.avg_price,
        "cur_price": position.cur_price,
        "current_value": position.current_value,
        "cash_pnl": position.cash_pnl,
        "cash_pnl_display": formatting.format_pnl(position.cash_pnl),
        "percent_pnl": position.percent_pnl,
        "category": categories.classify_title(position.title),
    }


def trade_payload(trade: UserTrade, now: int | None = None) -> dict:
    return {
        "side": trade.side,
        "title": trade.title,
        "outcome": trade.outcome,
        "size": trade.size,
        "price": trade.price,
        "notional": trade.notional,
        "notional_display": formatting.format_volume(trade.notional),
        "timestamp": formatting.normalize_timestamp(trade.timestamp, now),
        "time_ago": formatting.time_ago(trade.timestamp, now),
        "transaction_hash": trade.transaction_hash,
    }


async def _fetch_wallet_state(client: PolymarketClient, address: str, *, trades_limit: int, view: str) -> dict:
    legs = await gather_legs(
        view,
        {
            "leaderboard": (client.get_leaderboard(build_leaderboard_params(user=address, limit=1)), []),
            "positions": (
                client.get_positions(
                    build_positions_params(user=address, limit=settings.TRADER_POSITIONS_LIMIT)
                ),
                [],
            ),
            "trades": (client.get_trades(build_trades_params(user=address, limit=trades_limit)), []),
        },
    )
    return {
        "trader": _first_trader(legs["leaderboard"]),
        "positions": parse_items(UserPosition, legs["positions"]),
        "trades": parse_items(UserTrade, legs["trades"]),
    }


async def build_trader_summary(client: PolymarketClient, address: str, now: int | None = None) -> dict:
    state = await _fetch_wallet_state(
        client, address, trades_limit=settings.TRADER_TRADES_LIMIT, view="trader_summary"
    )
    trader: LeaderboardTrader | None = state["trader"]
    positions: list[UserPosition] = state["positions"]
    trades: list[UserTrade] = state["trades"]

    totals = trader_metrics.portfolio_totals(positions)
    win_rate = trader_metrics.win_rate(positions)
    pnl = trader.pnl if trader else 0.0
    volume = trader.vol if trader else 0.0

    curve = trader_metrics.build_equity_curve(trades, now)
    if trader is not None:
        curve = trader_metrics.rescale_equity_curve(curve, trader.pnl)
    returns = trader_metrics.daily_returns(curve)

    return {
        "address": address,
        "trader": trader_payload(trader),
        "kpis": {
            "pnl": pnl,
            "pnl_display": formatting.format_pnl(pnl),
            "volume": volume,
            "volume_display": formatting.format_volume(volume),
            "unrealized_pnl": totals.unrealized_pnl,
            "unrealized_pnl_display": formatting.format_pnl(totals.unrealized_pnl),
            "position_value": totals.position_value,
            "position_value_display": formatting.format_volume(totals.position_value),
            "open_positions": len(positions),
            "trade_count": len(trades),
            "win_rate": win_rate,
            "smart_score": trader_metrics.smart_score(pnl, volume, len(positions), win_rate),
        },
        "badges": [asdict(badge) for badge in trader_metrics.trader_badges(trader)] if trader else [],
        "equity_curve": [point.as_dict() for point in curve],
        "risk": {
            "sharpe": trader_metrics.sharpe_ratio(returns),
            "sortino": trader_metrics.sortino_ratio(returns),
        },
        "categories": categories.category_strengths(positions),
        "positions": [position_payload(p) for p in positions],
        "recent_trades": [trade_payload(t, now) for t in trades[: settings.TRADER_RECENT_TRADES]],
    }


async def build_dashboard(
    client: PolymarketClient,
    profile: Profile,
    *,
    following_count: int,
    tracked_count: int,
    now: int | None = None,
) -> dict:
    counts = {"following": following_count, "tracked_wallets": tracked_count}
    address = profile.polymarket_wallet
    if not address:
        return {"wallet": None, "counts": counts}

    state = await _fetch_wallet_state(
        client, address, trades_limit=settings.DASHBOARD_TRADES_LIMIT, view="dashboard"
    )
    trader: LeaderboardTrader | None = state["trader"]
    positions: list[UserPosition] = state["positions"]
    trades: list[UserTrade] = state["trades"]
    totals = trader_metrics.portfolio_totals(positions)

    return {
        "wallet": {
            "address": address,
            "trader": trader_payload(trader),
            "unrealized_pnl": totals.unrealized_pnl,
            "unrealized_pnl_display": formatting.format_pnl(totals.unrealized_pnl),
            "position_value": totals.position_value,
            "position_value_display": formatting.format_volume(totals.position_value),
            "open_positions": len(positions),
            "win_rate": trader_metrics.win_rate(positions),
            "monthly_performance": trader_metrics.monthly_performance(trades, now=now),
            "top_positions": [position_payload(p) for p in positions[:DASHBOARD_RECENT_TRADES]],
            "recent_trades": [trade_payload(t, now) for t in trades[:DASHBOARD_RECENT_TRADES]],
        },
        "counts": counts,
    }


async def _wallet_overview(client: PolymarketClient, wallet: TrackedWallet, now: int | None) -> dict:
    address = wallet.wallet_address
    legs = await gather_legs(
        "wallet_overview",
        {
            "leaderboard": (client.get_leaderboard(build_leaderboard_params(user=address, limit=1)), []),
            "trades": (
                client.get_trades(
                    build_trades_params(user=address, limit=settings.WALLET_RECENT_TRADES_LIMIT)
                ),
                [],
            ),
        },
    )
    trader = _first_trader(legs["leaderboard"])
    trades = parse_items(UserTrade, legs["trades"])
    label = wallet.label or (trader.user_name if trader else None) or formatting.format_address(address)
    return {
        "id": str(wallet.id),
        "address": address,
        "label": label,
        "alerts_enabled": wallet.alerts_enabled,
        "rank": trader.rank if trader else None,
        "pnl": trader.pnl if trader else 0.0,
        "pnl_display": formatting.format_pnl(trader.pnl if trader else 0.0),
        "volume": trader.vol if trader else 0.0,
        "volume_display": formatting.format_volume(trader.vol if trader else 0.0),
        "recent_trades": [trade_payload(t, now) for t in trades],
    }


async def build_wallets_overview(
    client: PolymarketClient,
    wallets: list[TrackedWallet],
    now: int | None = None,
) -> list[dict]:
    legs = await gather_legs(
        "wallets_overview",
        {str(wallet.id): (_wallet_overview(client, wallet, now), None) for wallet in wallets},
    )
    return [legs[str(wallet.id)] for wallet in wallets if legs[str(wallet.id)] is not None]
