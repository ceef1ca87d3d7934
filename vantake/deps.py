from .polymarket.client import PolymarketClient
from .services.sessions_service import get_session_token, require_user
from .services.ticker_service import TickerClient


def get_polymarket_client() -> PolymarketClient:
    return PolymarketClient()


def get_ticker_client() -> TickerClient:
    return TickerClient()


__all__ = [
    "get_polymarket_client",
    "get_session_token",
    "get_ticker_client",
    "require_user",
]
