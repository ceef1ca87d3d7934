from fastapi import APIRouter, Depends, Request

from ...cache import cached_json_response, live_ttl
from ...deps import get_ticker_client
from ...services.ticker_service import TickerClient

router = APIRouter(tags=["ticker"])


@router.get("/ticker")
async def ticker(request: Request, client: TickerClient = Depends(get_ticker_client)):
    rows = await client.fetch_rows()
    return cached_json_response(request, rows, ttl_seconds=live_ttl())
