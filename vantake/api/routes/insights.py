import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...auth import is_wallet_address
from ...cache import cached_json_response, default_ttl
from ...db import get_db
from ...deps import get_polymarket_client
from ...errors import ApiError
from ...models import FollowedTrader, Profile, TrackedWallet
from ...polymarket.client import PolymarketClient, UpstreamError
from ...services import market_service, trader_service
from ...services.sessions_service import require_user
from .wallets import list_user_wallets

logger = logging.getLogger(__name__)

router = APIRouter(tags=["insights"])

MAX_WATCH_ADDRESSES = 100


@router.get("/traders/{address}/summary")
async def trader_summary(
    request: Request,
    address: str,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    if not is_wallet_address(address):
        raise HTTPException(status_code=400, detail="invalid_wallet_address")
    payload = await trader_service.build_trader_summary(client, address.lower())
    return cached_json_response(request, payload, ttl_seconds=default_ttl())


@router.get("/markets/{market_id}/summary")
async def market_summary(
    request: Request,
    market_id: str,
    client: PolymarketClient = Depends(get_polymarket_client),
):
    try:
        payload = await market_service.build_market_summary(client, market_id)
    except UpstreamError as exc:
        raise ApiError(exc.status_code, str(exc))
    except (httpx.HTTPError, ValueError):
        logger.exception("market_summary_failed market_id=%s", market_id)
        raise ApiError(500, "Failed to fetch market")
    return cached_json_response(request, payload, ttl_seconds=default_ttl())


@router.get("/dashboard/me")
async def dashboard(
    profile: Profile = Depends(require_user),
    db: Session = Depends(get_db),
    client: PolymarketClient = Depends(get_polymarket_client),
):
    following = db.query(func.count(FollowedTrader.id)).filter(FollowedTrader.user_id == profile.id).scalar()
    tracked = db.query(func.count(TrackedWallet.id)).filter(TrackedWallet.user_id == profile.id).scalar()
    return await trader_service.build_dashboard(
        client,
        profile,
        following_count=following or 0,
        tracked_count=tracked or 0,
    )


@router.get("/wallets/overview")
async def wallets_overview(
    profile: Profile = Depends(require_user),
    db: Session = Depends(get_db),
    client: PolymarketClient = Depends(get_polymarket_client),
):
    wallets = list_user_wallets(db, profile)
    return await trader_service.build_wallets_overview(client, wallets)


@router.get("/me/watch-status")
def watch_status(
    addresses: str = "",
    profile: Profile = Depends(require_user),
    db: Session = Depends(get_db),
):
    requested = [part.strip().lower() for part in addresses.split(",") if part.strip()]
    requested = list(dict.fromkeys(requested))[:MAX_WATCH_ADDRESSES]
    if not requested:
        return {}

    followed = {
        row.trader_address
        for row in db.query(FollowedTrader.trader_address)
        .filter(FollowedTrader.user_id == profile.id, FollowedTrader.trader_address.in_(requested))
        .all()
    }
    tracked = {
        row.wallet_address
        for row in db.query(TrackedWallet.wallet_address)
        .filter(TrackedWallet.user_id == profile.id, TrackedWallet.wallet_address.in_(requested))
        .all()
    }
    return {
        address: {"following": address in followed, "tracking": address in tracked}
        for address in requested
    }
