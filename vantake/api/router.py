from fastapi import APIRouter

from .routes import auth, follows, health, insights, notifications, polymarket, profile, ticker, wallets

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(polymarket.router)
api_router.include_router(auth.router)
api_router.include_router(profile.router)
api_router.include_router(follows.router)
api_router.include_router(insights.router)
api_router.include_router(wallets.router)
api_router.include_router(notifications.router)
api_router.include_router(ticker.router)
