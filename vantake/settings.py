from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        enable_decoding=False,
    )

    ENV: str = "dev"
    DATABASE_URL: str
    DB_STATEMENT_TIMEOUT_SECONDS: float = 10.0
    CORS_ALLOW_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    SESSION_COOKIE_NAME: str = "vantake_session"
    SESSION_TTL_DAYS: int = 14

    GAMMA_API_BASE: str = "https://gamma-api.polymarket.com"
    CLOB_API_BASE: str = "https://clob.polymarket.com"
    DATA_API_BASE: str = "https://data-api.polymarket.com"
    UPSTREAM_TIMEOUT_SECONDS: float = 15.0

    CACHE_TTL_LIVE_SECONDS: int = 10
    CACHE_TTL_DEFAULT_SECONDS: int = 60
    CACHE_TTL_TAGS_SECONDS: int = 3600
    CACHE_TTL_PROFILE_SECONDS: int = 300

    TICKER_URL: str = (
        "https://api.coingecko.com/api/v3/simple/price"
        "?ids=bitcoin,ethereum,matic-network&vs_currencies=usd&include_24hr_change=true"
    )
    TICKER_TIMEOUT_SECONDS: float = 5.0

    TRADER_TRADES_LIMIT: int = 500
    TRADER_POSITIONS_LIMIT: int = 100
    TRADER_RECENT_TRADES: int = 20
    DASHBOARD_TRADES_LIMIT: int = 100
    WALLET_RECENT_TRADES_LIMIT: int = 10

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    HTTPX_SLOW_REQUEST_THRESHOLD_SECONDS: float = 2.0

    @field_validator("CORS_ALLOW_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if value is None:
            return value
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(",") if part.strip()]
            return parts
        return value

    @field_validator("GAMMA_API_BASE", "CLOB_API_BASE", "DATA_API_BASE", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

settings = Settings()
