"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from techsignal.core.models import Timeframe


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TECHSIGNAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # CoinGecko API
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coingecko_api_key: str = ""
    vs_currency: str = "usd"
    request_timeout: float = 30.0

    # Rate-limit handling (HTTP 429 only)
    rate_limit_retries: int = 2
    rate_limit_base_delay: float = 2.0  # seconds, multiplied by attempt number

    # Price history cache (0 disables)
    price_cache_ttl: float = 300.0
    price_cache_max_entries: int = 100

    # Indicator engine
    min_samples: int = 200  # MA200 needs 200 bars
    lookback_safety_factor: float = 1.2  # 200 hourly bars -> 10 days
    default_timeframe: Timeframe = Timeframe.H4
    macd_signal_mode: Literal["approximate", "ema"] = "approximate"

    # EVM JSON-RPC log walk
    rpc_url: str = "https://api.avax.network/ext/bc/C/rpc"
    log_chunk_size: int = 2000
    log_limit: int = 5
    log_max_chunks: int = 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
