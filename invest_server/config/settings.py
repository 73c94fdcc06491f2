"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_OWNER_ID = "507f1f77bcf86cd799439011"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the quote and portfolio server."""

    app_name: str = "invest-dashboard-server"
    app_version: str = "1.0.0"
    transport_mode: str = "auto"
    host: str = "0.0.0.0"
    port: int = 8000
    health_path: str = "/health"
    log_level: str = "INFO"
    alphavantage_api_key: str | None = None
    market_api_url: str | None = None
    quote_api_url: str | None = None
    request_timeout_seconds: float = 10.0
    primary_max_concurrency: int = 4
    primary_bulk_threshold: int = 5
    provider_min_interval_seconds: float = 0.2
    provider_rate_limit_disable_seconds: int = 60
    cache_ttl_seconds: int = 60
    cache_ttl_quote_seconds: int = 15
    market_timezone: str = "Asia/Kolkata"
    default_owner_id: str = DEFAULT_OWNER_ID
    price_source: str = "simulated"


def _as_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _as_optional(value: str | None) -> str | None:
    if value is None:
        return None
    clean = value.strip()
    return clean or None


def get_settings() -> Settings:
    """Load runtime settings from environment variables."""
    load_dotenv()

    return Settings(
        transport_mode=os.getenv("TRANSPORT_MODE", "auto").strip().lower(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_as_int(os.getenv("PORT"), 8000),
        health_path=os.getenv("HEALTH_PATH", "/health"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        alphavantage_api_key=_as_optional(
            os.getenv("ALPHAVANTAGE_API_KEY") or os.getenv("ALPHA_VANTAGE_API_KEY")
        ),
        market_api_url=_as_optional(os.getenv("MARKET_API_URL")),
        quote_api_url=_as_optional(os.getenv("QUOTE_API_URL")),
        request_timeout_seconds=_as_float(os.getenv("REQUEST_TIMEOUT_SECONDS"), 10.0),
        primary_max_concurrency=_as_int(os.getenv("PRIMARY_MAX_CONCURRENCY"), 4),
        primary_bulk_threshold=_as_int(os.getenv("PRIMARY_BULK_THRESHOLD"), 5),
        provider_min_interval_seconds=_as_float(os.getenv("PROVIDER_MIN_INTERVAL_SECONDS"), 0.2),
        provider_rate_limit_disable_seconds=_as_int(os.getenv("PROVIDER_RATE_LIMIT_DISABLE_SECONDS"), 60),
        cache_ttl_seconds=_as_int(os.getenv("CACHE_TTL_SECONDS"), 60),
        cache_ttl_quote_seconds=_as_int(os.getenv("CACHE_TTL_QUOTE_SECONDS"), 15),
        market_timezone=os.getenv("MARKET_TIMEZONE", "Asia/Kolkata").strip() or "Asia/Kolkata",
        default_owner_id=os.getenv("DEFAULT_OWNER_ID", DEFAULT_OWNER_ID),
        price_source=os.getenv("PRICE_SOURCE", "simulated").strip().lower() or "simulated",
    )
