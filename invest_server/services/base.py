"""Shared service orchestration helpers."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from invest_server.cache.ttl_cache import TTLCache
from invest_server.utils.rate_limit import RateLimiterRegistry

SYMBOL_PATTERN = re.compile(r"^[A-Z0-9^][A-Z0-9.\-&^=_]{0,19}$")
T = TypeVar("T")


class ClientInputError(ValueError):
    """Missing or malformed caller input; reported, never retried."""

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        super().__init__(message or code)


@dataclass
class ErrorEnvelope:
    code: str
    message: str
    retriable: bool = True
    provider: str | None = None


@dataclass
class ServiceResult(Generic[T]):
    data: T | None
    source: str | None = None
    warning: str | None = None
    error: ErrorEnvelope | None = None
    fetched_at: float | None = None


@dataclass
class ServiceContext:
    providers: dict[str, object]
    cache: TTLCache
    rate_limiter: RateLimiterRegistry
    cache_ttl_seconds: int = 60
    server_metrics: object | None = None

    def get_provider(self, name: str) -> object | None:
        return self.providers.get(name)


def validate_symbol(symbol: str) -> str:
    clean = (symbol or "").strip().upper()
    if not clean:
        raise ClientInputError("symbol_required", "A ticker symbol is required.")
    if not SYMBOL_PATTERN.match(clean):
        raise ClientInputError("invalid_symbol", f"Invalid ticker symbol: {clean}")
    return clean


def split_symbols(raw: str | list[str] | None) -> list[str]:
    """Split a comma-separated string (or list) into trimmed, non-empty symbols."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    return [part.strip() for part in parts if part and part.strip()]


def run_with_cache(
    ctx: ServiceContext,
    cache_key: str,
    call: Callable[[], ServiceResult[T]],
    ttl_seconds: int | None = None,
) -> ServiceResult[T]:
    """Serve ``call`` through the context cache; absent results are not stored."""
    cached = ctx.cache.get(cache_key)
    if isinstance(cached, ServiceResult):
        return cached
    value = call()
    value.fetched_at = value.fetched_at or time.time()
    if value.data is not None:
        ctx.cache.set(cache_key, value, ttl_seconds=ttl_seconds or ctx.cache_ttl_seconds)
    return value
