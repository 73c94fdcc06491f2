"""Quote resolution across the primary and bulk providers."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor

from invest_server.providers.alpha_vantage import AlphaVantageClient
from invest_server.providers.models import NormalizedQuote
from invest_server.providers.yahoo_finance import BulkQuoteClient
from invest_server.services.base import (
    ClientInputError,
    ServiceContext,
    ServiceResult,
    run_with_cache,
    split_symbols,
    validate_symbol,
)
from invest_server.services.fallback_manager import FallbackManager, ProviderAttempt
from invest_server.services.provider_status import ProviderStatus
from invest_server.services.symbols import symbol_candidates

LOGGER = logging.getLogger(__name__)
PRIMARY_KEY = "alphavantage"
PRIMARY_LABEL = "Alpha Vantage"
BULK_KEY = "yahoo"
BULK_LABEL = "Yahoo Finance"


def _base_symbol(symbol: str) -> str:
    return symbol.split(".", 1)[0].upper()


def _pick_bulk_match(quotes: list[NormalizedQuote], symbol: str) -> NormalizedQuote | None:
    """Exact symbol first, then the same base ticker on any exchange; else absent."""
    for quote in quotes:
        if quote.symbol.upper() == symbol:
            return quote
    base = _base_symbol(symbol)
    for quote in quotes:
        if _base_symbol(quote.symbol) == base:
            return quote
    return None


def _valid_symbols(items: list[str]) -> list[str]:
    valid: list[str] = []
    for item in items:
        try:
            valid.append(validate_symbol(item))
        except ClientInputError:
            LOGGER.info("dropping malformed symbol from list: symbol=%s", item)
    return valid


class QuoteService:
    """Resolves tickers to normalized quotes, primary provider first.

    The primary provider is tried once per exchange candidate and the first
    hit wins. When it is not configured, benched after a rate limit, or finds
    nothing, the bulk provider is asked for the bare symbol instead.
    """

    def __init__(
        self,
        ctx: ServiceContext,
        max_concurrency: int = 4,
        bulk_threshold: int = 5,
        cache_ttl_seconds: int = 15,
        rate_limit_disable_seconds: int = 60,
    ) -> None:
        self.ctx = ctx
        self.max_concurrency = max(1, max_concurrency)
        self.bulk_threshold = max(0, bulk_threshold)
        self.cache_ttl_seconds = cache_ttl_seconds
        status = self.ctx.get_provider("provider_status")
        if not isinstance(status, ProviderStatus):
            status = ProviderStatus()
            self.ctx.providers["provider_status"] = status
        self.fallback_manager = FallbackManager(
            ctx=self.ctx,
            provider_status=status,
            rate_limit_disable_seconds={PRIMARY_KEY: rate_limit_disable_seconds},
        )

    def _primary(self) -> AlphaVantageClient | None:
        client = self.ctx.get_provider(PRIMARY_KEY)
        return client if isinstance(client, AlphaVantageClient) else None

    def _bulk(self) -> BulkQuoteClient | None:
        client = self.ctx.get_provider(BULK_KEY)
        return client if isinstance(client, BulkQuoteClient) else None

    def _primary_attempts(self, symbol: str) -> list[ProviderAttempt[NormalizedQuote]]:
        primary = self._primary()
        if primary is None:
            return []
        return [
            ProviderAttempt(PRIMARY_KEY, PRIMARY_LABEL, lambda candidate=candidate: primary.get_quote(candidate))
            for candidate in symbol_candidates(symbol)
        ]

    def _bulk_attempt(self, symbol: str) -> ProviderAttempt[NormalizedQuote]:
        def _call() -> NormalizedQuote | None:
            bulk = self._bulk()
            if bulk is None:
                return None
            return _pick_bulk_match(bulk.get_quotes([symbol]), symbol)

        return ProviderAttempt(BULK_KEY, BULK_LABEL, _call)

    def resolve(self, raw_symbol: str) -> ServiceResult[NormalizedQuote]:
        """Resolve one ticker; ``data`` is None when every provider came up empty."""
        symbol = validate_symbol(raw_symbol)
        return run_with_cache(
            self.ctx,
            f"quote:{symbol}",
            lambda: self.fallback_manager.execute(
                operation="resolve_quote",
                subject=symbol,
                attempts=[*self._primary_attempts(symbol), self._bulk_attempt(symbol)],
            ),
            ttl_seconds=self.cache_ttl_seconds,
        )

    def _resolve_primary(self, symbol: str) -> ServiceResult[NormalizedQuote]:
        return self.fallback_manager.execute(
            operation="resolve_quote_primary",
            subject=symbol,
            attempts=self._primary_attempts(symbol),
        )

    def _use_primary_for(self, symbols: list[str]) -> bool:
        if self._primary() is None or not symbols:
            return False
        if self.fallback_manager.provider_status.is_disabled(PRIMARY_KEY):
            return False
        return len(symbols) <= self.bulk_threshold

    def resolve_many(self, symbols: str | list[str] | None) -> ServiceResult[list[NormalizedQuote]]:
        """Resolve a symbol list, keeping input order and dropping misses and malformed entries.

        Short lists go to the primary provider concurrently, capped at
        ``max_concurrency``; the rate limiter additionally spaces the calls.
        Whatever the primary misses, and every list longer than
        ``bulk_threshold``, is served by one bulk request.
        """
        requested = list(dict.fromkeys(_valid_symbols(split_symbols(symbols))))
        if not requested:
            raise ClientInputError("symbols_required", "At least one symbol is required.")

        found: dict[str, NormalizedQuote] = {}
        sources: list[str] = []
        for symbol in requested:
            cached = self.ctx.cache.get(f"quote:{symbol}")
            if isinstance(cached, ServiceResult) and cached.data is not None:
                found[symbol] = cached.data
                if cached.source and cached.source not in sources:
                    sources.append(cached.source)

        pending = [symbol for symbol in requested if symbol not in found]
        if self._use_primary_for(pending):
            workers = min(self.max_concurrency, len(pending))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(self._resolve_primary, pending))
            for symbol, result in zip(pending, results):
                if result.data is None:
                    continue
                found[symbol] = result.data
                self.ctx.cache.set(f"quote:{symbol}", result, ttl_seconds=self.cache_ttl_seconds)
                if PRIMARY_LABEL not in sources:
                    sources.append(PRIMARY_LABEL)

        missing = [symbol for symbol in requested if symbol not in found]
        extras: list[NormalizedQuote] = []
        if missing:
            bulk_result = self.fallback_manager.execute(
                operation="resolve_quotes_bulk",
                subject=",".join(missing),
                attempts=[
                    ProviderAttempt(
                        BULK_KEY,
                        BULK_LABEL,
                        lambda: (self._bulk().get_quotes(missing) or None) if self._bulk() else None,
                    )
                ],
            )
            wanted = set(missing)
            for quote in bulk_result.data or []:
                key = quote.symbol.upper()
                if key not in wanted:
                    key = _base_symbol(key)
                if key in wanted and key not in found:
                    found[key] = quote
                else:
                    extras.append(quote)
            if bulk_result.data and BULK_LABEL not in sources:
                sources.append(BULK_LABEL)

        quotes = [found[symbol] for symbol in requested if symbol in found] + extras
        LOGGER.info(
            "resolved quote list: requested=%s resolved=%s sources=%s",
            len(requested),
            len(quotes),
            ",".join(sources) or "none",
        )
        return ServiceResult(data=quotes, source=", ".join(sources) or None, fetched_at=time.time())
