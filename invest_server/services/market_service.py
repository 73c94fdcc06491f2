"""Market overview: live bulk quotes with a mock board as fallback."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from invest_server.providers.models import MarketQuote, MarketSnapshot, MarketStatus
from invest_server.providers.yahoo_finance import YAHOO_QUOTE_URL, BulkQuoteClient, build_bulk_url
from invest_server.services.base import ServiceContext, ServiceResult
from invest_server.services.catalog import ReferenceCatalog
from invest_server.services.fallback_manager import FallbackManager, ProviderAttempt
from invest_server.services.provider_status import ProviderStatus

LOGGER = logging.getLogger(__name__)
WATCHLIST = [
    "RELIANCE.NS",
    "TCS.NS",
    "INFY.NS",
    "HDFCBANK.NS",
    "ICICIBANK.NS",
    "ITC.NS",
    "SBIN.NS",
    "ASIANPAINT.NS",
    "MARUTI.NS",
]
MOVERS_LIMIT = 5
TRENDING_LIMIT = 10
MARKET_OPEN_HOUR = 9
MARKET_CLOSE_HOUR = 16
NEXT_SESSION = "9:15 AM IST"


def top_gainers(quotes: list[MarketQuote], limit: int = MOVERS_LIMIT) -> list[MarketQuote]:
    rising = [q for q in quotes if q.change_percent is not None and q.change_percent > 0]
    # sorted() is stable with reverse=True, so ties keep input order
    return sorted(rising, key=lambda q: q.change_percent, reverse=True)[:limit]


def top_losers(quotes: list[MarketQuote], limit: int = MOVERS_LIMIT) -> list[MarketQuote]:
    falling = [q for q in quotes if q.change_percent is not None and q.change_percent < 0]
    return sorted(falling, key=lambda q: q.change_percent)[:limit]


class MarketService:
    def __init__(
        self,
        ctx: ServiceContext,
        catalog: ReferenceCatalog,
        market_api_url: str | None = None,
        timezone_name: str = "Asia/Kolkata",
        clock: Callable[[ZoneInfo], datetime] | None = None,
    ) -> None:
        self.ctx = ctx
        self.catalog = catalog
        self.market_api_url = market_api_url
        self.timezone = ZoneInfo(timezone_name)
        self._clock = clock or (lambda tz: datetime.now(tz))
        status = self.ctx.get_provider("provider_status")
        if not isinstance(status, ProviderStatus):
            status = ProviderStatus()
            self.ctx.providers["provider_status"] = status
        self.fallback_manager = FallbackManager(ctx=self.ctx, provider_status=status)

    def _bulk(self) -> BulkQuoteClient | None:
        client = self.ctx.get_provider("yahoo")
        return client if isinstance(client, BulkQuoteClient) else None

    def snapshot_url(self) -> str:
        return self.market_api_url or build_bulk_url(YAHOO_QUOTE_URL, WATCHLIST)

    def get_market_status(self) -> MarketStatus:
        hour = self._clock(self.timezone).hour
        return MarketStatus(
            is_open=MARKET_OPEN_HOUR <= hour < MARKET_CLOSE_HOUR,
            next_session=NEXT_SESSION,
            timezone=str(self.timezone),
        )

    def _fetch_live(self) -> list[MarketQuote] | None:
        bulk = self._bulk()
        if bulk is None:
            return None
        return bulk.get_market_quotes(self.snapshot_url()) or None

    def snapshot(self) -> ServiceResult[MarketSnapshot]:
        """Build the market board from live quotes, or entirely from the catalog."""
        live = self.fallback_manager.execute(
            operation="market_snapshot",
            subject="watchlist",
            attempts=[ProviderAttempt("yahoo", "Yahoo Finance", self._fetch_live)],
        )
        if live.data:
            quotes = live.data
            board = MarketSnapshot(
                indices=[],
                trending=quotes[:TRENDING_LIMIT],
                top_gainers=top_gainers(quotes),
                top_losers=top_losers(quotes),
                market_status=self.get_market_status(),
                source="live",
            )
            return ServiceResult(data=board, source=live.source, fetched_at=live.fetched_at)

        LOGGER.info("market snapshot falling back to reference catalog")
        trending = list(self.catalog.trending)
        board = MarketSnapshot(
            indices=list(self.catalog.indices),
            trending=trending,
            top_gainers=top_gainers(trending),
            top_losers=top_losers(trending),
            market_status=self.get_market_status(),
            source="mock",
        )
        return ServiceResult(
            data=board,
            source="Reference catalog",
            warning="Live market data unavailable; showing reference data.",
        )
