"""Free-text symbol search with a static catalog fallback."""

from __future__ import annotations

import time

from invest_server.providers.alpha_vantage import AlphaVantageClient
from invest_server.providers.models import SymbolMatch
from invest_server.services.base import ServiceContext, ServiceResult
from invest_server.services.catalog import ReferenceCatalog
from invest_server.services.fallback_manager import FallbackManager, ProviderAttempt
from invest_server.services.provider_status import ProviderStatus


class SearchService:
    def __init__(self, ctx: ServiceContext, catalog: ReferenceCatalog) -> None:
        self.ctx = ctx
        self.catalog = catalog
        status = self.ctx.get_provider("provider_status")
        if not isinstance(status, ProviderStatus):
            status = ProviderStatus()
            self.ctx.providers["provider_status"] = status
        self.fallback_manager = FallbackManager(ctx=self.ctx, provider_status=status)

    def _primary(self) -> AlphaVantageClient | None:
        client = self.ctx.get_provider("alphavantage")
        return client if isinstance(client, AlphaVantageClient) else None

    def search(self, query: str | None) -> ServiceResult[list[SymbolMatch]]:
        """Search symbols; never fails, the catalog is the last resort."""
        text = (query or "").strip()
        if not text:
            return ServiceResult(data=[], fetched_at=time.time())

        attempts: list[ProviderAttempt[list[SymbolMatch]]] = []
        primary = self._primary()
        if primary is not None:
            attempts.append(ProviderAttempt("alphavantage", "Alpha Vantage", lambda: primary.search(text) or None))
        result = self.fallback_manager.execute(operation="search_symbol", subject=text, attempts=attempts)
        if result.data:
            return result

        return ServiceResult(
            data=self.catalog.search(text),
            source="Reference catalog",
            warning=result.warning if attempts else None,
            fetched_at=time.time(),
        )
