"""Portfolio operations over the holdings repository."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from invest_server.portfolio.aggregator import allocate, by_instrument_type, by_sector, refresh_prices, summarize
from invest_server.portfolio.models import Holding, PortfolioReport, PriceUpdateResult, ValidationIssue
from invest_server.portfolio.price_sources import JitterPriceSource, PriceSource
from invest_server.portfolio.repository import HoldingsRepository
from invest_server.portfolio.validation import parse_purchase_date, validate_holding_payload
from invest_server.services.base import ClientInputError
from invest_server.services.catalog import ReferenceCatalog

LOGGER = logging.getLogger(__name__)


class InvalidHoldingError(ClientInputError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__("invalid_holding", "; ".join(f"{issue.field}: {issue.message}" for issue in issues))


class PortfolioService:
    def __init__(
        self,
        repository: HoldingsRepository,
        catalog: ReferenceCatalog,
        price_source: PriceSource | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.repository = repository
        self.catalog = catalog
        self.price_source = price_source or JitterPriceSource(catalog)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def get_portfolio(self, owner_id: str) -> PortfolioReport:
        """Holdings newest first, with summary and sector/type allocation."""
        holdings = sorted(self.repository.find(owner_id), key=lambda item: item.created_at, reverse=True)
        return PortfolioReport(
            holdings=holdings,
            summary=summarize(holdings),
            sector_allocation=allocate(holdings, by_sector),
            type_allocation=allocate(holdings, by_instrument_type),
        )

    def add_holding(self, owner_id: str, payload: dict[str, Any]) -> Holding:
        issues = validate_holding_payload(payload)
        if issues:
            raise InvalidHoldingError(issues)

        symbol = str(payload["symbol"]).strip().upper()
        quantity = float(payload["quantity"])
        average_cost = float(payload["avg_price"])
        current_price = self.catalog.price_for(symbol) or average_cost
        sector = str(payload.get("sector") or "").strip() or self.catalog.sector_for(symbol)
        holding = Holding.create(
            owner_id=owner_id,
            symbol=symbol,
            name=str(payload["name"]).strip(),
            instrument_type=str(payload["type"]).strip().lower(),
            quantity=quantity,
            average_cost=average_cost,
            current_price=current_price,
            sector=sector,
            purchased_at=parse_purchase_date(payload.get("purchase_date")),
            now=self._clock(),
        )
        stored = self.repository.insert(holding)
        LOGGER.info("holding added: owner=%s symbol=%s id=%s", owner_id, stored.symbol, stored.id)
        return stored

    def update_prices(self, owner_id: str) -> list[PriceUpdateResult]:
        holdings = self.repository.find(owner_id)
        return refresh_prices(holdings, self.price_source, self.repository, now=self._clock())
