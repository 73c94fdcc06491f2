"""Where refreshed holding prices come from."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Protocol

from invest_server.portfolio.models import Holding
from invest_server.services.catalog import ReferenceCatalog

if TYPE_CHECKING:
    from invest_server.services.quote_service import QuoteService


class PriceSource(Protocol):
    def get_price(self, holding: Holding) -> float | None:
        ...


class JitterPriceSource:
    """Simulated ticks: catalog (or last known) price moved by up to +-5%."""

    def __init__(self, catalog: ReferenceCatalog, rng: random.Random | None = None, max_jitter: float = 0.05) -> None:
        self.catalog = catalog
        self.rng = rng or random.Random()
        self.max_jitter = max_jitter

    def get_price(self, holding: Holding) -> float | None:
        base = self.catalog.price_for(holding.symbol) or holding.current_price
        return base * (1 + (self.rng.random() - 0.5) * 2 * self.max_jitter)


class LiveQuotePriceSource:
    def __init__(self, quotes: QuoteService) -> None:
        self.quotes = quotes

    def get_price(self, holding: Holding) -> float | None:
        result = self.quotes.resolve(holding.symbol)
        if result.data is None:
            return None
        return result.data.price
