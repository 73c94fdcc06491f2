"""Portfolio summary, allocation and price refresh over holding records."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

import pandas as pd

from invest_server.portfolio.models import (
    DEFAULT_SECTOR,
    AllocationBucket,
    Holding,
    PortfolioSummary,
    PriceUpdateResult,
    gain_loss_percent,
)
from invest_server.portfolio.price_sources import PriceSource
from invest_server.portfolio.repository import HoldingsRepository, PersistenceError

LOGGER = logging.getLogger(__name__)
FRAME_COLUMNS = ["symbol", "sector", "instrument_type", "total_invested", "current_value"]


def holdings_frame(holdings: list[Holding]) -> pd.DataFrame:
    frame = pd.DataFrame(
        [
            {
                "symbol": item.symbol,
                "sector": item.sector,
                "instrument_type": item.instrument_type,
                "total_invested": item.total_invested,
                "current_value": item.current_value,
            }
            for item in holdings
        ],
        columns=FRAME_COLUMNS,
    )
    return frame.astype({"total_invested": float, "current_value": float})


def summarize(holdings: list[Holding]) -> PortfolioSummary:
    """Fold the stored derived fields; prices are not re-read here."""
    if not holdings:
        return PortfolioSummary()
    frame = holdings_frame(holdings)
    total_invested = float(frame["total_invested"].sum())
    total_current_value = float(frame["current_value"].sum())
    total_gain_loss = total_current_value - total_invested
    return PortfolioSummary(
        total_invested=total_invested,
        total_current_value=total_current_value,
        total_gain_loss=total_gain_loss,
        total_gain_loss_percent=gain_loss_percent(total_gain_loss, total_invested),
        holding_count=len(holdings),
    )


def by_sector(holding: Holding) -> str:
    return holding.sector or DEFAULT_SECTOR


def by_instrument_type(holding: Holding) -> str:
    return str(holding.instrument_type)


def allocate(holdings: list[Holding], key_fn: Callable[[Holding], str]) -> dict[str, AllocationBucket]:
    """Group current value and member count by ``key_fn``, in first-seen order."""
    if not holdings:
        return {}
    frame = holdings_frame(holdings)
    frame["bucket"] = [key_fn(item) for item in holdings]
    grouped = frame.groupby("bucket", sort=False)["current_value"].agg(["sum", "count"])
    return {
        str(bucket): AllocationBucket(value=float(row["sum"]), count=int(row["count"]))
        for bucket, row in grouped.iterrows()
    }


def _change_percent(old_price: float, new_price: float) -> float | None:
    if old_price == 0:
        return None
    return ((new_price - old_price) / old_price) * 100.0


def refresh_prices(
    holdings: list[Holding],
    price_source: PriceSource,
    repository: HoldingsRepository,
    now: datetime | None = None,
) -> list[PriceUpdateResult]:
    """Re-price and persist each holding independently.

    A missing price or a failed write marks that holding's result as not ok
    and processing moves on to the next one.
    """
    stamp = now or datetime.now(timezone.utc)
    results: list[PriceUpdateResult] = []
    for holding in holdings:
        result = PriceUpdateResult(holding_id=holding.id, symbol=holding.symbol, old_price=holding.current_price)
        try:
            new_price = price_source.get_price(holding)
        except ValueError as error:
            new_price = None
            LOGGER.warning("price lookup rejected: symbol=%s reason=%s", holding.symbol, error)
        if new_price is None:
            result.ok = False
            result.error = "price_unavailable"
            results.append(result)
            continue

        if holding.id is None:
            result.ok = False
            result.error = "update_failed"
            results.append(result)
            continue
        try:
            repository.update_by_id(holding.id, {**holding.priced_at(new_price), "last_updated": stamp})
        except PersistenceError:
            LOGGER.exception("holding price update failed: id=%s symbol=%s", holding.id, holding.symbol)
            result.ok = False
            result.error = "update_failed"
            results.append(result)
            continue

        result.new_price = new_price
        result.change_percent = _change_percent(holding.current_price, new_price)
        results.append(result)

    LOGGER.info(
        "price refresh complete: holdings=%s updated=%s failed=%s",
        len(results),
        sum(1 for item in results if item.ok),
        sum(1 for item in results if not item.ok),
    )
    return results
