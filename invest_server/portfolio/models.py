"""Typed holding and portfolio models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

InstrumentType = Literal["stock", "mutual_fund", "etf", "bond", "gold", "crypto", "other"]
DEFAULT_SECTOR = "Others"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def gain_loss_percent(gain_loss: float, total_invested: float) -> float:
    if total_invested <= 0:
        return 0.0
    return (gain_loss / total_invested) * 100.0


@dataclass
class Holding:
    """A stored position with its derived valuation fields.

    ``total_invested``, ``current_value``, ``gain_loss`` and
    ``gain_loss_percent`` are persisted alongside the raw fields and only
    recomputed on insert and on price refresh.
    """

    owner_id: str
    symbol: str
    name: str
    instrument_type: InstrumentType
    quantity: float
    average_cost: float
    current_price: float
    total_invested: float
    current_value: float
    gain_loss: float
    gain_loss_percent: float
    sector: str = DEFAULT_SECTOR
    purchased_at: datetime | None = None
    last_updated: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    id: str | None = None

    @classmethod
    def create(
        cls,
        owner_id: str,
        symbol: str,
        name: str,
        instrument_type: InstrumentType,
        quantity: float,
        average_cost: float,
        current_price: float,
        sector: str | None = None,
        purchased_at: datetime | None = None,
        now: datetime | None = None,
    ) -> Holding:
        total_invested = quantity * average_cost
        current_value = quantity * current_price
        gain_loss = current_value - total_invested
        stamp = now or _utcnow()
        return cls(
            owner_id=owner_id,
            symbol=symbol.strip().upper(),
            name=name,
            instrument_type=instrument_type,
            quantity=quantity,
            average_cost=average_cost,
            current_price=current_price,
            total_invested=total_invested,
            current_value=current_value,
            gain_loss=gain_loss,
            gain_loss_percent=gain_loss_percent(gain_loss, total_invested),
            sector=sector or DEFAULT_SECTOR,
            purchased_at=purchased_at,
            last_updated=stamp,
            created_at=stamp,
        )

    def priced_at(self, price: float) -> dict[str, float]:
        """Derived fields at ``price``, measured against the stored cost basis."""
        current_value = self.quantity * price
        gain_loss = current_value - self.total_invested
        return {
            "current_price": price,
            "current_value": current_value,
            "gain_loss": gain_loss,
            "gain_loss_percent": gain_loss_percent(gain_loss, self.total_invested),
        }


@dataclass
class PortfolioSummary:
    total_invested: float = 0.0
    total_current_value: float = 0.0
    total_gain_loss: float = 0.0
    total_gain_loss_percent: float = 0.0
    holding_count: int = 0


@dataclass
class AllocationBucket:
    value: float = 0.0
    count: int = 0


@dataclass
class PriceUpdateResult:
    holding_id: str | None
    symbol: str
    old_price: float
    new_price: float | None = None
    change_percent: float | None = None
    ok: bool = True
    error: str | None = None


@dataclass
class PortfolioReport:
    holdings: list[Holding]
    summary: PortfolioSummary
    sector_allocation: dict[str, AllocationBucket]
    type_allocation: dict[str, AllocationBucket]


@dataclass
class ValidationIssue:
    field: str
    message: str
    code: str = "invalid_value"
