"""Normalized data models shared across providers and services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ProviderName = Literal["alphavantage", "yahoo", "catalog"]


@dataclass
class NormalizedQuote:
    """Provider-agnostic quote; numeric fields are None unless finite."""

    symbol: str
    name: str
    price: float | None = None
    change_percent: float | None = None
    open: float | None = None
    high: float | None = None
    low: float | None = None
    previous_close: float | None = None
    volume: float | None = None
    source: ProviderName = "alphavantage"


@dataclass
class SymbolMatch:
    symbol: str
    name: str
    sector: str = "-"
    exchange: str = "-"


@dataclass
class MarketQuote:
    symbol: str
    name: str
    price: float | None = None
    change_percent: float | None = None
    sector: str = "-"
    volume: float | str | None = None


@dataclass
class MarketStatus:
    is_open: bool
    next_session: str
    timezone: str


@dataclass
class MarketSnapshot:
    indices: list[MarketQuote] = field(default_factory=list)
    trending: list[MarketQuote] = field(default_factory=list)
    top_gainers: list[MarketQuote] = field(default_factory=list)
    top_losers: list[MarketQuote] = field(default_factory=list)
    market_status: MarketStatus | None = None
    source: Literal["live", "mock"] = "live"
