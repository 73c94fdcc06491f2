"""Bulk quote adapter for Yahoo-shaped quote endpoints."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from invest_server.providers.http import fetch_json
from invest_server.providers.models import MarketQuote, NormalizedQuote
from invest_server.providers.parsing import first_present, first_truthy, to_number

YAHOO_QUOTE_URL = "https://query1.finance.yahoo.com/v7/finance/quote"


def build_bulk_url(base_url: str, symbols: list[str]) -> str:
    """Attach ``symbols=`` to ``base_url`` unless the URL already pins them."""
    if "symbols=" in base_url:
        return base_url
    joiner = "&" if "?" in base_url else "?"
    return f"{base_url}{joiner}symbols={quote(','.join(symbols), safe=',')}"


def extract_bulk_records(data: Any) -> list[dict]:
    """Accept both ``{quoteResponse: {result: [...]}}`` and ``{data: [...]}``."""
    if not isinstance(data, dict):
        return []
    records = ((data.get("quoteResponse") or {}).get("result")) or data.get("data") or []
    if not isinstance(records, list):
        return []
    return [item for item in records if isinstance(item, dict)]


def parse_bulk_quote(record: dict) -> NormalizedQuote | None:
    symbol = first_truthy(record, "symbol", "ticker")
    if not symbol:
        return None
    return NormalizedQuote(
        symbol=str(symbol),
        name=str(first_truthy(record, "longName", "shortName", "name") or symbol),
        price=to_number(first_present(record, "regularMarketPrice", "price")),
        change_percent=to_number(first_present(record, "regularMarketChangePercent", "changePercent")),
        open=to_number(first_present(record, "regularMarketOpen", "open")),
        high=to_number(first_present(record, "regularMarketDayHigh", "high")),
        low=to_number(first_present(record, "regularMarketDayLow", "low")),
        previous_close=to_number(first_present(record, "regularMarketPreviousClose", "previousClose")),
        volume=to_number(first_present(record, "regularMarketVolume", "volume")),
        source="yahoo",
    )


def parse_market_quote(record: dict) -> MarketQuote | None:
    symbol = record.get("symbol")
    if not symbol:
        return None
    return MarketQuote(
        symbol=str(symbol),
        name=str(first_truthy(record, "longName", "shortName") or symbol),
        price=to_number(first_present(record, "regularMarketPrice", "price")),
        change_percent=to_number(first_present(record, "regularMarketChangePercent", "changePercent")),
        sector=str(record.get("sector") or "-"),
        volume=to_number(first_present(record, "regularMarketVolume", "volume")),
    )


class BulkQuoteClient:
    """Secondary provider: one request covers a whole symbol list."""

    def __init__(self, base_url: str | None = None, timeout_seconds: float = 10.0) -> None:
        self.base_url = base_url or YAHOO_QUOTE_URL
        self.timeout_seconds = timeout_seconds

    def get_quotes(self, symbols: list[str]) -> list[NormalizedQuote]:
        if not symbols:
            return []
        url = build_bulk_url(self.base_url, symbols)
        data = fetch_json(url, provider="yahoo", timeout_seconds=self.timeout_seconds)
        quotes = (parse_bulk_quote(record) for record in extract_bulk_records(data))
        return [item for item in quotes if item is not None]

    def get_market_quotes(self, url: str) -> list[MarketQuote]:
        data = fetch_json(url, provider="yahoo", timeout_seconds=self.timeout_seconds)
        quotes = (parse_market_quote(record) for record in extract_bulk_records(data))
        return [item for item in quotes if item is not None]
