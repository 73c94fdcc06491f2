"""Alpha Vantage client for the primary, rate-limited quote path."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

from invest_server.providers.http import ProviderError, fetch_json
from invest_server.providers.models import NormalizedQuote, SymbolMatch
from invest_server.providers.parsing import to_number

ALPHA_VANTAGE_BASE_URL = "https://www.alphavantage.co/query"
LOGGER = logging.getLogger(__name__)


def parse_alpha_error(data: dict) -> ProviderError:
    note = data.get("Note") if isinstance(data.get("Note"), str) else None
    error_message = data.get("Error Message") if isinstance(data.get("Error Message"), str) else None
    information = data.get("Information") if isinstance(data.get("Information"), str) else None
    text = note or error_message or information or "Alpha Vantage returned an error."
    lower = text.lower()
    if "frequency" in lower or "rate limit" in lower or "requests per" in lower:
        return ProviderError("alphavantage", "RATE_LIMIT", text)
    if "api key" in lower or "apikey" in lower:
        return ProviderError("alphavantage", "AUTH", text)
    if error_message:
        return ProviderError("alphavantage", "NOT_FOUND", text)
    return ProviderError("alphavantage", "UPSTREAM", text)


def parse_global_quote(data: Any, candidate: str) -> NormalizedQuote | None:
    """Map a GLOBAL_QUOTE payload; an empty "Global Quote" means no data."""
    if not isinstance(data, dict):
        return None
    quote = data.get("Global Quote")
    if not isinstance(quote, dict) or not quote:
        return None
    symbol = str(quote.get("01. symbol") or candidate)
    return NormalizedQuote(
        symbol=symbol,
        # GLOBAL_QUOTE carries no company name
        name=symbol,
        price=to_number(quote.get("05. price")),
        change_percent=to_number(quote.get("10. change percent")),
        open=to_number(quote.get("02. open")),
        high=to_number(quote.get("03. high")),
        low=to_number(quote.get("04. low")),
        previous_close=to_number(quote.get("08. previous close")),
        volume=to_number(quote.get("06. volume")),
        source="alphavantage",
    )


def parse_search_matches(data: Any) -> list[SymbolMatch]:
    if not isinstance(data, dict):
        return []
    matches = data.get("bestMatches")
    if not isinstance(matches, list):
        return []
    out: list[SymbolMatch] = []
    for item in matches:
        if not isinstance(item, dict) or not item.get("1. symbol"):
            continue
        out.append(
            SymbolMatch(
                symbol=str(item["1. symbol"]),
                name=str(item.get("2. name") or item["1. symbol"]),
                sector="-",
                exchange=str(item.get("4. region") or item.get("8. currency") or "-"),
            )
        )
    return out


class AlphaVantageClient:
    """Thin wrapper around the Alpha Vantage quote and search endpoints.

    The free tier allows only a handful of calls per minute, so requests are
    not retried; a failed call is left to the caller's fallback chain.
    """

    def __init__(self, api_key: str, timeout_seconds: float = 10.0, base_url: str = ALPHA_VANTAGE_BASE_URL) -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.base_url = base_url

    def _request(self, params: dict[str, str]) -> Any:
        clean = {key: value for key, value in params.items() if value is not None}
        clean["apikey"] = self.api_key
        url = f"{self.base_url}?{urlencode(clean)}"
        data = fetch_json(url, provider="alphavantage", timeout_seconds=self.timeout_seconds, max_retries=1)
        if isinstance(data, dict) and (data.get("Note") or data.get("Error Message") or data.get("Information")):
            raise parse_alpha_error(data)
        return data

    def get_quote(self, candidate: str) -> NormalizedQuote | None:
        data = self._request({"function": "GLOBAL_QUOTE", "symbol": candidate})
        quote = parse_global_quote(data, candidate)
        if quote is None:
            LOGGER.debug("alphavantage empty global quote: symbol=%s", candidate)
        return quote

    def search(self, keywords: str) -> list[SymbolMatch]:
        data = self._request({"function": "SYMBOL_SEARCH", "keywords": keywords})
        return parse_search_matches(data)
