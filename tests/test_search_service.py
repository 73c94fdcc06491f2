import pytest

from invest_server.cache.ttl_cache import TTLCache
from invest_server.providers.alpha_vantage import AlphaVantageClient
from invest_server.providers.http import ProviderError
from invest_server.providers.models import SymbolMatch
from invest_server.services.base import ServiceContext
from invest_server.services.catalog import default_catalog
from invest_server.services.search_service import SearchService
from invest_server.utils.rate_limit import RateLimiterRegistry


def _service(providers: dict) -> SearchService:
    ctx = ServiceContext(providers=providers, cache=TTLCache(), rate_limiter=RateLimiterRegistry(0.0))
    return SearchService(ctx, default_catalog())


def test_blank_query_returns_empty_without_calls(monkeypatch) -> None:
    alpha = AlphaVantageClient("key")
    monkeypatch.setattr(alpha, "search", lambda keywords: pytest.fail("no provider call expected"))
    for query in ["", "   ", None]:
        result = _service({"alphavantage": alpha}).search(query)
        assert result.data == []


def test_search_returns_primary_matches(monkeypatch) -> None:
    alpha = AlphaVantageClient("key")
    monkeypatch.setattr(alpha, "search", lambda keywords: [SymbolMatch("TCS.BSE", "Tata Consultancy", "-", "India")])
    result = _service({"alphavantage": alpha}).search("tata")
    assert result.source == "Alpha Vantage"
    assert [item.symbol for item in result.data] == ["TCS.BSE"]


def test_search_falls_back_to_catalog_on_failure(monkeypatch) -> None:
    alpha = AlphaVantageClient("key")

    def failing(keywords):
        raise ProviderError("alphavantage", "NETWORK", "Provider request failed due to network error.")

    monkeypatch.setattr(alpha, "search", failing)
    result = _service({"alphavantage": alpha}).search("bank")
    assert result.source == "Reference catalog"
    assert [item.symbol for item in result.data] == ["HDFCBANK", "ICICIBANK", "SBIN"]


def test_search_falls_back_to_catalog_when_primary_has_no_matches(monkeypatch) -> None:
    alpha = AlphaVantageClient("key")
    monkeypatch.setattr(alpha, "search", lambda keywords: [])
    result = _service({"alphavantage": alpha}).search("INFY")
    assert result.source == "Reference catalog"
    assert [item.name for item in result.data] == ["Infosys Ltd"]


def test_search_without_primary_uses_catalog() -> None:
    result = _service({}).search("zzz-unknown")
    assert result.data == []
    assert result.source == "Reference catalog"
    assert result.warning is None
