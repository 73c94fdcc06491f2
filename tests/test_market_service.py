from datetime import datetime

from invest_server.cache.ttl_cache import TTLCache
from invest_server.providers.http import ProviderError
from invest_server.providers.models import MarketQuote
from invest_server.providers.yahoo_finance import BulkQuoteClient
from invest_server.services.base import ServiceContext
from invest_server.services.catalog import default_catalog
from invest_server.services.market_service import MarketService, top_gainers, top_losers
from invest_server.utils.rate_limit import RateLimiterRegistry


def _service(providers: dict, hour: int = 11, **kwargs) -> MarketService:
    ctx = ServiceContext(providers=providers, cache=TTLCache(), rate_limiter=RateLimiterRegistry(0.0))
    return MarketService(
        ctx,
        default_catalog(),
        clock=lambda tz: datetime(2024, 6, 3, hour, 30, tzinfo=tz),
        **kwargs,
    )


def _quotes(changes: list) -> list[MarketQuote]:
    return [MarketQuote(f"S{index}", f"Stock {index}", 100.0, change) for index, change in enumerate(changes)]


def test_top_gainers_sorted_descending_and_strictly_positive() -> None:
    quotes = _quotes([0.5, -1.0, 3.0, 0.0, None, 2.0, 0.5, 4.0, 1.0])
    gainers = top_gainers(quotes)
    assert [item.change_percent for item in gainers] == [4.0, 3.0, 2.0, 1.0, 0.5]
    assert len(gainers) <= 5
    assert all(item.change_percent > 0 for item in gainers)


def test_top_gainers_ties_keep_input_order() -> None:
    quotes = _quotes([1.0, 1.0, 1.0])
    assert [item.symbol for item in top_gainers(quotes)] == ["S0", "S1", "S2"]


def test_top_losers_sorted_ascending_and_strictly_negative() -> None:
    quotes = _quotes([-0.1, 2.0, -3.0, 0.0, -0.5])
    losers = top_losers(quotes)
    assert [item.change_percent for item in losers] == [-3.0, -0.5, -0.1]


def test_market_status_follows_market_hours() -> None:
    assert _service({}, hour=10).get_market_status().is_open is True
    assert _service({}, hour=16).get_market_status().is_open is False
    status = _service({}, hour=8).get_market_status()
    assert status.is_open is False
    assert status.next_session == "9:15 AM IST"
    assert status.timezone == "Asia/Kolkata"


def test_snapshot_uses_live_quotes(monkeypatch) -> None:
    bulk = BulkQuoteClient()
    urls = []
    live = _quotes([1.5, -2.0, 0.0] * 4)

    def get_market_quotes(url):
        urls.append(url)
        return live

    monkeypatch.setattr(bulk, "get_market_quotes", get_market_quotes)
    result = _service({"yahoo": bulk}, market_api_url="https://q.test/board").snapshot()
    board = result.data
    assert urls == ["https://q.test/board"]
    assert board.source == "live"
    assert board.indices == []
    assert len(board.trending) == 10
    assert all(item.change_percent > 0 for item in board.top_gainers)
    assert all(item.change_percent < 0 for item in board.top_losers)
    assert board.market_status.is_open is True


def test_snapshot_default_url_lists_watchlist() -> None:
    url = _service({}).snapshot_url()
    assert "symbols=RELIANCE.NS,TCS.NS" in url


def test_snapshot_falls_back_to_mock_board(monkeypatch) -> None:
    bulk = BulkQuoteClient()

    def failing(url):
        raise ProviderError("yahoo", "BAD_RESPONSE", "Provider returned non-JSON content.", 200)

    monkeypatch.setattr(bulk, "get_market_quotes", failing)
    result = _service({"yahoo": bulk}, hour=20).snapshot()
    board = result.data
    assert board.source == "mock"
    assert result.warning is not None
    assert [item.symbol for item in board.indices] == ["NIFTY50", "SENSEX", "BANKNIFTY"]
    assert board.indices[0].volume == "2.5B"
    assert [item.symbol for item in board.top_gainers] == ["TCS", "INFY", "ICICIBANK"]
    assert [item.symbol for item in board.top_losers] == ["RELIANCE", "HDFCBANK"]
    assert board.market_status.is_open is False


def test_snapshot_treats_empty_live_list_as_unavailable(monkeypatch) -> None:
    bulk = BulkQuoteClient()
    monkeypatch.setattr(bulk, "get_market_quotes", lambda url: [])
    assert _service({"yahoo": bulk}).snapshot().data.source == "mock"
