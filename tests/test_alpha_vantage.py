from urllib.parse import parse_qs, urlparse

import pytest

from invest_server.providers.alpha_vantage import (
    AlphaVantageClient,
    parse_alpha_error,
    parse_global_quote,
    parse_search_matches,
)
from invest_server.providers.http import ProviderError

GLOBAL_QUOTE = {
    "Global Quote": {
        "01. symbol": "TCS.NS",
        "02. open": "3950.0000",
        "03. high": "3999.9000",
        "04. low": "3940.1000",
        "05. price": "3980.2500",
        "06. volume": "1234567",
        "08. previous close": "3933.0000",
        "10. change percent": "1.2014%",
    }
}


def test_parse_global_quote_maps_numbered_fields() -> None:
    quote = parse_global_quote(GLOBAL_QUOTE, "TCS.NS")
    assert quote is not None
    assert quote.symbol == "TCS.NS"
    assert quote.name == "TCS.NS"
    assert quote.price == 3980.25
    assert quote.change_percent == pytest.approx(1.2014)
    assert quote.open == 3950.0
    assert quote.high == 3999.9
    assert quote.low == 3940.1
    assert quote.previous_close == 3933.0
    assert quote.volume == 1234567.0
    assert quote.source == "alphavantage"


def test_parse_global_quote_treats_empty_object_as_no_data() -> None:
    assert parse_global_quote({"Global Quote": {}}, "TCS.NS") is None
    assert parse_global_quote({}, "TCS.NS") is None
    assert parse_global_quote([], "TCS.NS") is None


def test_parse_global_quote_keeps_unparsable_numbers_absent() -> None:
    quote = parse_global_quote({"Global Quote": {"05. price": "n/a", "06. volume": "NaN"}}, "ITC.BSE")
    assert quote is not None
    assert quote.symbol == "ITC.BSE"
    assert quote.price is None
    assert quote.volume is None


def test_parse_search_matches_prefers_region_then_currency() -> None:
    matches = parse_search_matches(
        {
            "bestMatches": [
                {"1. symbol": "TCS.BSE", "2. name": "Tata Consultancy", "4. region": "India/Bombay"},
                {"1. symbol": "TCSN", "8. currency": "USD"},
                {"1. symbol": "TCSX"},
                {"2. name": "no symbol"},
            ]
        }
    )
    assert [(item.symbol, item.name, item.exchange, item.sector) for item in matches] == [
        ("TCS.BSE", "Tata Consultancy", "India/Bombay", "-"),
        ("TCSN", "TCSN", "USD", "-"),
        ("TCSX", "TCSX", "-", "-"),
    ]


def test_parse_alpha_error_classifies_messages() -> None:
    assert parse_alpha_error({"Note": "Our standard API call frequency is 5 calls per minute"}).code == "RATE_LIMIT"
    assert parse_alpha_error({"Information": "Please provide a valid apikey"}).code == "AUTH"
    assert parse_alpha_error({"Error Message": "Invalid API call."}).code == "NOT_FOUND"


def test_client_get_quote_passes_candidate_and_key(monkeypatch) -> None:
    seen = []

    def fake_fetch_json(url, provider, timeout_seconds=10.0, **kwargs):
        seen.append(parse_qs(urlparse(url).query))
        return GLOBAL_QUOTE

    monkeypatch.setattr("invest_server.providers.alpha_vantage.fetch_json", fake_fetch_json)
    quote = AlphaVantageClient("demo-key").get_quote("TCS.NS")
    assert quote is not None
    assert seen[0]["function"] == ["GLOBAL_QUOTE"]
    assert seen[0]["symbol"] == ["TCS.NS"]
    assert seen[0]["apikey"] == ["demo-key"]


def test_client_raises_on_rate_limit_note(monkeypatch) -> None:
    monkeypatch.setattr(
        "invest_server.providers.alpha_vantage.fetch_json",
        lambda url, provider, timeout_seconds=10.0, **kwargs: {"Note": "API call frequency exceeded"},
    )
    with pytest.raises(ProviderError) as info:
        AlphaVantageClient("demo-key").get_quote("TCS.NS")
    assert info.value.code == "RATE_LIMIT"
