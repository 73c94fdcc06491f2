from invest_server.providers.yahoo_finance import (
    BulkQuoteClient,
    build_bulk_url,
    extract_bulk_records,
    parse_bulk_quote,
)


def test_build_bulk_url_appends_symbols() -> None:
    assert build_bulk_url("https://q.test/quote", ["TCS", "INFY"]) == "https://q.test/quote?symbols=TCS,INFY"
    assert build_bulk_url("https://q.test/quote?region=IN", ["M&M"]) == "https://q.test/quote?region=IN&symbols=M%26M"


def test_build_bulk_url_keeps_pinned_symbols() -> None:
    url = "https://q.test/quote?symbols=RELIANCE.NS"
    assert build_bulk_url(url, ["TCS"]) == url


def test_extract_bulk_records_accepts_both_shapes() -> None:
    nested = {"quoteResponse": {"result": [{"symbol": "TCS.NS"}]}}
    flat = {"data": [{"ticker": "INFY"}, "junk"]}
    assert extract_bulk_records(nested) == [{"symbol": "TCS.NS"}]
    assert extract_bulk_records(flat) == [{"ticker": "INFY"}]
    assert extract_bulk_records({"unexpected": True}) == []
    assert extract_bulk_records(None) == []


def test_parse_bulk_quote_field_fallbacks() -> None:
    quote = parse_bulk_quote(
        {
            "symbol": "TCS.NS",
            "shortName": "TCS",
            "regularMarketPrice": 3980.25,
            "changePercent": "1.5%",
            "regularMarketVolume": 0,
            "volume": 99,
        }
    )
    assert quote is not None
    assert quote.name == "TCS"
    assert quote.price == 3980.25
    assert quote.change_percent == 1.5
    assert quote.volume == 0.0
    assert quote.source == "yahoo"

    generic = parse_bulk_quote({"ticker": "INFY", "price": "1845.75"})
    assert generic is not None
    assert generic.symbol == "INFY"
    assert generic.name == "INFY"
    assert generic.price == 1845.75
    assert parse_bulk_quote({"name": "no ticker"}) is None


def test_client_get_quotes_uses_one_request(monkeypatch) -> None:
    urls = []

    def fake_fetch_json(url, provider, timeout_seconds=10.0, **kwargs):
        urls.append(url)
        return {"quoteResponse": {"result": [{"symbol": "TCS.NS"}, {"symbol": "INFY.NS"}]}}

    monkeypatch.setattr("invest_server.providers.yahoo_finance.fetch_json", fake_fetch_json)
    quotes = BulkQuoteClient("https://q.test/quote").get_quotes(["TCS", "INFY"])
    assert [item.symbol for item in quotes] == ["TCS.NS", "INFY.NS"]
    assert urls == ["https://q.test/quote?symbols=TCS,INFY"]
    assert BulkQuoteClient("https://q.test/quote").get_quotes([]) == []
