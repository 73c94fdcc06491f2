from datetime import datetime

from invest_server.portfolio.validation import parse_purchase_date, validate_holding_payload


def test_valid_payload_has_no_issues() -> None:
    payload = {"symbol": "INFY", "name": "Infosys", "type": "STOCK", "quantity": "4", "avg_price": 1500}
    assert validate_holding_payload(payload) == []


def test_zero_quantity_and_price_are_accepted() -> None:
    payload = {"symbol": "GIFT", "name": "Gifted shares", "type": "other", "quantity": 0, "avg_price": 0}
    assert validate_holding_payload(payload) == []


def test_rejects_negative_boolean_and_nan_numbers() -> None:
    payload = {"symbol": "ITC", "name": "ITC", "type": "stock", "quantity": True, "avg_price": float("nan")}
    codes = {issue.code for issue in validate_holding_payload(payload)}
    assert codes == {"invalid_quantity", "invalid_avg_price"}


def test_rejects_malformed_symbol_and_date() -> None:
    payload = {
        "symbol": "not a symbol",
        "name": "x",
        "type": "stock",
        "quantity": 1,
        "avg_price": 1,
        "purchase_date": "yesterday",
    }
    issues = {issue.field: issue.code for issue in validate_holding_payload(payload)}
    assert issues == {"symbol": "invalid_symbol", "purchase_date": "invalid_date"}


def test_parse_purchase_date() -> None:
    assert parse_purchase_date("2024-03-01") == datetime(2024, 3, 1)
    assert parse_purchase_date("") is None
    assert parse_purchase_date(None) is None
