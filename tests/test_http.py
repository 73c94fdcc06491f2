import pytest
import requests

from invest_server.providers import http
from invest_server.providers.http import ProviderError, fetch_json, map_status_to_code


class _FakeResponse:
    def __init__(self, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _serve(monkeypatch, responses):
    calls = []

    def fake_get(url, params=None, timeout=None, headers=None):
        calls.append(url)
        item = responses[min(len(calls), len(responses)) - 1]
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr(http._SESSION, "get", fake_get)
    monkeypatch.setattr(http, "_backoff", lambda attempt: None)
    return calls


def test_map_status_to_code() -> None:
    assert map_status_to_code(401) == "AUTH"
    assert map_status_to_code(403) == "AUTH"
    assert map_status_to_code(404) == "NOT_FOUND"
    assert map_status_to_code(429) == "RATE_LIMIT"
    assert map_status_to_code(502) == "UPSTREAM"


def test_fetch_json_returns_decoded_body(monkeypatch) -> None:
    _serve(monkeypatch, [_FakeResponse(200, '{"ok": 1}')])
    assert fetch_json("https://example.test/q", provider="yahoo") == {"ok": 1}


def test_fetch_json_checks_status_before_parsing(monkeypatch) -> None:
    _serve(monkeypatch, [_FakeResponse(404, "<html>not found</html>")])
    with pytest.raises(ProviderError) as info:
        fetch_json("https://example.test/q", provider="yahoo")
    assert info.value.code == "NOT_FOUND"
    assert info.value.status == 404


def test_fetch_json_rejects_non_json_and_empty_bodies(monkeypatch) -> None:
    _serve(monkeypatch, [_FakeResponse(200, "<html></html>")])
    with pytest.raises(ProviderError) as info:
        fetch_json("https://example.test/q", provider="yahoo")
    assert info.value.code == "BAD_RESPONSE"

    _serve(monkeypatch, [_FakeResponse(200, "")])
    with pytest.raises(ProviderError) as info:
        fetch_json("https://example.test/q", provider="yahoo")
    assert info.value.code == "BAD_RESPONSE"


def test_fetch_json_retries_transient_status(monkeypatch) -> None:
    calls = _serve(monkeypatch, [_FakeResponse(503, ""), _FakeResponse(200, "[]")])
    assert fetch_json("https://example.test/q", provider="yahoo", max_retries=2) == []
    assert len(calls) == 2


def test_fetch_json_does_not_retry_rate_limit(monkeypatch) -> None:
    calls = _serve(monkeypatch, [_FakeResponse(429, ""), _FakeResponse(200, "[]")])
    with pytest.raises(ProviderError) as info:
        fetch_json("https://example.test/q", provider="alphavantage", max_retries=3)
    assert info.value.code == "RATE_LIMIT"
    assert len(calls) == 1


def test_fetch_json_maps_network_errors(monkeypatch) -> None:
    calls = _serve(monkeypatch, [requests.Timeout("slow")])
    with pytest.raises(ProviderError) as info:
        fetch_json("https://example.test/q", provider="yahoo", max_retries=2)
    assert info.value.code == "NETWORK"
    assert len(calls) == 2
