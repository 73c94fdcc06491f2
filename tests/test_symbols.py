from invest_server.services.symbols import symbol_candidates


def test_bare_symbol_tries_nse_then_bse_then_bare() -> None:
    assert symbol_candidates("reliance") == ["RELIANCE.NS", "RELIANCE.BSE", "RELIANCE"]


def test_qualified_symbol_is_used_as_is() -> None:
    assert symbol_candidates(" infy.ns ") == ["INFY.NS"]
    assert symbol_candidates("BRK.B") == ["BRK.B"]


def test_candidates_end_with_bare_symbol_and_are_uppercase() -> None:
    for raw in ["tcs", "Sbin", "M&M", "ITC"]:
        candidates = symbol_candidates(raw)
        assert candidates[-1] == raw.strip().upper()
        assert all(item == item.upper() for item in candidates)
        assert len(candidates) == 3


def test_empty_input_yields_single_empty_candidate() -> None:
    assert symbol_candidates("   ") == [""]
