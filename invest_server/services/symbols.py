"""Exchange-qualified candidates for a raw ticker."""

from __future__ import annotations

PRIMARY_EXCHANGE_SUFFIX = ".NS"
SECONDARY_EXCHANGE_SUFFIX = ".BSE"


def symbol_candidates(raw: str) -> list[str]:
    """Return the symbols to try, most preferred first.

    An already qualified ticker (``INFY.NS``) is used as is, and so is empty
    input, which callers are expected to reject first. A bare ticker is
    tried on NSE, then BSE, then unqualified.
    """
    symbol = raw.strip().upper()
    if not symbol or "." in symbol:
        return [symbol]
    return [symbol + PRIMARY_EXCHANGE_SUFFIX, symbol + SECONDARY_EXCHANGE_SUFFIX, symbol]
