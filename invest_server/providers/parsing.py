"""Value coercion shared by the provider parsers."""

from __future__ import annotations

import math
from typing import Any, Mapping


def to_number(value: Any) -> float | None:
    """Parse a provider value into a finite float.

    Strings may carry a trailing ``%``. Missing, unparsable, NaN and infinite
    values all come back as None so they are never mistaken for zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().rstrip("%").strip()
        if not value:
            return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(out):
        return None
    return out


def first_present(record: Mapping[str, Any], *keys: str) -> Any:
    """Return the first value that is not None (``a ?? b`` semantics)."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def first_truthy(record: Mapping[str, Any], *keys: str) -> Any:
    """Return the first truthy value (``a || b`` semantics)."""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None
