"""Validation of new-holding payloads."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from invest_server.portfolio.models import ValidationIssue
from invest_server.services.base import ClientInputError, validate_symbol

VALID_INSTRUMENT_TYPES = {"stock", "mutual_fund", "etf", "bond", "gold", "crypto", "other"}


def _as_non_negative(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def parse_purchase_date(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def validate_holding_payload(payload: dict[str, Any]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    try:
        validate_symbol(str(payload.get("symbol") or ""))
    except ClientInputError as error:
        issues.append(ValidationIssue(field="symbol", code=error.code, message=str(error)))

    if not str(payload.get("name") or "").strip():
        issues.append(ValidationIssue(field="name", code="missing_value", message="name is required."))

    instrument_type = str(payload.get("type") or "").strip().lower()
    if instrument_type not in VALID_INSTRUMENT_TYPES:
        issues.append(
            ValidationIssue(
                field="type",
                code="invalid_type",
                message=f"type must be one of {sorted(VALID_INSTRUMENT_TYPES)}.",
            )
        )

    for field_name in ("quantity", "avg_price"):
        if _as_non_negative(payload.get(field_name)) is None:
            issues.append(
                ValidationIssue(
                    field=field_name,
                    code=f"invalid_{field_name}",
                    message=f"{field_name} must be a non-negative number.",
                )
            )

    if payload.get("purchase_date") is not None and parse_purchase_date(payload.get("purchase_date")) is None:
        issues.append(
            ValidationIssue(
                field="purchase_date",
                code="invalid_date",
                message="purchase_date must be an ISO-8601 date.",
            )
        )
    return issues
