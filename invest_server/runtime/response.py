"""JSON payload shaping for the tool layer."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any

from invest_server.services.base import ServiceResult


def to_jsonable(data: Any) -> Any:
    if is_dataclass(data) and not isinstance(data, type):
        return to_jsonable(asdict(data))
    if isinstance(data, list):
        return [to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    if isinstance(data, datetime):
        return data.isoformat()
    return data


def success_response(result: ServiceResult[Any]) -> str:
    payload: dict[str, Any] = {"data": to_jsonable(result.data)}
    if result.source:
        payload["source"] = result.source
    if result.warning:
        payload["warning"] = result.warning
    return json.dumps(payload, ensure_ascii=True)


def data_response(data: Any) -> str:
    return json.dumps({"data": to_jsonable(data)}, ensure_ascii=True)


def error_response(code: str, message: str | None = None) -> str:
    payload: dict[str, Any] = {"error": code}
    if message:
        payload["message"] = message
    return json.dumps(payload, ensure_ascii=True)
