"""Holdings repository interface and the in-memory implementation."""

from __future__ import annotations

import threading
import uuid
from dataclasses import fields as dataclass_fields, replace
from typing import Any, Protocol

from invest_server.portfolio.models import Holding

_HOLDING_FIELDS = {item.name for item in dataclass_fields(Holding)}


class PersistenceError(Exception):
    """A repository operation failed."""


class HoldingsRepository(Protocol):
    def find(self, owner_id: str) -> list[Holding]:
        ...

    def insert(self, holding: Holding) -> Holding:
        ...

    def update_by_id(self, holding_id: str, fields: dict[str, Any]) -> None:
        ...


class InMemoryHoldingsRepository:
    """Process-local document store; callers always receive copies.

    Concurrent updates of the same holding are not coordinated beyond the
    lock around each call, so the last writer wins.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: dict[str, Holding] = {}

    def find(self, owner_id: str) -> list[Holding]:
        with self._lock:
            return [replace(row) for row in self._rows.values() if row.owner_id == owner_id]

    def insert(self, holding: Holding) -> Holding:
        stored = replace(holding, id=holding.id or uuid.uuid4().hex)
        with self._lock:
            if stored.id in self._rows:
                raise PersistenceError(f"Holding {stored.id} already exists.")
            self._rows[stored.id] = stored
        return replace(stored)

    def update_by_id(self, holding_id: str, fields: dict[str, Any]) -> None:
        if "id" in fields:
            raise PersistenceError("The holding id cannot be updated.")
        unknown = sorted(set(fields) - _HOLDING_FIELDS)
        if unknown:
            raise PersistenceError(f"Unknown holding fields: {unknown}")
        with self._lock:
            current = self._rows.get(holding_id)
            if current is None:
                raise PersistenceError(f"Holding {holding_id} not found.")
            self._rows[holding_id] = replace(current, **fields)
