"""Logging setup, structured tool events and health metrics aggregation."""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any

LOGGER = logging.getLogger("invest_server.events")


@dataclass
class HealthSnapshot:
    uptime_seconds: float
    total_requests: int
    error_rate: float
    avg_latency_ms: float
    provider_status: dict[str, Any]


class ServerMetrics:
    def __init__(self, started_at: float | None = None) -> None:
        self.started_at = started_at or time.time()
        self._lock = threading.Lock()
        self.total_requests = 0
        self.error_requests = 0
        self.total_latency_ms = 0.0

    def record(self, latency_ms: float, success: bool) -> None:
        with self._lock:
            self.total_requests += 1
            if not success:
                self.error_requests += 1
            self.total_latency_ms += max(0.0, latency_ms)

    def snapshot(self, provider_status: dict[str, Any]) -> HealthSnapshot:
        with self._lock:
            requests = self.total_requests
            avg_latency = (self.total_latency_ms / requests) if requests else 0.0
            error_rate = (self.error_requests / requests) if requests else 0.0
        return HealthSnapshot(
            uptime_seconds=max(0.0, time.time() - self.started_at),
            total_requests=requests,
            error_rate=error_rate,
            avg_latency_ms=avg_latency,
            provider_status=provider_status,
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
    for name in ("urllib3", "requests", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def log_tool_event(
    tool: str,
    latency_ms: float,
    success: bool,
    subject: str | None = None,
    warning: str | None = None,
) -> None:
    payload: dict[str, Any] = {
        "tool": tool,
        "subject": subject,
        "latency_ms": round(latency_ms, 3),
        "success": success,
        "timestamp": int(time.time()),
    }
    if warning:
        payload["warning"] = warning
    LOGGER.info(json.dumps(payload, ensure_ascii=True))
