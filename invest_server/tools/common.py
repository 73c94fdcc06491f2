"""Shared tool-layer helpers."""

from __future__ import annotations

import logging
import time
from typing import Callable

from invest_server.runtime.monitoring import ServerMetrics, log_tool_event
from invest_server.runtime.response import error_response
from invest_server.services.base import ClientInputError

LOGGER = logging.getLogger(__name__)


def run_tool(
    tool: str,
    call: Callable[[], str],
    failure_code: str,
    subject: str | None = None,
    metrics: ServerMetrics | None = None,
) -> str:
    """Run a tool body, turning failures into error payloads.

    Client input errors are echoed by code. Anything else is logged here and
    replaced by ``failure_code`` so no provider or storage detail leaks out.
    """
    started = time.perf_counter()
    success = False
    try:
        payload = call()
        success = True
        return payload
    except ClientInputError as error:
        return error_response(error.code, str(error))
    except Exception:
        LOGGER.exception("tool failed: tool=%s subject=%s", tool, subject)
        return error_response(failure_code)
    finally:
        latency_ms = (time.perf_counter() - started) * 1000.0
        log_tool_event(tool=tool, subject=subject, latency_ms=latency_ms, success=success)
        if metrics is not None:
            metrics.record(latency_ms=latency_ms, success=success)
