"""First-non-absent-wins orchestration over ordered provider attempts."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from invest_server.providers.http import ProviderError
from invest_server.services.base import ErrorEnvelope, ServiceContext, ServiceResult
from invest_server.services.provider_status import ProviderStatus

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)
RATE_LIMIT_PATTERNS = (
    "rate limit",
    "call frequency",
    "requests per",
    "premium",
    "limit exceeded",
)
DEFAULT_RATE_LIMIT_DISABLE_SECONDS = 60
GENERIC_UNAVAILABLE_MESSAGE = "No market data provider returned a result."


@dataclass(frozen=True)
class ProviderAttempt(Generic[T]):
    """One step of a fallback chain.

    ``key`` identifies the provider for rate limiting and disable windows,
    ``label`` is what callers see as the result source. ``call`` returns the
    value or None for "no data"; a raised ProviderError also means no data.
    """

    key: str
    label: str
    call: Callable[[], T | None]


class FallbackManager:
    def __init__(
        self,
        ctx: ServiceContext,
        provider_status: ProviderStatus,
        rate_limit_disable_seconds: dict[str, int] | None = None,
    ) -> None:
        self._ctx = ctx
        self._provider_status = provider_status
        self._rate_limit_disable_seconds = rate_limit_disable_seconds or {}

    @property
    def provider_status(self) -> ProviderStatus:
        return self._provider_status

    def execute(self, operation: str, subject: str, attempts: list[ProviderAttempt[T]]) -> ServiceResult[T]:
        had_fallback = False
        for attempt in attempts:
            if self._provider_status.is_disabled(attempt.key):
                had_fallback = True
                LOGGER.info(
                    "provider skipped (disabled window): op=%s subject=%s provider=%s disabled_until=%s",
                    operation,
                    subject,
                    attempt.key,
                    self._provider_status.get_disabled_until(attempt.key),
                )
                continue

            started = time.perf_counter()
            try:
                self._ctx.rate_limiter.wait(attempt.key)
                value = attempt.call()
            except ProviderError as error:
                had_fallback = True
                LOGGER.warning(
                    "provider attempt failed: op=%s subject=%s provider=%s code=%s status=%s latency_ms=%s",
                    operation,
                    subject,
                    attempt.key,
                    error.code,
                    error.status,
                    _elapsed_ms(started),
                )
                if self.is_rate_limited(error):
                    ttl_seconds = self._rate_limit_disable_seconds.get(attempt.key, DEFAULT_RATE_LIMIT_DISABLE_SECONDS)
                    disabled_until = self._provider_status.disable_provider(attempt.key, ttl_seconds)
                    LOGGER.warning(
                        "provider disabled after rate limit: provider=%s disabled_until=%s op=%s",
                        attempt.key,
                        disabled_until,
                        operation,
                    )
                continue
            except Exception:
                had_fallback = True
                LOGGER.exception(
                    "provider attempt unexpected failure: op=%s subject=%s provider=%s latency_ms=%s",
                    operation,
                    subject,
                    attempt.key,
                    _elapsed_ms(started),
                )
                continue

            LOGGER.debug(
                "provider attempt complete: op=%s subject=%s provider=%s success=%s latency_ms=%s",
                operation,
                subject,
                attempt.key,
                value is not None,
                _elapsed_ms(started),
            )
            if value is not None:
                return ServiceResult(
                    data=value,
                    source=attempt.label,
                    warning="Used fallback provider due to upstream issue." if had_fallback else None,
                    fetched_at=time.time(),
                )
            had_fallback = True

        return ServiceResult(
            data=None,
            error=ErrorEnvelope(code="UPSTREAM", message=GENERIC_UNAVAILABLE_MESSAGE, retriable=True),
        )

    @staticmethod
    def is_rate_limited(error: ProviderError) -> bool:
        if error.code == "RATE_LIMIT" or error.status == 429:
            return True
        message = (error.message or "").lower()
        return any(pattern in message for pattern in RATE_LIMIT_PATTERNS)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
