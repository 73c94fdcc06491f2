"""In-memory provider disable windows for fallback orchestration."""

from __future__ import annotations

import threading
import time


class ProviderStatus:
    """Tracks providers that are benched after a rate-limit response.

    A rate-limited provider keeps answering with "note" payloads instead of
    data, so further calls inside the window are skipped outright.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._disabled_until: dict[str, float] = {}

    def disable_provider(self, provider: str, ttl_seconds: int) -> float:
        until = time.time() + max(1, ttl_seconds)
        with self._lock:
            current = self._disabled_until.get(provider, 0.0)
            self._disabled_until[provider] = max(current, until)
            return self._disabled_until[provider]

    def is_disabled(self, provider: str) -> bool:
        return self.get_disabled_until(provider) is not None

    def get_disabled_until(self, provider: str) -> float | None:
        with self._lock:
            until = self._disabled_until.get(provider)
            if until is None:
                return None
            if until <= time.time():
                self._disabled_until.pop(provider, None)
                return None
            return until

    def snapshot(self, providers: list[str]) -> dict[str, float | None]:
        return {provider: self.get_disabled_until(provider) for provider in providers}
