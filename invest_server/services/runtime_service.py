"""Runtime health service."""

from __future__ import annotations

from invest_server.runtime.monitoring import HealthSnapshot, ServerMetrics
from invest_server.services.base import ServiceContext
from invest_server.services.provider_status import ProviderStatus

TRACKED_PROVIDERS = ["alphavantage", "yahoo"]


class RuntimeService:
    def __init__(self, ctx: ServiceContext) -> None:
        self.ctx = ctx

    def configured_providers(self) -> list[str]:
        return [name for name in TRACKED_PROVIDERS if self.ctx.get_provider(name) is not None]

    def get_server_health(self) -> HealthSnapshot:
        status = self.ctx.get_provider("provider_status")
        provider_status = status.snapshot(TRACKED_PROVIDERS) if isinstance(status, ProviderStatus) else {}
        metrics = self.ctx.server_metrics
        if not isinstance(metrics, ServerMetrics):
            return HealthSnapshot(
                uptime_seconds=0.0,
                total_requests=0,
                error_rate=0.0,
                avg_latency_ms=0.0,
                provider_status=provider_status,
            )
        return metrics.snapshot(provider_status)
