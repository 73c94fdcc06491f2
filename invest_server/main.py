"""Application entrypoint for the investment dashboard server."""

from __future__ import annotations

import asyncio
import logging
import os

from mcp.server.fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from invest_server.cache.ttl_cache import TTLCache
from invest_server.config.settings import Settings, get_settings
from invest_server.portfolio.repository import InMemoryHoldingsRepository
from invest_server.providers.alpha_vantage import AlphaVantageClient
from invest_server.providers.yahoo_finance import BulkQuoteClient
from invest_server.runtime.monitoring import ServerMetrics, configure_logging
from invest_server.services.base import ServiceContext
from invest_server.services.catalog import default_catalog
from invest_server.services.provider_status import ProviderStatus
from invest_server.tools.registry import ToolServices, build_tool_services, register_all_tools
from invest_server.utils.rate_limit import RateLimiterRegistry

LOGGER = logging.getLogger(__name__)


def resolve_transport_mode(configured_mode: str) -> str:
    if configured_mode in {"stdio", "http"}:
        return configured_mode
    if os.getenv("PORT"):
        return "http"
    return "stdio"


def build_context(settings: Settings) -> ServiceContext:
    alpha_vantage_client = (
        AlphaVantageClient(settings.alphavantage_api_key, settings.request_timeout_seconds)
        if settings.alphavantage_api_key
        else None
    )
    bulk_client = BulkQuoteClient(
        base_url=settings.quote_api_url or settings.market_api_url,
        timeout_seconds=settings.request_timeout_seconds,
    )
    return ServiceContext(
        providers={
            "alphavantage": alpha_vantage_client,
            "yahoo": bulk_client,
            "provider_status": ProviderStatus(),
        },
        cache=TTLCache(default_ttl_seconds=settings.cache_ttl_seconds),
        rate_limiter=RateLimiterRegistry(min_interval_seconds=settings.provider_min_interval_seconds),
        cache_ttl_seconds=settings.cache_ttl_seconds,
        server_metrics=ServerMetrics(),
    )


def build_server(settings: Settings) -> tuple[FastMCP, ToolServices]:
    ctx = build_context(settings)
    services = build_tool_services(ctx, settings, InMemoryHoldingsRepository(), default_catalog())
    mcp = FastMCP(name=settings.app_name, host=settings.host, port=settings.port)
    register_all_tools(mcp, services)

    @mcp.custom_route(settings.health_path, methods=["GET"])
    async def health_check(_: Request) -> Response:
        return JSONResponse(
            {
                "status": "ok",
                "service": settings.app_name,
                "version": settings.app_version,
                "providers": services.runtime.configured_providers(),
            }
        )

    if ctx.get_provider("alphavantage") is None:
        LOGGER.warning("ALPHAVANTAGE_API_KEY not set; quotes and search use the bulk provider and catalog only.")
    return mcp, services


async def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    mcp, _ = build_server(settings)
    if resolve_transport_mode(settings.transport_mode) == "stdio":
        await mcp.run_stdio_async()
    else:
        await mcp.run_sse_async()


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
