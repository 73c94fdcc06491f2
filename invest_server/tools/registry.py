"""Domain tool registry entrypoint."""

from __future__ import annotations

from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP

from invest_server.config.settings import DEFAULT_OWNER_ID, Settings
from invest_server.portfolio.portfolio_service import PortfolioService
from invest_server.portfolio.price_sources import LiveQuotePriceSource
from invest_server.portfolio.repository import HoldingsRepository
from invest_server.runtime.monitoring import ServerMetrics
from invest_server.services.base import ServiceContext
from invest_server.services.catalog import ReferenceCatalog
from invest_server.services.market_service import MarketService
from invest_server.services.quote_service import QuoteService
from invest_server.services.runtime_service import RuntimeService
from invest_server.services.search_service import SearchService
from invest_server.tools.market_tools import register_market_tools
from invest_server.tools.portfolio_tools import register_portfolio_tools
from invest_server.tools.quote_tools import register_quote_tools
from invest_server.tools.runtime_tools import register_runtime_tools


@dataclass
class ToolServices:
    quotes: QuoteService
    search: SearchService
    market: MarketService
    portfolio: PortfolioService
    runtime: RuntimeService
    metrics: ServerMetrics | None = None
    default_owner_id: str = DEFAULT_OWNER_ID


def build_tool_services(
    ctx: ServiceContext,
    settings: Settings,
    repository: HoldingsRepository,
    catalog: ReferenceCatalog,
) -> ToolServices:
    quotes = QuoteService(
        ctx,
        max_concurrency=settings.primary_max_concurrency,
        bulk_threshold=settings.primary_bulk_threshold,
        cache_ttl_seconds=settings.cache_ttl_quote_seconds,
        rate_limit_disable_seconds=settings.provider_rate_limit_disable_seconds,
    )
    metrics = ctx.server_metrics if isinstance(ctx.server_metrics, ServerMetrics) else None
    return ToolServices(
        quotes=quotes,
        search=SearchService(ctx, catalog),
        market=MarketService(
            ctx,
            catalog,
            market_api_url=settings.market_api_url,
            timezone_name=settings.market_timezone,
        ),
        portfolio=PortfolioService(
            repository,
            catalog,
            price_source=LiveQuotePriceSource(quotes) if settings.price_source == "live" else None,
        ),
        runtime=RuntimeService(ctx),
        metrics=metrics,
        default_owner_id=settings.default_owner_id,
    )


def register_all_tools(mcp: FastMCP, services: ToolServices) -> None:
    register_quote_tools(mcp, services)
    register_market_tools(mcp, services)
    register_portfolio_tools(mcp, services)
    register_runtime_tools(mcp, services)
