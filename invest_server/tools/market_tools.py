"""Market overview tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from invest_server.runtime.response import success_response
from invest_server.tools.common import run_tool

if TYPE_CHECKING:
    from invest_server.tools.registry import ToolServices


def register_market_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Get indices, trending stocks, top gainers/losers and market status.")
    def get_market_data() -> str:
        return run_tool(
            "get_market_data",
            lambda: success_response(services.market.snapshot()),
            "Failed to fetch market data",
            metrics=services.metrics,
        )
