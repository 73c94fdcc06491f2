"""Quote and symbol search tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from invest_server.runtime.response import error_response, success_response
from invest_server.tools.common import run_tool

if TYPE_CHECKING:
    from invest_server.tools.registry import ToolServices


def register_quote_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Get a normalized quote for one ticker, trying NSE, BSE, then the bare symbol.")
    def get_quote(symbol: str) -> str:
        def _call() -> str:
            result = services.quotes.resolve(symbol)
            if result.data is None:
                return error_response("quote_unavailable")
            return success_response(result)

        return run_tool("get_quote", _call, "Failed to fetch quote", subject=symbol, metrics=services.metrics)

    @mcp.tool(description="Get quotes for a comma-separated list of symbols.")
    def get_quotes(symbols: str = "") -> str:
        return run_tool(
            "get_quotes",
            lambda: success_response(services.quotes.resolve_many(symbols)),
            "Failed to fetch quotes",
            subject=symbols,
            metrics=services.metrics,
        )

    @mcp.tool(description="Search stocks by ticker or company name.")
    def search_stocks(query: str = "") -> str:
        return run_tool(
            "search_stocks",
            lambda: success_response(services.search.search(query)),
            "Failed to search stocks",
            subject=query,
            metrics=services.metrics,
        )
