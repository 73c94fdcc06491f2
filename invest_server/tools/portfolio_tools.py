"""Holdings and portfolio tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from invest_server.runtime.response import data_response
from invest_server.tools.common import run_tool

if TYPE_CHECKING:
    from invest_server.tools.registry import ToolServices


def register_portfolio_tools(mcp: FastMCP, services: ToolServices) -> None:
    def _owner(owner_id: str) -> str:
        return owner_id.strip() or services.default_owner_id

    @mcp.tool(description="List a user's holdings with portfolio summary and sector/type allocation.")
    def get_investments(owner_id: str = "") -> str:
        def _call() -> str:
            report = services.portfolio.get_portfolio(_owner(owner_id))
            return data_response(
                {
                    "investments": report.holdings,
                    "summary": report.summary,
                    "allocation": {"sector": report.sector_allocation, "type": report.type_allocation},
                }
            )

        return run_tool("get_investments", _call, "Failed to fetch investments", metrics=services.metrics)

    @mcp.tool(description="Add a holding; current price and sector are filled from reference data.")
    def add_investment(
        symbol: str,
        name: str,
        type: str,
        quantity: float,
        avg_price: float,
        purchase_date: str | None = None,
        sector: str | None = None,
        owner_id: str = "",
    ) -> str:
        payload = {
            "symbol": symbol,
            "name": name,
            "type": type,
            "quantity": quantity,
            "avg_price": avg_price,
            "purchase_date": purchase_date,
            "sector": sector,
        }
        return run_tool(
            "add_investment",
            lambda: data_response(services.portfolio.add_holding(_owner(owner_id), payload)),
            "Failed to add investment",
            subject=symbol,
            metrics=services.metrics,
        )

    @mcp.tool(description="Refresh current prices for every holding of a user.")
    def update_prices(owner_id: str = "") -> str:
        return run_tool(
            "update_prices",
            lambda: data_response(
                {"message": "Prices updated", "updates": services.portfolio.update_prices(_owner(owner_id))}
            ),
            "Failed to update prices",
            metrics=services.metrics,
        )
