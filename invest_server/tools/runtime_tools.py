"""Runtime and operations tools."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

if TYPE_CHECKING:
    from invest_server.tools.registry import ToolServices


def register_runtime_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Get server health: uptime, request/error rates, latency and provider windows.")
    def get_server_health() -> str:
        snapshot = services.runtime.get_server_health()
        payload = asdict(snapshot)
        payload["configured_providers"] = services.runtime.configured_providers()
        return json.dumps(payload, ensure_ascii=True)
