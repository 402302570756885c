# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Agent Toolsets

Groups the tools each specialist agent reasons with:
- route planning: search, maps, weather and date arithmetic
- POI research: maps, search and date arithmetic
- plan composition: maps and weather

Maps tools come from a Google Maps MCP server (MAPS_MCP_URL). They are
renamed with a 'maps_' prefix so the event translator classifies them, and
left out entirely when no server is configured.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from langchain_core.tools import BaseTool, ToolException, tool
from langchain_mcp_adapters.client import MultiServerMCPClient
from ioa_observe.sdk.decorators import tool as ioa_tool_decorator

from agents.travel.search_tools import search_web, weather_forecast
from config.config import MAPS_MCP_TRANSPORT, MAPS_MCP_URL

logger = logging.getLogger("tripmesh.travel.toolsets")

MAPS_PREFIX = "maps_"


@tool
@ioa_tool_decorator(name="add_date")
async def add_date(start: str, days: int) -> str:
    """
    Add a number of days (negative to go back) to an ISO-8601 date such as
    "2026-05-01" and return the resulting date in the same format.
    """
    try:
        parsed = date.fromisoformat(start[:10])
    except ValueError as e:
        raise ToolException(f"Invalid date '{start}', expected YYYY-MM-DD") from e
    return (parsed + timedelta(days=days)).isoformat()


def with_maps_prefix(maps_tool: BaseTool) -> BaseTool:
    if maps_tool.name.startswith(MAPS_PREFIX):
        return maps_tool
    return maps_tool.model_copy(update={"name": f"{MAPS_PREFIX}{maps_tool.name}"})


async def load_maps_tools(url: Optional[str] = MAPS_MCP_URL, transport: str = MAPS_MCP_TRANSPORT) -> list[BaseTool]:
    """
    Discover the tools of the Google Maps MCP server.

    Args:
        url: MCP server endpoint; no tools are loaded when empty
        transport: MCP transport ("sse" or "streamable_http")

    Returns:
        Maps tools, each named with the 'maps_' prefix
    """
    if not url:
        logger.info("MAPS_MCP_URL not set, agents run without maps tools")
        return []

    logger.info(f"Connecting to maps MCP server at {url} ({transport})")
    try:
        client = MultiServerMCPClient({"maps": {"url": url, "transport": transport}})
        tools = await client.get_tools()
    except Exception as e:
        logger.error(f"Failed to load maps tools from {url}: {e}")
        raise

    maps_tools = [with_maps_prefix(t) for t in tools]
    logger.info(f"Loaded {len(maps_tools)} maps tools: {[t.name for t in maps_tools]}")
    return maps_tools


@dataclass(frozen=True)
class Toolsets:
    """Tool selections per agent, built around the available maps tools."""
    maps: Sequence[BaseTool] = ()

    def route_planning(self) -> list[BaseTool]:
        return [search_web, *self.maps, weather_forecast, add_date]

    def research(self) -> list[BaseTool]:
        return [*self.maps, search_web, add_date]

    def composition(self) -> list[BaseTool]:
        return [*self.maps, weather_forecast]


async def load_toolsets(url: Optional[str] = MAPS_MCP_URL) -> Toolsets:
    return Toolsets(maps=tuple(await load_maps_tools(url)))
