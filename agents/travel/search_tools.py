# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Search and Weather Tools

HTTP integrations used by the specialist agents while they reason:
- search_web: Tavily web search (route planner and POI researcher)
- weather_forecast: WeatherAPI forecast (route planner and plan composer)

Tool names start with 'search' / 'weather' so the event translator can
classify them for clients.
"""

import logging
from typing import Optional

import httpx
from langchain_core.tools import tool, ToolException
from ioa_observe.sdk.decorators import tool as ioa_tool_decorator

from config.config import (
    TAVILY_API_KEY,
    TAVILY_API_URL,
    WEATHER_API_KEY,
    WEATHER_API_URL,
)

logger = logging.getLogger("tripmesh.travel.search_tools")

MAX_FORECAST_DAYS = 14


async def tavily_search(query: str, max_results: int = 5) -> dict:
    """
    Search the web with Tavily.

    Args:
        query: Free-text search query
        max_results: Maximum number of results to return

    Returns:
        Dictionary with an optional 'answer' and a list of 'results'
        (title, url, content)

    Raises:
        ToolException: If the API key is missing or the call fails
    """
    if not TAVILY_API_KEY:
        raise ToolException("TAVILY_API_KEY is not configured")

    logger.info(f"Searching web: {query}")
    payload = {
        "api_key": TAVILY_API_KEY,
        "query": query,
        "max_results": max_results,
        "include_answer": True,
    }
    try:
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.post(TAVILY_API_URL, json=payload)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as e:
        logger.error(f"HTTP error searching web: {e}")
        raise ToolException(f"Web search failed: {e}") from e

    results = [
        {
            "title": item.get("title", ""),
            "url": item.get("url", ""),
            "content": item.get("content", ""),
        }
        for item in data.get("results", [])
    ]
    logger.info(f"Web search returned {len(results)} results")
    return {"answer": data.get("answer"), "results": results}


async def fetch_forecast(location: str, days: int = 3) -> dict:
    """
    Fetch a daily forecast from WeatherAPI.

    Args:
        location: City name, optionally with country (e.g. "Ghent, Belgium")
        days: Number of forecast days, clamped to 1..14

    Returns:
        Dictionary with the resolved location and one entry per day
        (date, condition, min/max temperature in Celsius, chance of rain)
    """
    if not WEATHER_API_KEY:
        raise ToolException("WEATHER_API_KEY is not configured")

    days = max(1, min(days, MAX_FORECAST_DAYS))
    logger.info(f"Fetching {days}-day forecast for {location}")
    params = {"key": WEATHER_API_KEY, "q": location, "days": days}
    try:
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.get(f"{WEATHER_API_URL}/forecast.json", params=params)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as e:
        logger.error(f"HTTP error fetching forecast: {e}")
        raise ToolException(f"Weather lookup failed: {e}") from e

    resolved = data.get("location", {})
    forecast = []
    for entry in data.get("forecast", {}).get("forecastday", []):
        day = entry.get("day", {})
        forecast.append({
            "date": entry.get("date"),
            "condition": day.get("condition", {}).get("text"),
            "min_temp_c": day.get("mintemp_c"),
            "max_temp_c": day.get("maxtemp_c"),
            "chance_of_rain": day.get("daily_chance_of_rain"),
        })
    return {
        "location": ", ".join(p for p in (resolved.get("name"), resolved.get("country")) if p),
        "forecast": forecast,
    }


@tool
@ioa_tool_decorator(name="search_web")
async def search_web(query: str, max_results: Optional[int] = 5) -> dict:
    """
    Search the web for up-to-date information about places, events,
    history and images. Returns a short answer and a list of sources.
    """
    return await tavily_search(query, max_results or 5)


@tool
@ioa_tool_decorator(name="weather_forecast")
async def weather_forecast(location: str, days: Optional[int] = 3) -> dict:
    """
    Get the daily weather forecast for a location (e.g. "Ghent, Belgium")
    for the next few days.
    """
    return await fetch_forecast(location, days or 3)
