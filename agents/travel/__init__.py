# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Travel Domain Module

Shared by the specialist agents and the supervisor.

Key components:
- models: Journey form, points of interest, research and plan models
- search_tools: Web search and weather forecast tools for the agents
- toolsets: Maps (MCP) and date tools, and the tool selection per agent
- travel_logic: Travel brief and markdown rendering
"""

from agents.travel.models import (
    JourneyForm,
    PointOfInterest,
    POIResearchResult,
    TransportType,
    Traveler,
    TravelPlanResult,
)
from agents.travel.travel_logic import (
    build_journey_details,
    render_journey_overview,
    render_plan_summary,
)

__all__ = [
    "JourneyForm",
    "PointOfInterest",
    "POIResearchResult",
    "TransportType",
    "Traveler",
    "TravelPlanResult",
    "build_journey_details",
    "render_journey_overview",
    "render_plan_summary",
]
