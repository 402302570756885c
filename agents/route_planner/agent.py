# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Route Planner Agent

Turns a journey form into an ordered list of points of interest along the
route, each with a rough date range.
"""

import logging
from typing import Optional, Sequence

from langchain_core.prompts import PromptTemplate
from langchain_core.tools import BaseTool
from ioa_observe.sdk.decorators import agent

from agents.mesh.base import SpecialistAgent
from agents.mesh.generation import StructuredGenerator
from agents.mesh.protocol import ITINERARY_IDEAS_ARTIFACT
from agents.travel.models import ItineraryIdeasResult, JourneyForm
from agents.travel.toolsets import Toolsets

logger = logging.getLogger("tripmesh.route_planner.agent")

SYSTEM_PROMPT = """You are a travel route planning expert. Your task is to analyze journey details and
identify relevant points of interest along the route.

Consider:
- The travelers' preferences and needs
- Transportation method constraints
- Seasonal considerations
- Geographic and cultural attractions
- Practical routing for minimal travel time

Use mapping and weather tools to make informed decisions."""

ROUTE_PROMPT = PromptTemplate(
    template="""# Task description
- Find points of interest that are relevant to the travel journey and travelers.
- Use mapping tools to consider appropriate order and put a rough date range for each point of interest.

## Details
- The travelers are {travelers}.
- Travelling from {from_city} to {to_city}.
- Leaving on {start_date}, and returning on {end_date}.
- The preferred transportation method is {transport}.""",
    input_variables=["travelers", "from_city", "to_city", "start_date", "end_date", "transport"],
)


@agent(name="route_planner_agent")
class RoutePlannerAgent(SpecialistAgent):
    """Proposes points of interest for a journey (artifact 'itinerary-ideas')."""
    name = "route_planner"
    system_prompt = SYSTEM_PROMPT

    def __init__(self, generator: Optional[StructuredGenerator] = None, tools: Optional[Sequence[BaseTool]] = None):
        super().__init__(
            request_model=JourneyForm,
            result_model=ItineraryIdeasResult,
            artifact_id=ITINERARY_IDEAS_ARTIFACT,
            generator=generator,
            tools=Toolsets().route_planning() if tools is None else tools,
        )

    def build_prompt(self, request: JourneyForm) -> str:
        travelers = ", ".join(
            f"{t.name} ({t.about})" if t.about else t.name for t in request.travelers
        )
        logger.info(f"Planning route {request.from_city} -> {request.to_city} for {travelers}")
        return ROUTE_PROMPT.format(
            travelers=travelers,
            from_city=request.from_city,
            to_city=request.to_city,
            start_date=request.start_date.isoformat(),
            end_date=request.end_date.isoformat(),
            transport=request.transport.value,
        )
