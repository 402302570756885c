# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
POI Researcher Agent

Researches a single point of interest: stories, history, events during the
travel dates, useful links and images.
"""

import logging
from typing import Optional, Sequence

from langchain_core.prompts import PromptTemplate
from langchain_core.tools import BaseTool
from ioa_observe.sdk.decorators import agent

from agents.mesh.base import SpecialistAgent
from agents.mesh.generation import StructuredGenerator
from agents.mesh.protocol import POI_RESEARCH_ARTIFACT
from agents.travel.models import POIResearchRequest, POIResearchResult
from agents.travel.toolsets import Toolsets

logger = logging.getLogger("tripmesh.poi_researcher.agent")

SYSTEM_PROMPT = """You are a travel research expert specializing in cultural and historical information.
Your task is to research points of interest and provide rich, detailed information.

Focus on:
- Interesting stories about art, culture, and famous people
- Historical significance and context
- Events happening during the travel dates
- Practical visitor information
- High-quality images that showcase the location

Use web search and mapping tools to find accurate, up-to-date information."""

RESEARCH_PROMPT = PromptTemplate(
    template="""Research the following point of interest.
Consider interesting stories about art and culture and famous people.
Details from the traveler: {travelers}.
Dates to consider: departure from {start_date} to {end_date}.
If any particularly important events are happening here during this time, mention them and list specific dates.

# Point of interest to research
- Name: {name}
- Location: {location}
- From {from_date} to {to_date}
- Description: {description}""",
    input_variables=[
        "travelers", "start_date", "end_date",
        "name", "location", "from_date", "to_date", "description",
    ],
)


@agent(name="poi_researcher_agent")
class POIResearcherAgent(SpecialistAgent):
    """Researches one point of interest (artifact 'poi-research')."""
    name = "poi_researcher"
    system_prompt = SYSTEM_PROMPT

    def __init__(self, generator: Optional[StructuredGenerator] = None, tools: Optional[Sequence[BaseTool]] = None):
        super().__init__(
            request_model=POIResearchRequest,
            result_model=POIResearchResult,
            artifact_id=POI_RESEARCH_ARTIFACT,
            generator=generator,
            tools=Toolsets().research() if tools is None else tools,
        )

    def build_prompt(self, request: POIResearchRequest) -> str:
        poi = request.point_of_interest
        logger.info(f"Researching point of interest: {poi.name} ({poi.location})")
        return RESEARCH_PROMPT.format(
            travelers=request.travelers,
            start_date=request.start_date.isoformat(),
            end_date=request.end_date.isoformat(),
            name=poi.name,
            location=poi.location,
            from_date=poi.from_date,
            to_date=poi.to_date,
            description=poi.description,
        )
