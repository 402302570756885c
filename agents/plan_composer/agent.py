# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Plan Composer Agent

Composes the final markdown travel plan from the travel brief and the
researched points of interest.
"""

import logging
from typing import Optional, Sequence

from langchain_core.tools import BaseTool
from ioa_observe.sdk.decorators import agent

from agents.mesh.base import SpecialistAgent
from agents.mesh.generation import StructuredGenerator
from agents.mesh.protocol import TRAVEL_PLAN_ARTIFACT
from agents.travel.models import POIResearchResult, TravelPlanRequest, TravelPlanResult
from agents.travel.toolsets import Toolsets

logger = logging.getLogger("tripmesh.plan_composer.agent")

IMAGE_WIDTH = 400
WORD_COUNT = 200

SYSTEM_PROMPT = """You are a travel plan composition expert. Your task is to create comprehensive,
detailed travel plans from researched points of interest.

Your plans should:
- Have a catchy, memorable title
- Minimize travel time while maximizing experiences
- Consider weather and seasonal factors
- Include interesting stories about locations
- Be well-formatted in markdown with proper headings
- Include relevant images and links
- Provide practical routing information

Use mapping and weather tools to verify distances and conditions."""

COMPOSE_PROMPT = """Given the following travel brief, create a detailed plan.
Give it a brief, catchy title that doesn't include dates, but may consider season, mood or relate to travelers's interests.

Plan the journey to minimize travel time.
However, consider any important events or places of interest along the way that might inform routing.
Include total distances.

{journey_details}
Consider the weather in your recommendations. Use mapping tools to consider distance of driving or walking.

Write up in {word_count} words or less.
Include links in text where appropriate and in the links field.

The Day field locationAndCountry field should be in the format <location,+Country> e.g. Ghent,+Belgium

Put image links where appropriate in text and also in the links field.

Recount at least one interesting story about a famous person associated with an area.

Include natural headings and paragraphs in MARKDOWN format.
Use unordered lists as appropriate.
Start any headings at Header 4
Embed images in text, with max width of {image_width}px.
Be sure to include informative caption and alt text for each image.

Consider the following researched points of interest:
{researched_points}"""


def _format_researched_point(point: POIResearchResult) -> str:
    links = ", ".join(f"{link.url}: {link.summary}" for link in point.links)
    images = ", ".join(f"{link.url}: {link.summary}" for link in point.image_links)
    return "\n".join([point.point_of_interest.name, point.research, links, f"Images: {images}"])


@agent(name="plan_composer_agent")
class PlanComposerAgent(SpecialistAgent):
    """Writes the final travel plan (artifact 'travel-plan')."""
    name = "plan_composer"
    system_prompt = SYSTEM_PROMPT

    def __init__(self, generator: Optional[StructuredGenerator] = None, tools: Optional[Sequence[BaseTool]] = None):
        super().__init__(
            request_model=TravelPlanRequest,
            result_model=TravelPlanResult,
            artifact_id=TRAVEL_PLAN_ARTIFACT,
            generator=generator,
            tools=Toolsets().composition() if tools is None else tools,
        )

    def build_prompt(self, request: TravelPlanRequest) -> str:
        logger.info(f"Composing plan from {len(request.researched_points)} researched point(s)")
        return COMPOSE_PROMPT.format(
            journey_details=request.journey_details,
            word_count=WORD_COUNT,
            image_width=IMAGE_WIDTH,
            researched_points="\n".join(
                _format_researched_point(point) for point in request.researched_points
            ),
        )
