# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Test doubles for the language model and sample journey data."""

import asyncio
from collections import defaultdict
from typing import Optional, Sequence

from agents.mesh.generation import StructuredGenerator
from agents.travel.models import (
    Day,
    InternetResource,
    ItineraryIdeasResult,
    JourneyForm,
    PointOfInterest,
    POIResearchResult,
    TransportType,
    Traveler,
    TravelPlanResult,
)

POI_NAMES = ("Colosseum", "Vatican Museums", "Trastevere")


def make_form(
    travelers: Sequence[str] = ("Alice",),
    details: Optional[str] = None,
    from_city: str = "Paris",
    to_city: str = "Rome",
) -> JourneyForm:
    return JourneyForm(
        from_city=from_city,
        to_city=to_city,
        transport=TransportType.TRAIN,
        start_date="2026-05-01T09:00:00",
        end_date="2026-05-04T18:00:00",
        travelers=[Traveler(name=name) for name in travelers],
        details=details,
    )


def make_poi(name: str) -> PointOfInterest:
    return PointOfInterest(
        name=name,
        location="Rome, Italy",
        from_date="2026-05-02",
        to_date="2026-05-03",
        description=f"Visit the {name}",
    )


def make_research(name: str) -> POIResearchResult:
    return POIResearchResult(
        point_of_interest=make_poi(name),
        research=f"Notes about {name}",
        links=[InternetResource(url=f"https://example.com/{name}", summary=f"About {name}")],
    )


def make_plan() -> TravelPlanResult:
    return TravelPlanResult(
        title="Roman Holiday",
        plan="#### Arrival\nTake the train to Rome.",
        days=[Day(date=f"2026-05-0{i}", location_and_country="Rome,+Italy") for i in (1, 2, 3)],
        countries_visited=["France", "Italy"],
    )


class FakeGenerator(StructuredGenerator):
    """
    Returns canned results per schema and records every prompt.

    Research results echo the point of interest named in the prompt.
    """

    def __init__(
        self,
        poi_names: Sequence[str] = POI_NAMES,
        fail_research_for: Optional[str] = None,
        fail_compose: bool = False,
    ):
        self.poi_names = list(poi_names)
        self.fail_research_for = fail_research_for
        self.fail_compose = fail_compose
        self.prompts: dict[str, list[str]] = defaultdict(list)

    async def generate(self, prompt, schema, *, system=None, tools=()):
        self.prompts[schema.__name__].append(prompt)
        await asyncio.sleep(0)

        if schema is ItineraryIdeasResult:
            return ItineraryIdeasResult(points_of_interest=[make_poi(name) for name in self.poi_names])

        if schema is POIResearchResult:
            name = next(name for name in self.poi_names if f"- Name: {name}\n" in prompt)
            if name == self.fail_research_for:
                raise RuntimeError(f"search failed for {name}")
            return make_research(name)

        if schema is TravelPlanResult:
            if self.fail_compose:
                raise RuntimeError("composer unavailable")
            return make_plan()

        raise AssertionError(f"Unexpected schema {schema.__name__}")
