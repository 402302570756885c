# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Travel Domain Models

Pydantic models exchanged between the orchestrator and the specialist agents.
These models double as structured-output schemas for the LLM, so every field
carries a description the model can follow.

Wire JSON uses camelCase field names (fromCity, pointsOfInterest, ...) while
Python code uses snake_case attributes.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising to camelCase JSON and accepting either naming."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class TransportType(str, Enum):
    PLANE = "Plane"
    TRAIN = "Train"
    BUS = "Bus"
    CAR = "Car"
    BOAT = "Boat"


class Traveler(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid4()), description="Traveler identifier")
    name: str = Field(description="Traveler name")
    about: Optional[str] = Field(default=None, description="Interests or needs of the traveler")


class JourneyForm(CamelModel):
    """
    Journey request submitted by the user.

    Immutable once submitted: updates produce a new form via model_copy.
    """
    model_config = ConfigDict(frozen=True)

    from_city: str = Field(description="City the journey starts from")
    to_city: str = Field(description="Destination city")
    transport: TransportType = Field(description="Preferred transportation method")
    start_date: datetime = Field(description="Departure date-time in ISO-8601 format")
    end_date: datetime = Field(description="Return date-time in ISO-8601 format")
    travelers: list[Traveler] = Field(default_factory=list, description="Travelers, in order")
    details: Optional[str] = Field(default=None, description="Free-text notes about the trip")


class InternetResource(CamelModel):
    url: str = Field(description="Link to the resource")
    summary: str = Field(description="Short summary of what the resource shows")


class Day(CamelModel):
    date: str = Field(description="Date of this day in ISO-8601 format")
    location_and_country: str = Field(
        description="Location of this day in the format <location>,+<Country> e.g. Ghent,+Belgium"
    )


class PointOfInterest(CamelModel):
    name: str = Field(description="Name of the point of interest")
    location: str = Field(description="Town or area with country")
    from_date: str = Field(description="Suggested arrival date")
    to_date: str = Field(description="Suggested departure date")
    description: str = Field(description="Why this place is relevant to the travelers")


class ItineraryIdeasResult(CamelModel):
    points_of_interest: list[PointOfInterest] = Field(
        default_factory=list,
        description="Points of interest in suggested visiting order",
    )


class POIResearchRequest(CamelModel):
    point_of_interest: PointOfInterest
    travelers: str = Field(description="Summary of the travelers")
    start_date: datetime
    end_date: datetime


class POIResearchResult(CamelModel):
    point_of_interest: PointOfInterest = Field(description="The point of interest that was researched")
    research: str = Field(description="Detailed research notes in markdown")
    links: list[InternetResource] = Field(default_factory=list, description="Useful web pages")
    image_links: list[InternetResource] = Field(default_factory=list, description="High-quality image links")


class TravelPlanRequest(CamelModel):
    journey_details: str
    researched_points: list[POIResearchResult] = Field(default_factory=list)


class TravelPlanResult(CamelModel):
    title: str = Field(description="Brief, catchy title without dates")
    plan: str = Field(description="The travel plan in markdown")
    days: list[Day] = Field(default_factory=list, description="One entry per travel day")
    image_links: list[InternetResource] = Field(default_factory=list, description="Images used in the plan")
    page_links: list[InternetResource] = Field(default_factory=list, description="Pages referenced by the plan")
    countries_visited: list[str] = Field(default_factory=list, description="Countries visited, in order")
