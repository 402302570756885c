# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Travel Supervisor Models

Pydantic models for the supervisor's HTTP request and response bodies.
"""

from typing import Optional

from agents.travel.models import CamelModel, TravelPlanResult


class A2ATravelPlanResponse(CamelModel):
    """
    Result of a synchronous planning request.

    Attributes:
        success: Whether a plan was produced
        plan: The plan, when successful
        error: Error description, when unsuccessful
    """
    success: bool
    plan: Optional[TravelPlanResult] = None
    error: Optional[str] = None


class CreateSessionResponse(CamelModel):
    session_id: str
    message: str = "Session created"
