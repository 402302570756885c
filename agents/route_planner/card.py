# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Route Planner Agent Card

A2A Agent Card that describes the Route Planner Agent's capabilities
and connection information for the A2A protocol.
"""

from a2a.types import AgentCapabilities, AgentCard, AgentInterface, AgentSkill

from config.config import A2A_BASE_URL, ROUTE_PLANNER_PATH, ROUTE_PLANNER_PORT


def build_agent_card(base_url: str = f"{A2A_BASE_URL}:{ROUTE_PLANNER_PORT}") -> AgentCard:
    """Agent card advertising the route planner at `base_url` + its path."""
    url = f"{base_url.rstrip('/')}{ROUTE_PLANNER_PATH}"
    return AgentCard(
        protocolVersion="0.3.0",
        name="Route Planner Agent",
        description="Plans travel routes and identifies points of interest based on journey details",
        version="1.0.0",
        url=url,
        preferredTransport="JSONRPC",
        additionalInterfaces=[AgentInterface(url=url, transport="JSONRPC")],
        capabilities=AgentCapabilities(
            streaming=True,
            pushNotifications=False,
            stateTransitionHistory=False,
        ),
        defaultInputModes=["text"],
        defaultOutputModes=["text"],
        skills=[
            AgentSkill(
                id="route_planning",
                name="Route Planning",
                description="Plans travel routes and identifies points of interest for a journey",
                examples=[
                    "Plan a route from Paris to Rome",
                    "Find interesting stops between London and Edinburgh",
                    "Suggest itinerary points for a family trip",
                ],
                tags=["travel", "routing", "points-of-interest", "itinerary"],
            )
        ],
        supportsAuthenticatedExtendedCard=False,
    )
