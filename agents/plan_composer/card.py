# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Plan Composer Agent Card

A2A Agent Card that describes the Plan Composer Agent's capabilities
and connection information for the A2A protocol.
"""

from a2a.types import AgentCapabilities, AgentCard, AgentInterface, AgentSkill

from config.config import A2A_BASE_URL, PLAN_COMPOSER_PATH, PLAN_COMPOSER_PORT


def build_agent_card(base_url: str = f"{A2A_BASE_URL}:{PLAN_COMPOSER_PORT}") -> AgentCard:
    """Agent card advertising the plan composer at `base_url` + its path."""
    url = f"{base_url.rstrip('/')}{PLAN_COMPOSER_PATH}"
    return AgentCard(
        protocolVersion="0.3.0",
        name="Plan Composer Agent",
        description="Composes detailed travel plans from researched points of interest",
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
                id="plan_composition",
                name="Travel Plan Composition",
                description="Creates comprehensive travel plans with detailed itineraries, routing, and recommendations",
                examples=[
                    "Create a travel plan for our European tour",
                    "Compose an itinerary for family vacation",
                    "Build a detailed road trip plan",
                ],
                tags=["travel", "planning", "itinerary", "composition"],
            )
        ],
        supportsAuthenticatedExtendedCard=False,
    )
