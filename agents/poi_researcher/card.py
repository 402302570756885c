# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
POI Researcher Agent Card

A2A Agent Card that describes the POI Researcher Agent's capabilities
and connection information for the A2A protocol.
"""

from a2a.types import AgentCapabilities, AgentCard, AgentInterface, AgentSkill

from config.config import A2A_BASE_URL, POI_RESEARCHER_PATH, POI_RESEARCHER_PORT


def build_agent_card(base_url: str = f"{A2A_BASE_URL}:{POI_RESEARCHER_PORT}") -> AgentCard:
    """Agent card advertising the POI researcher at `base_url` + its path."""
    url = f"{base_url.rstrip('/')}{POI_RESEARCHER_PATH}"
    return AgentCard(
        protocolVersion="0.3.0",
        name="POI Researcher Agent",
        description="Researches detailed information about points of interest including history, culture, and events",
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
                id="poi_research",
                name="Point of Interest Research",
                description="Researches detailed information about travel destinations including history, culture, art, and events",
                examples=[
                    "Research the Eiffel Tower",
                    "Find interesting facts about the Colosseum",
                    "What events are happening in Barcelona in July?",
                ],
                tags=["travel", "research", "culture", "history", "events"],
            )
        ],
        supportsAuthenticatedExtendedCard=False,
    )
