# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Tests for calling agents over A2A HTTP (card discovery + message/stream)."""
import asyncio

import httpx
import pytest

from agents.mesh.protocol import ITINERARY_IDEAS_ARTIFACT, TRAVEL_PLAN_ARTIFACT
from agents.mesh.server import build_agent_app
from agents.plan_composer.agent import PlanComposerAgent
from agents.plan_composer.card import build_agent_card as plan_composer_card
from agents.poi_researcher.agent import POIResearcherAgent
from agents.poi_researcher.card import build_agent_card as poi_researcher_card
from agents.route_planner.agent import RoutePlannerAgent
from agents.route_planner.card import build_agent_card as route_planner_card
from agents.supervisors.travel.graph.graph import TravelOrchestrator
from agents.supervisors.travel.graph.tools import A2AAgentError, HttpAgentConnection, call_agent
from agents.travel.models import ItineraryIdeasResult, TravelPlanRequest, TravelPlanResult
from config.config import PLAN_COMPOSER_PATH, POI_RESEARCHER_PATH, ROUTE_PLANNER_PATH
from tests.fakes import POI_NAMES, FakeGenerator, make_form, make_poi

BASE_URL = "http://testserver"


def http_connection(agent, build_card, path) -> HttpAgentConnection:
    """Connection whose HTTP traffic is served in-process by the agent's app."""
    app = build_agent_app(agent, build_card(BASE_URL), path)
    return HttpAgentConnection(f"{BASE_URL}{path}", timeout=10, transport=httpx.ASGITransport(app=app))


def route_planner(generator=None) -> HttpAgentConnection:
    return http_connection(
        RoutePlannerAgent(generator or FakeGenerator(), tools=[]), route_planner_card, ROUTE_PLANNER_PATH
    )


def plan_composer(generator=None) -> HttpAgentConnection:
    return http_connection(
        PlanComposerAgent(generator or FakeGenerator(), tools=[]), plan_composer_card, PLAN_COMPOSER_PATH
    )


class TestHttpAgentConnection:
    """Test a single remote agent call."""

    def test_call_agent_decodes_the_streamed_artifact(self):
        ideas = asyncio.run(
            call_agent(route_planner(), make_form(), ITINERARY_IDEAS_ARTIFACT, ItineraryIdeasResult)
        )

        assert [poi.name for poi in ideas.points_of_interest] == list(POI_NAMES)

    def test_connection_is_named_after_the_agent_path(self):
        assert route_planner().name == "route-planner"

    def test_rejected_payload_is_an_agent_error(self):
        with pytest.raises(A2AAgentError, match="JourneyForm"):
            asyncio.run(
                call_agent(route_planner(), make_poi("Colosseum"), ITINERARY_IDEAS_ARTIFACT, ItineraryIdeasResult)
            )

    def test_failed_remote_task_is_an_agent_error(self):
        request = TravelPlanRequest(journey_details="From: Paris")

        with pytest.raises(A2AAgentError, match="composer unavailable"):
            asyncio.run(call_agent(
                plan_composer(FakeGenerator(fail_compose=True)),
                request,
                TRAVEL_PLAN_ARTIFACT,
                TravelPlanResult,
            ))

    def test_unreachable_agent_is_an_agent_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        connection = HttpAgentConnection(
            f"{BASE_URL}{ROUTE_PLANNER_PATH}", transport=httpx.MockTransport(refuse)
        )

        with pytest.raises(A2AAgentError, match="route-planner"):
            asyncio.run(call_agent(connection, make_form(), ITINERARY_IDEAS_ARTIFACT, ItineraryIdeasResult))


class TestRemoteOrchestrator:
    """Test the full pipeline with every agent reached over HTTP."""

    def test_plan_travel_over_http(self):
        generator = FakeGenerator()
        orchestrator = TravelOrchestrator(
            route_planner=route_planner(generator),
            poi_researcher=http_connection(
                POIResearcherAgent(generator, tools=[]), poi_researcher_card, POI_RESEARCHER_PATH
            ),
            plan_composer=plan_composer(generator),
        )

        plan = asyncio.run(orchestrator.plan_travel(make_form()))

        assert plan.title == "Roman Holiday"
        assert len(plan.days) == 3
        assert len(generator.prompts["POIResearchResult"]) == 3
