# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Travel Orchestrator Graph

LangGraph implementation of the A2A travel planning pipeline.
The orchestrator sequences the three specialist agents:
1. Route Planner proposes the points of interest
2. POI Researcher researches every point of interest in parallel
3. Plan Composer writes the final plan from the research

Node Flow:
    research_points (route planner -> fan-out over POIs) → compose_plan → END

Progress is reported as execution signals to the listener passed to
plan_travel; the event translator turns them into client events.
"""

import logging
from typing import Optional, TypedDict
from uuid import uuid4

from langchain_core.runnables import RunnableConfig
from langgraph.graph import StateGraph, END
from langgraph.graph.state import CompiledStateGraph
from ioa_observe.sdk.decorators import agent, graph

from agents.mesh.generation import StructuredGenerator
from agents.mesh.parallel import fan_out
from agents.mesh.protocol import (
    ITINERARY_IDEAS_ARTIFACT,
    POI_RESEARCH_ARTIFACT,
    TRAVEL_PLAN_ARTIFACT,
)
from agents.mesh.signals import (
    AgentCompleted,
    AgentExecutionFailed,
    AgentStarting,
    ExecutionContext,
    NodeCompleted,
    NodeFailed,
    NodeStarting,
    ProgressNote,
    SignalListener,
    StrategyCompleted,
    StrategyStarting,
    ToolCallCompleted,
    current_context,
)
from agents.plan_composer.agent import PlanComposerAgent
from agents.poi_researcher.agent import POIResearcherAgent
from agents.route_planner.agent import RoutePlannerAgent
from agents.supervisors.travel.graph.tools import (
    A2AAgentError,
    AgentConnection,
    AgentEndpoints,
    HttpAgentConnection,
    LocalAgentConnection,
    call_agent,
)
from agents.travel.models import (
    ItineraryIdeasResult,
    JourneyForm,
    PointOfInterest,
    POIResearchRequest,
    POIResearchResult,
    TravelPlanRequest,
    TravelPlanResult,
)
from agents.travel.toolsets import Toolsets
from agents.travel.travel_logic import build_journey_details, describe_travelers
from config.config import (
    AGENT_CALL_TIMEOUT_SECONDS,
    MESH_MODE,
    RESEARCH_MAX_CONCURRENCY,
)

logger = logging.getLogger("tripmesh.travel.supervisor.graph")

ORCHESTRATOR_AGENT_ID = "a2a-orchestrator"
STRATEGY_NAME = "a2a-travel-orchestration"

# Reserved tool names through which each stage reports its structured result
FINISH_ITINERARY_TOOL = "provide_itinerary_ideas"
FINISH_RESEARCH_TOOL = "provide_research_results"
FINISH_PLAN_TOOL = "provide_proposed_travel_plan"


class NodeStates:
    """
    Node state identifiers for the orchestrator workflow.

    RESEARCH: Route planning followed by the parallel POI research
    COMPOSE: Final plan composition
    """
    RESEARCH = "research_points"
    COMPOSE = "compose_plan"


class OrchestratorState(TypedDict, total=False):
    form: JourneyForm
    researched_points: list[POIResearchResult]
    plan: TravelPlanResult


def _execution_context(config: RunnableConfig) -> ExecutionContext:
    return config["configurable"]["execution_context"]


@agent(name="travel_orchestrator")
class TravelOrchestrator:
    """
    LangGraph-based orchestrator that turns a journey form into a travel plan
    by calling the specialist agents over A2A.

    Example usage:
        orchestrator = build_remote_orchestrator()
        plan = await orchestrator.plan_travel(form)
    """

    def __init__(
        self,
        route_planner: AgentConnection,
        poi_researcher: AgentConnection,
        plan_composer: AgentConnection,
        research_limit: Optional[int] = RESEARCH_MAX_CONCURRENCY,
        call_timeout: float = AGENT_CALL_TIMEOUT_SECONDS,
    ):
        """Initialize the orchestrator and compile the workflow."""
        self.route_planner = route_planner
        self.poi_researcher = poi_researcher
        self.plan_composer = plan_composer
        self.research_limit = research_limit
        self.call_timeout = call_timeout
        self.graph = self.build_graph()

    @graph(name="travel_orchestrator_graph")
    def build_graph(self) -> CompiledStateGraph:
        """
        Construct and compile the LangGraph workflow.

        research_points
            - Calls the Route Planner with the journey form
            - Fans out one POI Researcher call per point of interest
            - Keeps the research results in route order

        compose_plan
            - Builds the travel brief from the journey form
            - Calls the Plan Composer with the brief and the research

        Returns:
            CompiledStateGraph: Ready-to-execute LangGraph instance
        """
        workflow = StateGraph(OrchestratorState)

        workflow.add_node(NodeStates.RESEARCH, self._research_node)
        workflow.add_node(NodeStates.COMPOSE, self._compose_node)

        workflow.set_entry_point(NodeStates.RESEARCH)
        workflow.add_edge(NodeStates.RESEARCH, NodeStates.COMPOSE)
        workflow.add_edge(NodeStates.COMPOSE, END)

        return workflow.compile()

    async def _plan_route(self, form: JourneyForm, context: ExecutionContext) -> ItineraryIdeasResult:
        """Stage 1: ask the Route Planner for points of interest."""
        logger.info("Step 1: Calling Route Planner Agent")
        context.emit(ProgressNote(run_id=context.run_id, text="Calling Route Planner Agent..."))

        ideas = await call_agent(
            self.route_planner, form, ITINERARY_IDEAS_ARTIFACT, ItineraryIdeasResult, self.call_timeout
        )
        if not ideas.points_of_interest:
            raise A2AAgentError("Route Planner returned no points of interest")

        logger.info(f"Route Planner returned {len(ideas.points_of_interest)} points of interest")
        context.emit(ToolCallCompleted(
            run_id=context.run_id, call_id=str(uuid4()), tool_name=FINISH_ITINERARY_TOOL, result=ideas,
        ))
        context.emit(ProgressNote(
            run_id=context.run_id,
            text=f"Researching {len(ideas.points_of_interest)} points of interest in parallel...",
        ))
        return ideas

    async def _research_point(self, request: POIResearchRequest, context: ExecutionContext) -> POIResearchResult:
        """Stage 2 worker: research one point of interest."""
        logger.info(f"Step 2: Researching {request.point_of_interest.name} (branch {context.branch})")
        research = await call_agent(
            self.poi_researcher, request, POI_RESEARCH_ARTIFACT, POIResearchResult, self.call_timeout
        )
        context.emit(ToolCallCompleted(
            run_id=context.run_id, call_id=str(uuid4()), tool_name=FINISH_RESEARCH_TOOL, result=research,
        ))
        return research

    async def _research_node(self, state: OrchestratorState, config: RunnableConfig) -> dict:
        """Route planning followed by the parallel research fan-out."""
        context = _execution_context(config)
        form = state["form"]
        travelers = describe_travelers(form)

        def to_requests(ideas: ItineraryIdeasResult) -> list[POIResearchRequest]:
            return [
                self._research_request(poi, travelers, form)
                for poi in ideas.points_of_interest
            ]

        research = fan_out(
            self._plan_route,
            to_requests,
            self._research_point,
            limit=self.research_limit,
            name="poi-research",
        )

        context.emit(NodeStarting(run_id=context.run_id, node=NodeStates.RESEARCH))
        try:
            researched_points = await research(form, context)
        except Exception as e:
            context.emit(NodeFailed(run_id=context.run_id, node=NodeStates.RESEARCH, error=str(e)))
            raise
        logger.info(f"POI Researcher returned {len(researched_points)} research results")
        context.emit(NodeCompleted(run_id=context.run_id, node=NodeStates.RESEARCH))
        return {"researched_points": researched_points}

    def _research_request(self, poi: PointOfInterest, travelers: str, form: JourneyForm) -> POIResearchRequest:
        return POIResearchRequest(
            point_of_interest=poi,
            travelers=travelers,
            start_date=form.start_date,
            end_date=form.end_date,
        )

    async def _compose_node(self, state: OrchestratorState, config: RunnableConfig) -> dict:
        """Stage 3: compose the final plan."""
        context = _execution_context(config)
        logger.info("Step 3: Calling Plan Composer Agent")
        context.emit(NodeStarting(run_id=context.run_id, node=NodeStates.COMPOSE))
        context.emit(ProgressNote(run_id=context.run_id, text="Composing your travel plan..."))

        request = TravelPlanRequest(
            journey_details=build_journey_details(state["form"]),
            researched_points=state["researched_points"],
        )
        try:
            plan = await call_agent(
                self.plan_composer, request, TRAVEL_PLAN_ARTIFACT, TravelPlanResult, self.call_timeout
            )
        except Exception as e:
            context.emit(NodeFailed(run_id=context.run_id, node=NodeStates.COMPOSE, error=str(e)))
            raise

        logger.info(f"Plan Composer returned travel plan: {plan.title}")
        context.emit(ToolCallCompleted(
            run_id=context.run_id, call_id=str(uuid4()), tool_name=FINISH_PLAN_TOOL, result=plan,
        ))
        context.emit(NodeCompleted(run_id=context.run_id, node=NodeStates.COMPOSE))
        return {"plan": plan}

    async def plan_travel(
        self,
        form: JourneyForm,
        listener: Optional[SignalListener] = None,
        run_id: Optional[str] = None,
    ) -> TravelPlanResult:
        """
        Produce a travel plan for a journey form.

        Args:
            form: The journey to plan
            listener: Optional callback receiving execution signals
            run_id: Optional run identifier (generated when omitted)

        Returns:
            The composed TravelPlanResult

        Raises:
            ValueError: If the form lists no travelers
            A2AAgentError: If a downstream agent call fails
            FanOutError: If researching a point of interest fails
        """
        if not form.travelers:
            raise ValueError("Journey form must list at least one traveler.")

        run_id = run_id or str(uuid4())
        context = ExecutionContext(run_id=run_id, listener=listener)
        logger.info(f"Planning travel {form.from_city} -> {form.to_city} (run {run_id})")

        context.emit(AgentStarting(run_id=run_id, agent_id=ORCHESTRATOR_AGENT_ID))
        context.emit(StrategyStarting(run_id=run_id, name=STRATEGY_NAME))
        context.emit(ProgressNote(run_id=run_id, text="Starting A2A mesh orchestration..."))

        token = current_context.set(context)
        try:
            result = await self.graph.ainvoke(
                {"form": form},
                {"configurable": {"thread_id": run_id, "execution_context": context}},
            )
        except Exception as e:
            logger.error(f"Travel planning failed (run {run_id}): {e}")
            context.emit(AgentExecutionFailed(run_id=run_id, agent_id=ORCHESTRATOR_AGENT_ID, error=str(e)))
            raise
        finally:
            current_context.reset(token)

        plan = result["plan"]
        context.emit(StrategyCompleted(run_id=run_id, name=STRATEGY_NAME))
        context.emit(AgentCompleted(run_id=run_id, agent_id=ORCHESTRATOR_AGENT_ID, result=plan))
        return plan


def build_remote_orchestrator(endpoints: Optional[AgentEndpoints] = None) -> TravelOrchestrator:
    """Orchestrator calling the agents served by the mesh over HTTP."""
    endpoints = endpoints or AgentEndpoints.from_config()
    return TravelOrchestrator(
        route_planner=HttpAgentConnection(endpoints.route_planner_url),
        poi_researcher=HttpAgentConnection(endpoints.poi_researcher_url),
        plan_composer=HttpAgentConnection(endpoints.plan_composer_url),
    )


def build_local_orchestrator(
    generator: Optional[StructuredGenerator] = None,
    toolsets: Optional[Toolsets] = None,
) -> TravelOrchestrator:
    """Orchestrator running the three agents in-process."""
    toolsets = toolsets or Toolsets()
    return TravelOrchestrator(
        route_planner=LocalAgentConnection(RoutePlannerAgent(generator, toolsets.route_planning())),
        poi_researcher=LocalAgentConnection(POIResearcherAgent(generator, toolsets.research())),
        plan_composer=LocalAgentConnection(PlanComposerAgent(generator, toolsets.composition())),
    )


def build_orchestrator(mode: str = MESH_MODE, toolsets: Optional[Toolsets] = None) -> TravelOrchestrator:
    """Build the orchestrator for the configured mesh mode ('remote' or 'local')."""
    if mode == "local":
        return build_local_orchestrator(toolsets=toolsets)
    return build_remote_orchestrator()
