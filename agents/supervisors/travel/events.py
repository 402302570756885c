# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Client Event Stream

Translates internal execution signals into the reduced event vocabulary sent
to clients over SSE and WebSocket, and runs a plan as an ordered event feed.

Client events (JSON discriminator 'event_type'):
- started:  AgentStarted{agentId, runId}
- finished: AgentFinished{agentId, runId, plan}
- error:    AgentError{agentId, runId, message}
- tool:     Tool{id, name, type, state}
- message:  Message{lines}
- step1:    Step1{ideas}
- step2:    Step2{researchedPoint}
"""

import asyncio
import logging
from enum import Enum
from typing import Annotated, AsyncIterator, Literal, Optional, Union
from uuid import uuid4

from pydantic import Field

from agents.mesh.signals import (
    AgentCompleted,
    AgentExecutionFailed,
    AgentStarting,
    LLMCallCompleted,
    ProgressNote,
    Signal,
    ToolCallCompleted,
    ToolCallFailed,
    ToolCallStarting,
)
from agents.supervisors.travel.graph.graph import (
    FINISH_ITINERARY_TOOL,
    FINISH_PLAN_TOOL,
    FINISH_RESEARCH_TOOL,
    ORCHESTRATOR_AGENT_ID,
    TravelOrchestrator,
)
from agents.travel.models import (
    CamelModel,
    JourneyForm,
    PointOfInterest,
    POIResearchResult,
    TravelPlanResult,
)

logger = logging.getLogger("tripmesh.travel.supervisor.events")

FINISH_TOOLS = {FINISH_ITINERARY_TOOL, FINISH_RESEARCH_TOOL, FINISH_PLAN_TOOL}


class ToolType(str, Enum):
    MAPS = "Maps"
    WEATHER = "Weather"
    SEARCH = "Search"
    OTHER = "Other"

    @classmethod
    def from_tool_name(cls, name: str) -> "ToolType":
        if name.startswith("maps"):
            return cls.MAPS
        if name.startswith("weather"):
            return cls.WEATHER
        if name.startswith("search"):
            return cls.SEARCH
        return cls.OTHER


class ToolState(str, Enum):
    RUNNING = "Running"
    FAILED = "Failed"
    SUCCEEDED = "Succeeded"


class AgentStarted(CamelModel):
    event_type: Literal["started"] = Field(default="started", alias="event_type")
    agent_id: str
    run_id: str


class AgentFinished(CamelModel):
    event_type: Literal["finished"] = Field(default="finished", alias="event_type")
    agent_id: str
    run_id: str
    plan: TravelPlanResult


class AgentError(CamelModel):
    event_type: Literal["error"] = Field(default="error", alias="event_type")
    agent_id: str
    run_id: str
    message: Optional[str] = None


class Tool(CamelModel):
    event_type: Literal["tool"] = Field(default="tool", alias="event_type")
    id: str
    name: str
    type: ToolType
    state: ToolState


class Message(CamelModel):
    event_type: Literal["message"] = Field(default="message", alias="event_type")
    lines: list[str]


class Step1(CamelModel):
    event_type: Literal["step1"] = Field(default="step1", alias="event_type")
    ideas: list[PointOfInterest]


class Step2(CamelModel):
    event_type: Literal["step2"] = Field(default="step2", alias="event_type")
    researched_point: POIResearchResult


ClientEvent = Annotated[
    Union[AgentStarted, AgentFinished, AgentError, Tool, Message, Step1, Step2],
    Field(discriminator="event_type"),
]

TERMINAL_EVENTS = (AgentFinished, AgentError)


def _tool_event(signal: Union[ToolCallStarting, ToolCallCompleted, ToolCallFailed], state: ToolState) -> Tool:
    return Tool(
        id=signal.call_id,
        name=signal.tool_name,
        type=ToolType.from_tool_name(signal.tool_name),
        state=state,
    )


def _finish_tool_event(signal: ToolCallCompleted):
    if signal.tool_name == FINISH_ITINERARY_TOOL:
        return Step1(ideas=signal.result.points_of_interest)
    if signal.tool_name == FINISH_RESEARCH_TOOL:
        return Step2(researched_point=signal.result)
    # The final plan travels with AgentFinished
    return None


def translate(signal: Signal):
    """
    Map one execution signal to a client event.

    Returns None for signals clients do not see (node and strategy
    lifecycle, model requests, the final-stage finish tool).
    """
    if isinstance(signal, AgentStarting):
        return AgentStarted(agent_id=signal.agent_id, run_id=signal.run_id)
    if isinstance(signal, AgentCompleted):
        return AgentFinished(agent_id=signal.agent_id, run_id=signal.run_id, plan=signal.result)
    if isinstance(signal, AgentExecutionFailed):
        return AgentError(agent_id=signal.agent_id, run_id=signal.run_id, message=signal.error)
    if isinstance(signal, ToolCallCompleted) and signal.tool_name in FINISH_TOOLS:
        return _finish_tool_event(signal)
    if isinstance(signal, (ToolCallStarting, ToolCallFailed)) and signal.tool_name in FINISH_TOOLS:
        return None
    if isinstance(signal, ToolCallStarting):
        return _tool_event(signal, ToolState.RUNNING)
    if isinstance(signal, ToolCallCompleted):
        return _tool_event(signal, ToolState.SUCCEEDED)
    if isinstance(signal, ToolCallFailed):
        return _tool_event(signal, ToolState.FAILED)
    if isinstance(signal, LLMCallCompleted):
        return Message(lines=list(signal.texts)) if signal.texts else None
    if isinstance(signal, ProgressNote):
        return Message(lines=[signal.text])

    logger.debug(f"Not forwarded to clients: {signal}")
    return None


def encode_event(event) -> str:
    """Serialise a client event as camelCase JSON."""
    return event.model_dump_json(by_alias=True)


def sse_frame(data: str, event: Optional[str] = None) -> str:
    """Format one server-sent event."""
    lines = [f"event: {event}"] if event else []
    lines.extend(f"data: {line}" for line in data.splitlines() or [""])
    return "\n".join(lines) + "\n\n"


async def stream_plan(
    orchestrator: TravelOrchestrator,
    form: JourneyForm,
    run_id: Optional[str] = None,
) -> AsyncIterator:
    """
    Plan a journey and yield its client events in emission order.

    The feed always ends with AgentFinished or AgentError. Closing the
    generator cancels the planning run.
    """
    run_id = run_id or str(uuid4())
    queue: asyncio.Queue = asyncio.Queue()
    done = object()

    def listener(signal: Signal) -> None:
        event = translate(signal)
        if event is not None:
            queue.put_nowait(event)

    async def run() -> TravelPlanResult:
        try:
            return await orchestrator.plan_travel(form, listener=listener, run_id=run_id)
        finally:
            queue.put_nowait(done)

    task = asyncio.create_task(run())
    terminal_seen = False
    try:
        while True:
            event = await queue.get()
            if event is done:
                break
            terminal_seen = terminal_seen or isinstance(event, TERMINAL_EVENTS)
            yield event

        try:
            await task
        except Exception as e:
            logger.error(f"Planning run {run_id} failed: {e}")
            if not terminal_seen:
                yield AgentError(agent_id=ORCHESTRATOR_AGENT_ID, run_id=run_id, message=str(e))
    finally:
        if not task.done():
            logger.info(f"Client went away, cancelling planning run {run_id}")
            task.cancel()


def describe_event(event) -> Optional[str]:
    """Short human-readable progress line for a client event."""
    if isinstance(event, Message):
        return "\n".join(event.lines)
    if isinstance(event, Step1):
        names = ", ".join(poi.name for poi in event.ideas)
        return f"Found {len(event.ideas)} points of interest: {names}"
    if isinstance(event, Step2):
        return f"Researched {event.researched_point.point_of_interest.name}"
    if isinstance(event, Tool):
        if event.state == ToolState.RUNNING:
            return f"Using {event.name}..."
        return f"{event.name} {event.state.value.lower()}"
    if isinstance(event, AgentStarted):
        return "Planning started"
    return None
