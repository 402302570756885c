# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Chat Service

Free-form chat front-end over the orchestrator. Each chat turn is streamed
as a sequence of ChatStreamEvents:

    user_message → assistant_message | thinking / tool_use / tool_result
                 → plan_result | error → done

Planning starts when a journey form is known and the message asks for it
("plan", "start", "yes", "go"); progress is mirrored from the live event feed.
"""

import logging
from enum import Enum
from typing import AsyncIterator, Callable, Optional
from uuid import uuid4

from pydantic import Field

from agents.supervisors.travel.events import (
    AgentError,
    AgentFinished,
    Step1,
    Step2,
    Tool,
    ToolState,
    describe_event,
    stream_plan,
)
from agents.supervisors.travel.graph import shared
from agents.supervisors.travel.graph.graph import TravelOrchestrator
from agents.supervisors.travel.store import KeyedStore, now_ms
from agents.travel.models import CamelModel, JourneyForm, TravelPlanResult
from agents.travel.travel_logic import render_journey_overview, render_plan_summary

logger = logging.getLogger("tripmesh.travel.supervisor.chat")

DEFAULT_MAX_AGE_MS = 3_600_000

PLAN_KEYWORDS = ("plan", "start", "yes", "go")

WELCOME_MESSAGE = (
    "Hello! I'm your AI travel planning assistant. To create a personalized travel plan, "
    "I'll need some details:\n\n"
    "• **Origin city** - Where are you starting from?\n"
    "• **Destination** - Where do you want to go?\n"
    "• **Dates** - When do you want to travel?\n"
    "• **Travelers** - Who's going on this trip?\n"
    "• **Transport preference** - How do you prefer to travel?\n\n"
    "You can provide these details in your next message, or send them as structured data."
)


class MessageRole(str, Enum):
    USER = "USER"
    ASSISTANT = "ASSISTANT"
    SYSTEM = "SYSTEM"


class MessageType(str, Enum):
    TEXT = "TEXT"
    THINKING = "THINKING"
    TOOL_USE = "TOOL_USE"
    TOOL_RESULT = "TOOL_RESULT"
    PLAN_RESULT = "PLAN_RESULT"
    ERROR = "ERROR"


class ChatMessage(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    role: MessageRole
    content: str
    type: MessageType = MessageType.TEXT
    timestamp: int = Field(default_factory=now_ms)
    metadata: Optional[dict[str, str]] = None


class ChatSession(CamelModel):
    session_id: str
    messages: list[ChatMessage] = Field(default_factory=list)
    journey_form: Optional[JourneyForm] = None
    plan_result: Optional[TravelPlanResult] = None
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)


class ChatRequest(CamelModel):
    session_id: Optional[str] = None
    message: str
    journey_form: Optional[JourneyForm] = None


class ChatStreamEvent(CamelModel):
    session_id: str
    type: str
    content: Optional[str] = None
    message: Optional[ChatMessage] = None
    done: bool = False
    plan_result: Optional[TravelPlanResult] = None


def wants_plan(message: str) -> bool:
    text = message.lower()
    return any(keyword in text for keyword in PLAN_KEYWORDS)


class ChatService:
    """
    Owns chat sessions and streams chat turns.

    Args:
        orchestrator: Returns the orchestrator used for planning (defaults to
            the shared instance)
        store: Session store, created when omitted
    """

    def __init__(
        self,
        orchestrator: Callable[[], Optional[TravelOrchestrator]] = shared.get_orchestrator,
        store: Optional[KeyedStore[ChatSession]] = None,
    ):
        self._orchestrator = orchestrator
        self.store = store or KeyedStore("chat-sessions", lambda session: session.created_at)

    def create_session(self, session_id: Optional[str] = None) -> ChatSession:
        """Create a session, or return the existing one for `session_id`."""
        session_id = session_id or str(uuid4())
        return self.store.put_if_absent(session_id, ChatSession(session_id=session_id))

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        return self.store.get(session_id)

    def get_messages(self, session_id: str) -> list[ChatMessage]:
        session = self.store.get(session_id)
        return session.messages if session else []

    def cleanup_old_sessions(self, max_age_ms: int = DEFAULT_MAX_AGE_MS) -> int:
        return self.store.evict_older_than(max_age_ms)

    def _update_session(self, session_id: str, **changes) -> None:
        def update(session: Optional[ChatSession]):
            if session is None:
                return None, None
            return session.model_copy(update={**changes, "updated_at": now_ms()}), None

        self.store.modify(session_id, update)

    def _add_message(
        self,
        session_id: str,
        role: MessageRole,
        content: str,
        message_type: MessageType = MessageType.TEXT,
    ) -> ChatMessage:
        message = ChatMessage(role=role, content=content, type=message_type)

        def update(session: Optional[ChatSession]):
            if session is None:
                return None, None
            return session.model_copy(update={
                "messages": session.messages + [message],
                "updated_at": now_ms(),
            }), None

        self.store.modify(session_id, update)
        return message

    def _progress_event(self, session_id: str, event) -> Optional[ChatStreamEvent]:
        """Mirror a planning event as a thinking, tool_use or tool_result event."""
        content = describe_event(event)
        if content is None:
            return None
        if isinstance(event, Tool) and event.state == ToolState.RUNNING:
            event_type = "tool_use"
        elif isinstance(event, (Tool, Step1, Step2)):
            event_type = "tool_result"
        else:
            event_type = "thinking"
        return ChatStreamEvent(session_id=session_id, type=event_type, content=content)

    async def chat(self, request: ChatRequest) -> AsyncIterator[ChatStreamEvent]:
        """Handle one chat turn, yielding its events; the last one has done=True."""
        session_id = self.create_session(request.session_id).session_id

        user_message = self._add_message(session_id, MessageRole.USER, request.message)
        yield ChatStreamEvent(session_id=session_id, type="user_message", message=user_message)

        if request.journey_form is not None:
            self._update_session(session_id, journey_form=request.journey_form)

        session = self.store.get(session_id)
        form = request.journey_form or (session.journey_form if session else None)

        if form is None:
            reply = self._add_message(session_id, MessageRole.ASSISTANT, WELCOME_MESSAGE)
            yield ChatStreamEvent(session_id=session_id, type="assistant_message", message=reply)
        elif wants_plan(request.message):
            async for event in self._plan(session_id, form):
                yield event
        else:
            reply = self._add_message(session_id, MessageRole.ASSISTANT, render_journey_overview(form))
            yield ChatStreamEvent(session_id=session_id, type="assistant_message", message=reply)

        yield ChatStreamEvent(session_id=session_id, type="done", done=True)

    async def _plan(self, session_id: str, form: JourneyForm) -> AsyncIterator[ChatStreamEvent]:
        yield ChatStreamEvent(session_id=session_id, type="thinking", content="Analyzing your travel requirements...")
        thinking = self._add_message(
            session_id,
            MessageRole.ASSISTANT,
            f"Let me plan your trip from **{form.from_city}** to **{form.to_city}**...",
            MessageType.THINKING,
        )
        yield ChatStreamEvent(session_id=session_id, type="assistant_message", message=thinking)

        orchestrator = self._orchestrator()
        plan: Optional[TravelPlanResult] = None
        error = "Planning service is not available"
        if orchestrator is not None:
            async for event in stream_plan(orchestrator, form):
                if isinstance(event, AgentFinished):
                    plan = event.plan
                elif isinstance(event, AgentError):
                    error = event.message or "unknown error"
                else:
                    progress = self._progress_event(session_id, event)
                    if progress is not None:
                        yield progress

        if plan is None:
            logger.error(f"Chat session {session_id} planning failed: {error}")
            failure = self._add_message(
                session_id,
                MessageRole.ASSISTANT,
                f"I encountered an error while planning: {error}\n\nWould you like me to try again?",
                MessageType.ERROR,
            )
            yield ChatStreamEvent(session_id=session_id, type="error", message=failure, content=error)
            return

        self._update_session(session_id, plan_result=plan)
        result = self._add_message(session_id, MessageRole.ASSISTANT, render_plan_summary(plan), MessageType.PLAN_RESULT)
        yield ChatStreamEvent(session_id=session_id, type="plan_result", message=result, plan_result=plan)
