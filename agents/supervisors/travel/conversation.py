# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Conversation State Machine

Guides a user from "no details yet" to a planned trip through clarifying
questions and a confirmation step.

States:
    AWAITING_JOURNEY_DETAILS → AWAITING_PREFERENCES (clarification needed)
                             → AWAITING_CONFIRMATION (nothing to clarify)
    AWAITING_PREFERENCES     → AWAITING_CONFIRMATION (answer recorded)
    AWAITING_CONFIRMATION    → PLANNING (yes/start/proceed, form present)
                             → AWAITING_JOURNEY_DETAILS (no/change/modify)
    PLANNING                 → COMPLETED / FAILED (driven by the plan stream)

`transition` is a pure function; ConversationManager applies it through a
single atomic update of the conversation store.
"""

import logging
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import Field

from agents.supervisors.travel.store import KeyedStore, now_ms
from agents.travel.models import (
    CamelModel,
    JourneyForm,
    TransportType,
    Traveler,
    TravelPlanResult,
)

logger = logging.getLogger("tripmesh.travel.supervisor.conversation")

DEFAULT_MAX_AGE_MS = 3_600_000

ACTIVITY_OPTIONS = [
    "Cultural & Historical",
    "Nature & Adventure",
    "Food & Wine",
    "Relaxation",
    "Shopping",
    "Nightlife",
]

CONFIRM_KEYWORDS = ("yes", "start", "proceed")
DECLINE_KEYWORDS = ("no", "change", "modify")

# Transport used when a clarification answer is not a known transport
DEFAULT_TRANSPORT = TransportType.TRAIN


class ConversationState(str, Enum):
    AWAITING_JOURNEY_DETAILS = "AWAITING_JOURNEY_DETAILS"
    AWAITING_PREFERENCES = "AWAITING_PREFERENCES"
    AWAITING_POI_SELECTION = "AWAITING_POI_SELECTION"
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"
    PLANNING = "PLANNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ClarificationQuestion(CamelModel):
    question_id: str
    question: str
    options: Optional[list[str]] = None
    field: Optional[str] = None


class TravelPreferences(CamelModel):
    activity_types: list[str] = Field(default_factory=list)
    budget: Optional[str] = None
    pace: Optional[str] = None
    interests: list[str] = Field(default_factory=list)


class ConversationMessage(CamelModel):
    role: str
    content: str
    timestamp: int = Field(default_factory=now_ms)


class ConversationContext(CamelModel):
    conversation_id: str
    state: ConversationState
    journey_form: Optional[JourneyForm] = None
    preferences: Optional[TravelPreferences] = None
    pending_question: Optional[ClarificationQuestion] = None
    messages: list[ConversationMessage] = Field(default_factory=list)
    result: Optional[TravelPlanResult] = None
    created_at: int = Field(default_factory=now_ms)

    def with_message(self, role: str, content: str) -> "ConversationContext":
        return self.model_copy(
            update={"messages": self.messages + [ConversationMessage(role=role, content=content)]}
        )


class UserMessage(CamelModel):
    conversation_id: Optional[str] = None
    message: str = ""
    journey_form: Optional[JourneyForm] = None


class AgentResponse(CamelModel):
    conversation_id: str
    state: ConversationState
    message: str
    question: Optional[ClarificationQuestion] = None
    plan: Optional[TravelPlanResult] = None
    options: Optional[list[str]] = None


class ConversationNotFoundError(KeyError):
    """Raised when a message targets an unknown conversation id."""

    def __init__(self, conversation_id: str):
        super().__init__(conversation_id)
        self.conversation_id = conversation_id

    def __str__(self) -> str:
        return f"Conversation not found: {self.conversation_id}"


def needs_clarification(form: JourneyForm) -> Optional[ClarificationQuestion]:
    """
    Decide whether the form needs a clarifying question before planning.

    - No travelers: ask who is traveling (field 'travelers')
    - Several travelers and no details: ask for activity preferences
      (field 'preferences')
    - Otherwise nothing to clarify
    """
    if not form.travelers:
        return ClarificationQuestion(
            question_id="travelers",
            question="Who will be traveling? Please provide names and any relevant details.",
            field="travelers",
        )
    if not (form.details or "").strip() and len(form.travelers) > 1:
        return ClarificationQuestion(
            question_id="preferences",
            question="What type of activities would the group enjoy? Select all that apply:",
            options=list(ACTIVITY_OPTIONS),
            field="preferences",
        )
    return None


def parse_transport(answer: str) -> TransportType:
    """Match a transport name case-insensitively, falling back to Train."""
    wanted = answer.strip().lower()
    for transport in TransportType:
        if transport.value.lower() == wanted:
            return transport
    logger.warning(f"Unknown transport '{answer}', defaulting to {DEFAULT_TRANSPORT.value}")
    return DEFAULT_TRANSPORT


def parse_travelers(answer: str) -> list[Traveler]:
    return [Traveler(name=name.strip()) for name in answer.split(",") if name.strip()]


def _split_answer(answer: str) -> list[str]:
    return [item.strip() for item in answer.split(",") if item.strip()]


def _awaiting_journey_details(
    context: ConversationContext, user_message: UserMessage
) -> tuple[ConversationContext, AgentResponse]:
    form = user_message.journey_form
    if form is None:
        return context, AgentResponse(
            conversation_id=context.conversation_id,
            state=ConversationState.AWAITING_JOURNEY_DETAILS,
            message="Please provide your journey details (origin, destination, dates, travelers).",
        )

    clarification = needs_clarification(form)
    if clarification is not None:
        updated = context.model_copy(update={
            "journey_form": form,
            "state": ConversationState.AWAITING_PREFERENCES,
            "pending_question": clarification,
        })
        return updated, AgentResponse(
            conversation_id=context.conversation_id,
            state=ConversationState.AWAITING_PREFERENCES,
            message=clarification.question,
            question=clarification,
            options=clarification.options,
        )

    updated = context.model_copy(update={
        "journey_form": form,
        "state": ConversationState.AWAITING_CONFIRMATION,
        "pending_question": None,
    })
    return updated, AgentResponse(
        conversation_id=context.conversation_id,
        state=ConversationState.AWAITING_CONFIRMATION,
        message="Great! Ready to plan your trip. Shall I proceed?",
        options=["Yes, start planning", "No, let me change something"],
    )


def _awaiting_preferences(
    context: ConversationContext, user_message: UserMessage
) -> tuple[ConversationContext, AgentResponse]:
    answer = user_message.message
    preferences = context.preferences or TravelPreferences()
    form = context.journey_form
    field = context.pending_question.field if context.pending_question else None

    if field == "preferences":
        preferences = preferences.model_copy(update={"activity_types": _split_answer(answer)})
    elif field == "transport" and form is not None:
        form = form.model_copy(update={"transport": parse_transport(answer)})
    elif field == "travelers" and form is not None and parse_travelers(answer):
        form = form.model_copy(update={"travelers": parse_travelers(answer)})
    else:
        preferences = preferences.model_copy(update={"interests": [answer]})

    updated = context.model_copy(update={
        "journey_form": form,
        "preferences": preferences,
        "pending_question": None,
        "state": ConversationState.AWAITING_CONFIRMATION,
    })
    return updated, AgentResponse(
        conversation_id=context.conversation_id,
        state=ConversationState.AWAITING_CONFIRMATION,
        message="Perfect! I've noted your preferences. Ready to create your travel plan?",
        options=["Yes, start planning", "No, I want to add more details"],
    )


def _awaiting_confirmation(
    context: ConversationContext, user_message: UserMessage
) -> tuple[ConversationContext, AgentResponse]:
    text = user_message.message.lower()

    if any(keyword in text for keyword in CONFIRM_KEYWORDS):
        if context.journey_form is None:
            updated = context.model_copy(update={"state": ConversationState.AWAITING_JOURNEY_DETAILS})
            return updated, AgentResponse(
                conversation_id=context.conversation_id,
                state=ConversationState.AWAITING_JOURNEY_DETAILS,
                message="I don't have your journey details yet. Please provide them first.",
            )
        updated = context.model_copy(update={"state": ConversationState.PLANNING})
        return updated, AgentResponse(
            conversation_id=context.conversation_id,
            state=ConversationState.PLANNING,
            message=(
                "Starting to plan your trip! Use the streaming endpoint to follow progress: "
                f"/a2a/conversation/{context.conversation_id}/stream"
            ),
        )

    if any(keyword in text for keyword in DECLINE_KEYWORDS):
        updated = context.model_copy(update={"state": ConversationState.AWAITING_JOURNEY_DETAILS})
        return updated, AgentResponse(
            conversation_id=context.conversation_id,
            state=ConversationState.AWAITING_JOURNEY_DETAILS,
            message="No problem! What would you like to change? You can provide updated journey details.",
        )

    return context, AgentResponse(
        conversation_id=context.conversation_id,
        state=ConversationState.AWAITING_CONFIRMATION,
        message="Would you like me to start planning? Please respond with 'yes' or 'no'.",
        options=["Yes, start planning", "No, let me change something"],
    )


def transition(
    context: ConversationContext, user_message: UserMessage
) -> tuple[ConversationContext, AgentResponse]:
    """
    Apply one user turn to a conversation.

    Returns the updated context and the reply. Inbound messages never move a
    conversation out of PLANNING, COMPLETED or FAILED.
    """
    state = context.state
    if state == ConversationState.AWAITING_JOURNEY_DETAILS:
        return _awaiting_journey_details(context, user_message)
    if state == ConversationState.AWAITING_PREFERENCES:
        return _awaiting_preferences(context, user_message)
    if state == ConversationState.AWAITING_CONFIRMATION:
        return _awaiting_confirmation(context, user_message)
    if state == ConversationState.PLANNING:
        return context, AgentResponse(
            conversation_id=context.conversation_id,
            state=state,
            message="Planning is in progress. Please check the streaming endpoint for updates.",
        )
    if state == ConversationState.COMPLETED:
        return context, AgentResponse(
            conversation_id=context.conversation_id,
            state=state,
            message="Your travel plan is complete! Would you like to start a new plan?",
            plan=context.result,
        )
    if state == ConversationState.FAILED:
        return context, AgentResponse(
            conversation_id=context.conversation_id,
            state=state,
            message="The previous planning attempt failed. Would you like to try again?",
            options=["Yes, try again", "No, start over"],
        )
    return context, AgentResponse(
        conversation_id=context.conversation_id,
        state=state,
        message="I'm not sure how to proceed. Please start a new conversation.",
    )


class ConversationManager:
    """Owns every conversation and applies turns atomically."""

    def __init__(self, store: Optional[KeyedStore[ConversationContext]] = None):
        self.store = store or KeyedStore("conversations", lambda context: context.created_at)

    def start_conversation(self, user_message: UserMessage) -> AgentResponse:
        """
        Open a conversation, optionally with the journey form already filled in.
        """
        conversation_id = str(uuid4())
        form = user_message.journey_form
        context = ConversationContext(
            conversation_id=conversation_id,
            state=ConversationState.AWAITING_JOURNEY_DETAILS,
            journey_form=form,
            messages=[ConversationMessage(role="system", content="Conversation started")],
        ).with_message("user", user_message.message)

        if form is None:
            response = AgentResponse(
                conversation_id=conversation_id,
                state=ConversationState.AWAITING_JOURNEY_DETAILS,
                message=(
                    "Hello! I'm your travel planning assistant. Please provide your journey "
                    "details including origin, destination, dates, and travelers."
                ),
            )
        else:
            clarification = needs_clarification(form)
            if clarification is not None:
                context = context.model_copy(update={
                    "state": ConversationState.AWAITING_PREFERENCES,
                    "pending_question": clarification,
                })
                response = AgentResponse(
                    conversation_id=conversation_id,
                    state=ConversationState.AWAITING_PREFERENCES,
                    message=f"I'd like to help you plan your trip! {clarification.question}",
                    question=clarification,
                    options=clarification.options,
                )
            else:
                context = context.model_copy(update={"state": ConversationState.AWAITING_CONFIRMATION})
                response = AgentResponse(
                    conversation_id=conversation_id,
                    state=ConversationState.AWAITING_CONFIRMATION,
                    message=(
                        "Great! I have all the details. Would you like me to start planning "
                        f"your trip from {form.from_city} to {form.to_city}?"
                    ),
                    options=["Yes, start planning", "No, let me modify details"],
                )

        self.store.put(conversation_id, context.with_message("assistant", response.message))
        logger.info(f"Started conversation {conversation_id} in state {response.state.value}")
        return response

    def get_conversation(self, conversation_id: str) -> Optional[ConversationContext]:
        return self.store.get(conversation_id)

    def handle_message(self, conversation_id: str, user_message: UserMessage) -> AgentResponse:
        """
        Apply one user turn.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """

        def update(context: Optional[ConversationContext]):
            if context is None:
                raise ConversationNotFoundError(conversation_id)
            updated, response = transition(context.with_message("user", user_message.message), user_message)
            return updated.with_message("assistant", response.message), response

        response = self.store.modify(conversation_id, update)
        logger.info(f"Conversation {conversation_id} is now {response.state.value}")
        return response

    def mark_planning(self, conversation_id: str) -> ConversationContext:
        """
        Move a conversation with a journey form into PLANNING.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
            ValueError: If no journey form has been provided yet
        """

        def update(context: Optional[ConversationContext]):
            if context is None:
                raise ConversationNotFoundError(conversation_id)
            if context.journey_form is None:
                raise ValueError("No journey details provided")
            updated = context.model_copy(update={"state": ConversationState.PLANNING})
            return updated, updated

        return self.store.modify(conversation_id, update)

    def complete(self, conversation_id: str, plan: TravelPlanResult) -> None:
        self._finish(conversation_id, ConversationState.COMPLETED, plan, "Your travel plan is ready!")

    def fail(self, conversation_id: str, reason: str) -> None:
        self._finish(conversation_id, ConversationState.FAILED, None, f"Planning failed: {reason}")

    def _finish(
        self,
        conversation_id: str,
        state: ConversationState,
        plan: Optional[TravelPlanResult],
        message: str,
    ) -> None:
        def update(context: Optional[ConversationContext]):
            if context is None:
                logger.warning(f"Conversation {conversation_id} vanished before planning finished")
                return None, None
            changes = {"state": state}
            if plan is not None:
                changes["result"] = plan
            return context.model_copy(update=changes).with_message("assistant", message), None

        self.store.modify(conversation_id, update)

    def cleanup_old_conversations(self, max_age_ms: int = DEFAULT_MAX_AGE_MS) -> int:
        return self.store.evict_older_than(max_age_ms)
