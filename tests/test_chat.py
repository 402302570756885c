# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Tests for the chat service."""
import asyncio

from agents.supervisors.travel.chat import (
    WELCOME_MESSAGE,
    ChatRequest,
    ChatService,
    MessageRole,
    MessageType,
    wants_plan,
)
from agents.supervisors.travel.graph import build_local_orchestrator
from tests.fakes import FakeGenerator, make_form


def run_turn(service, request):
    async def collect():
        return [event async for event in service.chat(request)]

    return asyncio.run(collect())


def service_with(orchestrator):
    return ChatService(orchestrator=lambda: orchestrator)


class TestChatSessions:
    """Test session bookkeeping."""

    def test_create_session_is_idempotent_for_an_id(self):
        service = ChatService()

        first = service.create_session("s-1")
        second = service.create_session("s-1")

        assert first.session_id == "s-1"
        assert second.created_at == first.created_at

    def test_unknown_session_has_no_messages(self):
        assert ChatService().get_messages("missing") == []
        assert ChatService().get_session("missing") is None

    def test_wants_plan(self):
        assert wants_plan("Yes please")
        assert wants_plan("Let's GO")
        assert not wants_plan("Hello there")


class TestChatTurns:
    """Test the events of a chat turn."""

    def test_without_form_asks_for_details(self, orchestrator):
        service = service_with(orchestrator)

        events = run_turn(service, ChatRequest(session_id="s-1", message="Hello"))

        assert [e.type for e in events] == ["user_message", "assistant_message", "done"]
        assert events[1].message.content == WELCOME_MESSAGE
        assert events[-1].done
        assert [m.role for m in service.get_messages("s-1")] == [MessageRole.USER, MessageRole.ASSISTANT]

    def test_form_without_intent_gets_an_overview(self, orchestrator):
        service = service_with(orchestrator)

        events = run_turn(service, ChatRequest(session_id="s-1", message="Hello", journey_form=make_form()))

        assert [e.type for e in events] == ["user_message", "assistant_message", "done"]
        assert "**From:** Paris" in events[1].message.content
        assert service.get_session("s-1").journey_form.from_city == "Paris"

    def test_planning_streams_progress_then_the_plan(self, orchestrator):
        service = service_with(orchestrator)

        events = run_turn(service, ChatRequest(session_id="s-1", message="Plan it", journey_form=make_form()))

        types = [e.type for e in events]
        assert types[:3] == ["user_message", "thinking", "assistant_message"]
        assert types[-2:] == ["plan_result", "done"]
        assert "tool_result" in types
        assert events[2].message.type == MessageType.THINKING
        assert "**Paris**" in events[2].message.content
        assert len(events[-2].plan_result.days) == 3
        assert events[-2].message.content.startswith("# Roman Holiday")
        assert service.get_session("s-1").plan_result.title == "Roman Holiday"

    def test_stored_form_is_used_on_later_turns(self, orchestrator):
        service = service_with(orchestrator)
        run_turn(service, ChatRequest(session_id="s-1", message="Hi", journey_form=make_form()))

        events = run_turn(service, ChatRequest(session_id="s-1", message="yes"))

        assert events[-2].type == "plan_result"

    def test_planning_failure_is_reported(self):
        service = service_with(build_local_orchestrator(FakeGenerator(fail_compose=True)))

        events = run_turn(service, ChatRequest(session_id="s-1", message="start", journey_form=make_form()))

        assert [e.type for e in events][-2:] == ["error", "done"]
        error = events[-2]
        assert "composer unavailable" in error.content
        assert error.message.type == MessageType.ERROR
        assert error.message.content.startswith("I encountered an error while planning:")
        assert error.message.content.endswith("Would you like me to try again?")

    def test_missing_orchestrator_is_reported(self):
        service = ChatService(orchestrator=lambda: None)

        events = run_turn(service, ChatRequest(message="start", journey_form=make_form()))

        assert events[-2].type == "error"
        assert events[-2].content == "Planning service is not available"
        assert events[0].session_id == events[-1].session_id
