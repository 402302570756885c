# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Tests for the agent protocol helpers."""
import pytest
from a2a.types import (
    Artifact,
    Message,
    Part,
    Role,
    TaskArtifactUpdateEvent,
    TaskState,
    TextPart,
)

from agents.mesh.protocol import (
    TRAVEL_PLAN_ARTIFACT,
    AgentTaskFailedError,
    PayloadDecodeError,
    ProtocolError,
    artifact_event,
    collect_artifacts,
    decode_message,
    extract_artifact,
    find_failure,
    parts_text,
    status_event,
    text_message,
)
from agents.travel.models import JourneyForm, TravelPlanResult
from tests.fakes import make_form, make_plan


def chunk_event(text: str, append: bool, artifact_id: str = TRAVEL_PLAN_ARTIFACT) -> TaskArtifactUpdateEvent:
    return TaskArtifactUpdateEvent(
        taskId="task-1",
        contextId="ctx-1",
        artifact=Artifact(artifactId=artifact_id, parts=[Part(TextPart(text=text))]),
        append=append,
    )


class TestMessages:
    """Test request message encoding."""

    def test_text_message_uses_camel_case_json(self):
        message = text_message(make_form())

        assert message.role == Role.user
        assert '"fromCity":"Paris"' in parts_text(message.parts)

    def test_decode_message_restores_the_payload(self):
        form = make_form(travelers=("Alice", "Bob"), details="Art lovers")

        assert decode_message(text_message(form), JourneyForm) == form

    def test_decode_message_rejects_malformed_payload(self):
        message = Message(
            messageId="m-1",
            role=Role.user,
            parts=[Part(TextPart(text="not a journey"))],
        )

        with pytest.raises(PayloadDecodeError):
            decode_message(message, JourneyForm)

    def test_parts_text_joins_without_separator(self):
        parts = [Part(TextPart(text="ab")), Part(TextPart(text="cd"))]

        assert parts_text(parts) == "abcd"


class TestArtifacts:
    """Test folding event streams into artifacts."""

    def test_appended_chunks_decode_like_the_whole_payload(self):
        payload = make_plan().model_dump_json(by_alias=True)
        middle = len(payload) // 2
        events = [
            chunk_event(payload[:middle], append=False),
            chunk_event(payload[middle:], append=True),
        ]

        result = extract_artifact(events, TRAVEL_PLAN_ARTIFACT, TravelPlanResult)

        assert result == TravelPlanResult.model_validate_json(payload)

    def test_update_without_append_replaces_artifact(self):
        events = [chunk_event("first", append=False), chunk_event("second", append=False)]

        artifacts = collect_artifacts(events)

        assert parts_text(artifacts[TRAVEL_PLAN_ARTIFACT].parts) == "second"

    def test_append_without_earlier_chunk_starts_the_artifact(self):
        artifacts = collect_artifacts([chunk_event("only", append=True)])

        assert parts_text(artifacts[TRAVEL_PLAN_ARTIFACT].parts) == "only"

    def test_missing_artifact_is_a_protocol_error(self):
        events = [status_event("task-1", "ctx-1", TaskState.completed, final=True)]

        with pytest.raises(ProtocolError, match="expected artifact 'travel-plan' not produced"):
            extract_artifact(events, TRAVEL_PLAN_ARTIFACT, TravelPlanResult)

    def test_other_artifacts_do_not_satisfy_the_request(self):
        events = [artifact_event("task-1", "ctx-1", "itinerary-ideas", make_plan())]

        with pytest.raises(ProtocolError):
            extract_artifact(events, TRAVEL_PLAN_ARTIFACT, TravelPlanResult)

    def test_failed_status_is_reported_with_reason(self):
        events = [
            status_event("task-1", "ctx-1", TaskState.working),
            status_event("task-1", "ctx-1", TaskState.failed, final=True, text="model timeout"),
        ]

        assert find_failure(events) == "model timeout"
        with pytest.raises(AgentTaskFailedError, match="model timeout"):
            extract_artifact(events, TRAVEL_PLAN_ARTIFACT, TravelPlanResult)

    def test_completed_stream_has_no_failure(self):
        events = [
            status_event("task-1", "ctx-1", TaskState.working),
            artifact_event("task-1", "ctx-1", TRAVEL_PLAN_ARTIFACT, make_plan()),
            status_event("task-1", "ctx-1", TaskState.completed, final=True),
        ]

        assert find_failure(events) is None
        assert extract_artifact(events, TRAVEL_PLAN_ARTIFACT, TravelPlanResult).title == "Roman Holiday"

    def test_malformed_artifact_is_a_decode_error(self):
        events = [chunk_event("{broken", append=False)]

        with pytest.raises(PayloadDecodeError):
            extract_artifact(events, TRAVEL_PLAN_ARTIFACT, TravelPlanResult)
