# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Agent Protocol Helpers

Thin helpers over the a2a-sdk types used by every agent in the mesh:
- building request messages from pydantic payloads
- building status and artifact update events
- folding an event stream into artifacts and decoding the expected one

Artifact ids:
- itinerary-ideas: route planner result
- poi-research: POI researcher result
- travel-plan: plan composer result
"""

import logging
from typing import Iterable, Optional, Type, TypeVar, Union
from uuid import uuid4

from a2a.types import (
    Artifact,
    Message,
    Part,
    Role,
    Task,
    TaskArtifactUpdateEvent,
    TaskState,
    TaskStatus,
    TaskStatusUpdateEvent,
    TextPart,
)
from a2a.utils import new_agent_text_message
from pydantic import BaseModel, ValidationError

logger = logging.getLogger("tripmesh.mesh.protocol")

ITINERARY_IDEAS_ARTIFACT = "itinerary-ideas"
POI_RESEARCH_ARTIFACT = "poi-research"
TRAVEL_PLAN_ARTIFACT = "travel-plan"

ProtocolEvent = Union[Task, Message, TaskStatusUpdateEvent, TaskArtifactUpdateEvent]

ModelT = TypeVar("ModelT", bound=BaseModel)


class ProtocolError(Exception):
    """Raised when an agent's event stream does not honour the protocol."""
    pass


class PayloadDecodeError(ProtocolError):
    """Raised when a message or artifact payload does not match its schema."""
    pass


class AgentTaskFailedError(ProtocolError):
    """Raised when the remote task reported a failed status."""
    pass


def text_message(payload: BaseModel, context_id: Optional[str] = None) -> Message:
    """Wrap a payload as a user message with a single camelCase JSON text part."""
    return Message(
        messageId=str(uuid4()),
        contextId=context_id or str(uuid4()),
        role=Role.user,
        parts=[Part(TextPart(text=payload.model_dump_json(by_alias=True)))],
    )


def parts_text(parts: Iterable[Part]) -> str:
    """Concatenate the text parts, in order and without separator."""
    return "".join(part.root.text for part in parts if isinstance(part.root, TextPart))


def decode_text(text: str, model: Type[ModelT]) -> ModelT:
    try:
        return model.model_validate_json(text)
    except ValidationError as e:
        raise PayloadDecodeError(f"payload is not a valid {model.__name__}: {e}") from e


def decode_message(message: Message, model: Type[ModelT]) -> ModelT:
    """Decode the text parts of an incoming message into `model`."""
    return decode_text(parts_text(message.parts or []), model)


def status_event(
    task_id: str,
    context_id: str,
    state: TaskState,
    final: bool = False,
    text: Optional[str] = None,
) -> TaskStatusUpdateEvent:
    message = None
    if text:
        message = new_agent_text_message(text, context_id=context_id, task_id=task_id)
    return TaskStatusUpdateEvent(
        taskId=task_id,
        contextId=context_id,
        status=TaskStatus(state=state, message=message),
        final=final,
    )


def artifact_event(
    task_id: str,
    context_id: str,
    artifact_id: str,
    payload: BaseModel,
    append: bool = False,
) -> TaskArtifactUpdateEvent:
    return TaskArtifactUpdateEvent(
        taskId=task_id,
        contextId=context_id,
        artifact=Artifact(
            artifactId=artifact_id,
            parts=[Part(TextPart(text=payload.model_dump_json(by_alias=True)))],
        ),
        append=append,
        lastChunk=True,
    )


def _failure_reason(status: TaskStatus) -> str:
    if status.message and status.message.parts:
        return parts_text(status.message.parts) or "task failed"
    return "task failed"


def collect_artifacts(events: Iterable[ProtocolEvent]) -> dict[str, Artifact]:
    """
    Fold a task event stream into its artifacts, keyed by artifact id.

    Task events contribute their artifact list. An artifact update with
    append=True extends the parts of the artifact already seen under the
    same id; any other update replaces it.
    """
    artifacts: dict[str, Artifact] = {}
    for event in events:
        if isinstance(event, Task):
            for artifact in event.artifacts or []:
                artifacts[artifact.artifact_id] = artifact
        elif isinstance(event, TaskArtifactUpdateEvent):
            incoming = event.artifact
            existing = artifacts.get(incoming.artifact_id)
            if event.append and existing is not None:
                artifacts[incoming.artifact_id] = existing.model_copy(
                    update={"parts": list(existing.parts) + list(incoming.parts)}
                )
            else:
                artifacts[incoming.artifact_id] = incoming
    return artifacts


def find_failure(events: Iterable[ProtocolEvent]) -> Optional[str]:
    """Return the failure reason if any event reported a failed task state."""
    for event in events:
        if isinstance(event, (Task, TaskStatusUpdateEvent)) and event.status.state == TaskState.failed:
            return _failure_reason(event.status)
    return None


def extract_artifact(
    events: list[ProtocolEvent],
    artifact_id: str,
    model: Type[ModelT],
) -> ModelT:
    """
    Decode the artifact `artifact_id` produced by a finished task.

    Raises:
        AgentTaskFailedError: The task reported a failed status
        ProtocolError: The artifact was never produced
        PayloadDecodeError: The artifact text is not a valid `model`
    """
    reason = find_failure(events)
    if reason is not None:
        raise AgentTaskFailedError(reason)

    artifact = collect_artifacts(events).get(artifact_id)
    if artifact is None:
        raise ProtocolError(f"expected artifact '{artifact_id}' not produced")

    logger.debug(f"Decoding artifact '{artifact_id}' from {len(artifact.parts)} part(s)")
    return decode_text(parts_text(artifact.parts), model)
