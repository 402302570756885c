# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Specialist Agent Base

Shared lifecycle of the route planner, POI researcher and plan composer:

    decode request -> working -> structured generation -> artifact -> completed

Any failure after the task was accepted is reported as a final 'failed'
status instead of an exception, so callers always observe a terminal state.
"""

import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional, Sequence, Type

from a2a.server.agent_execution import AgentExecutor, RequestContext
from a2a.server.events import EventQueue
from a2a.types import (
    InvalidParamsError,
    Message,
    Task,
    TaskState,
    UnsupportedOperationError,
)
from a2a.utils import new_task
from a2a.utils.errors import ServerError
from langchain_core.tools import BaseTool
from pydantic import BaseModel

from agents.mesh.generation import LangChainGenerator, StructuredGenerator
from agents.mesh.protocol import (
    PayloadDecodeError,
    ProtocolEvent,
    artifact_event,
    decode_message,
    status_event,
)

logger = logging.getLogger("tripmesh.mesh.base")


class SpecialistAgent(ABC):
    """
    Base class for a single-skill agent producing one structured artifact.

    Subclasses pass their schemas to __init__ and implement build_prompt.
    """
    name: str = "specialist"
    system_prompt: str = ""

    def __init__(
        self,
        request_model: Type[BaseModel],
        result_model: Type[BaseModel],
        artifact_id: str,
        generator: Optional[StructuredGenerator] = None,
        tools: Sequence[BaseTool] = (),
    ):
        self.request_model = request_model
        self.result_model = result_model
        self.artifact_id = artifact_id
        self.generator = generator or LangChainGenerator()
        self.tools = list(tools)

    @abstractmethod
    def build_prompt(self, request: BaseModel) -> str:
        raise NotImplementedError

    async def run(self, request: BaseModel) -> BaseModel:
        """Produce the result for an already decoded request."""
        result = await self.generator.generate(
            self.build_prompt(request),
            self.result_model,
            system=self.system_prompt or None,
            tools=self.tools,
        )
        if not isinstance(result, self.result_model):
            result = self.result_model.model_validate(result)
        return result

    async def stream(self, message: Message, task_id: str, context_id: str) -> AsyncIterator[ProtocolEvent]:
        """Yield the task events answering `message`."""
        try:
            request = decode_message(message, self.request_model)
        except PayloadDecodeError as e:
            logger.error(f"[{self.name}] Rejecting request: {e}")
            yield status_event(task_id, context_id, TaskState.failed, final=True, text=str(e))
            return

        yield status_event(task_id, context_id, TaskState.working)

        try:
            result = await self.run(request)
        except Exception as e:
            logger.error(f"[{self.name}] Generation failed: {e}")
            yield status_event(task_id, context_id, TaskState.failed, final=True, text=str(e))
            return

        logger.info(f"[{self.name}] Produced artifact '{self.artifact_id}'")
        yield artifact_event(task_id, context_id, self.artifact_id, result)
        yield status_event(task_id, context_id, TaskState.completed, final=True)


class MeshAgentExecutor(AgentExecutor):
    """A2A executor streaming a SpecialistAgent's events into the event queue."""

    def __init__(self, agent: SpecialistAgent):
        self.agent = agent

    def _validate_request(self, context: RequestContext) -> bool:
        if not context or not context.message or not context.message.parts:
            logger.error("Invalid request parameters: %s", context)
            return False
        return True

    async def execute(
        self,
        context: RequestContext,
        event_queue: EventQueue,
    ) -> None:
        """
        Execute the agent for a given request context.
        """
        logger.debug("Received %s request: %s", self.agent.name, context.message)

        if not self._validate_request(context):
            raise ServerError(error=InvalidParamsError(message="Request must contain a message with parts"))

        task = context.current_task
        if not task:
            task = new_task(context.message)
            await event_queue.enqueue_event(task)

        async for event in self.agent.stream(context.message, task.id, task.context_id):
            await event_queue.enqueue_event(event)

    async def cancel(
        self, request: RequestContext, event_queue: EventQueue
    ) -> Task | None:
        """Cancel this agent's execution."""
        raise ServerError(error=UnsupportedOperationError())
