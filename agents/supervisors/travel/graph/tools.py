# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Travel Supervisor Tools

A2A connections used by the orchestrator to reach the specialist agents:
- HttpAgentConnection: agent served over HTTP (card discovery + JSON-RPC
  message/stream)
- LocalAgentConnection: agent running in the same process

call_agent sends one payload over a connection, collects the event stream
under a timeout and decodes the expected artifact.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Type, TypeVar
from uuid import uuid4

import httpx
from langchain_core.tools import ToolException
from pydantic import BaseModel

from a2a.client import A2ACardResolver, A2AClient
from a2a.types import (
    JSONRPCErrorResponse,
    Message,
    MessageSendParams,
    SendStreamingMessageRequest,
)
from a2a.utils import new_task

from agents.mesh.base import SpecialistAgent
from agents.mesh.protocol import ProtocolEvent, extract_artifact, text_message
from config.config import (
    A2A_BASE_URL,
    AGENT_CALL_TIMEOUT_SECONDS,
    PLAN_COMPOSER_PATH,
    PLAN_COMPOSER_PORT,
    POI_RESEARCHER_PATH,
    POI_RESEARCHER_PORT,
    ROUTE_PLANNER_PATH,
    ROUTE_PLANNER_PORT,
)

logger = logging.getLogger("tripmesh.travel.supervisor.tools")

ModelT = TypeVar("ModelT", bound=BaseModel)

AGENT_CARD_PATH = "agent-card.json"


class A2AAgentError(ToolException):
    """Custom exception for A2A communication errors."""
    pass


@dataclass(frozen=True)
class AgentEndpoints:
    """JSON-RPC URLs of the three specialist agents."""
    route_planner_url: str
    poi_researcher_url: str
    plan_composer_url: str

    @staticmethod
    def from_config(base_url: str = A2A_BASE_URL) -> "AgentEndpoints":
        return AgentEndpoints(
            route_planner_url=f"{base_url}:{ROUTE_PLANNER_PORT}{ROUTE_PLANNER_PATH}",
            poi_researcher_url=f"{base_url}:{POI_RESEARCHER_PORT}{POI_RESEARCHER_PATH}",
            plan_composer_url=f"{base_url}:{PLAN_COMPOSER_PORT}{PLAN_COMPOSER_PATH}",
        )


class AgentConnection(ABC):
    """A way of sending one message to an agent and streaming back its events."""
    name: str = "agent"

    @abstractmethod
    def send(self, message: Message) -> AsyncIterator[ProtocolEvent]:
        raise NotImplementedError


class LocalAgentConnection(AgentConnection):
    """Runs the agent in-process, emitting the same events the server would."""

    def __init__(self, agent: SpecialistAgent):
        self.agent = agent
        self.name = agent.name

    async def send(self, message: Message) -> AsyncIterator[ProtocolEvent]:
        task = new_task(message)
        yield task
        async for event in self.agent.stream(message, task.id, task.context_id):
            yield event


class HttpAgentConnection(AgentConnection):
    """
    Talks to an agent over HTTP.

    Every call opens its own httpx client, resolves the agent card from
    {agent_url}/agent-card.json and streams the task over JSON-RPC.
    A custom httpx transport (e.g. ASGITransport) replaces the network.
    """

    def __init__(
        self,
        agent_url: str,
        timeout: float = AGENT_CALL_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.agent_url = agent_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.name = self.agent_url.rsplit("/", 1)[-1]

    async def send(self, message: Message) -> AsyncIterator[ProtocolEvent]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as httpx_client:
            resolver = A2ACardResolver(
                httpx_client=httpx_client,
                base_url=self.agent_url,
                agent_card_path=AGENT_CARD_PATH,
            )
            card = await resolver.get_agent_card()
            client = A2AClient(httpx_client=httpx_client, agent_card=card)

            request = SendStreamingMessageRequest(
                id=str(uuid4()),
                params=MessageSendParams(message=message),
            )
            logger.info(f"Streaming A2A message to {card.name} at {card.url}")
            async for response in client.send_message_streaming(request):
                if isinstance(response.root, JSONRPCErrorResponse):
                    logger.error(f"A2A error from '{card.name}': {response.root.error.message}")
                    raise A2AAgentError(f"Error from '{card.name}': {response.root.error.message}")
                yield response.root.result


async def call_agent(
    connection: AgentConnection,
    payload: BaseModel,
    artifact_id: str,
    model: Type[ModelT],
    timeout: float = AGENT_CALL_TIMEOUT_SECONDS,
) -> ModelT:
    """
    Send `payload` to an agent and decode the artifact it produces.

    Args:
        connection: Connection to the target agent
        payload: Request payload, sent as camelCase JSON text
        artifact_id: Artifact expected in the task's events
        model: Schema of the artifact
        timeout: Upper bound for the whole exchange, in seconds

    Returns:
        The decoded artifact

    Raises:
        A2AAgentError: If communication fails, times out, the task fails
            or the artifact is missing or malformed
    """
    message = text_message(payload)

    async def collect() -> list[ProtocolEvent]:
        return [event async for event in connection.send(message)]

    logger.info(f"Sending A2A message to {connection.name}...")
    try:
        events = await asyncio.wait_for(collect(), timeout)
        result = extract_artifact(events, artifact_id, model)
    except asyncio.TimeoutError as e:
        logger.error(f"'{connection.name}' did not answer within {timeout}s")
        raise A2AAgentError(f"'{connection.name}' did not answer within {timeout}s") from e
    except A2AAgentError:
        raise  # Re-raise our custom exceptions
    except Exception as e:
        logger.error(f"Failed to communicate with '{connection.name}': {e}")
        raise A2AAgentError(f"Failed to communicate with '{connection.name}'. Details: {e}") from e

    logger.info(f"Received '{artifact_id}' from {connection.name} ({len(events)} events)")
    return result
