# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Agent Mesh Server

Serves the three specialist agents, each as its own FastAPI app with A2A
protocol support:

- POST {prefix}                    streaming JSON-RPC task invocation
- GET  {prefix}/agent-card.json    agent card
- GET  /health                     health check

Route planner, POI researcher and plan composer listen on
ROUTE_PLANNER_PORT, POI_RESEARCHER_PORT and PLAN_COMPOSER_PORT.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from a2a.server.apps import A2AFastAPIApplication
from a2a.server.request_handlers import DefaultRequestHandler
from a2a.server.tasks import InMemoryTaskStore
from a2a.types import AgentCard
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from langchain_core.tools import BaseTool
import uvicorn

from agents.mesh.base import MeshAgentExecutor, SpecialistAgent
from agents.plan_composer.agent import PlanComposerAgent
from agents.plan_composer.card import build_agent_card as plan_composer_card
from agents.poi_researcher.agent import POIResearcherAgent
from agents.poi_researcher.card import build_agent_card as poi_researcher_card
from agents.route_planner.agent import RoutePlannerAgent
from agents.route_planner.card import build_agent_card as route_planner_card
from agents.travel.toolsets import Toolsets, load_toolsets
from config.config import (
    A2A_BASE_URL,
    PLAN_COMPOSER_PATH,
    PLAN_COMPOSER_PORT,
    POI_RESEARCHER_PATH,
    POI_RESEARCHER_PORT,
    ROUTE_PLANNER_PATH,
    ROUTE_PLANNER_PORT,
)
from config.logging_config import setup_logging

logger = logging.getLogger("tripmesh.mesh.server")


@dataclass(frozen=True)
class MeshService:
    """One specialist agent and where it is served."""
    key: str
    path: str
    port: int
    create_agent: Callable[..., SpecialistAgent]
    build_card: Callable[[str], AgentCard]
    select_tools: Callable[[Toolsets], list[BaseTool]]


MESH_SERVICES = [
    MeshService("route_planner", ROUTE_PLANNER_PATH, ROUTE_PLANNER_PORT, RoutePlannerAgent, route_planner_card,
                Toolsets.route_planning),
    MeshService("poi_researcher", POI_RESEARCHER_PATH, POI_RESEARCHER_PORT, POIResearcherAgent, poi_researcher_card,
                Toolsets.research),
    MeshService("plan_composer", PLAN_COMPOSER_PATH, PLAN_COMPOSER_PORT, PlanComposerAgent, plan_composer_card,
                Toolsets.composition),
]


def build_agent_app(agent: SpecialistAgent, card: AgentCard, path: str) -> FastAPI:
    """
    Create the FastAPI app exposing `agent` under `path`.

    Args:
        agent: Specialist agent handling the tasks
        card: Agent card served at {path}/agent-card.json
        path: URL prefix of the JSON-RPC endpoint (e.g. /a2a/route-planner)

    Returns:
        FastAPI application ready for uvicorn
    """
    request_handler = DefaultRequestHandler(
        agent_executor=MeshAgentExecutor(agent),
        task_store=InMemoryTaskStore(),
    )

    app = FastAPI(
        title=card.name,
        description=card.description,
        version=card.version,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    A2AFastAPIApplication(agent_card=card, http_handler=request_handler).add_routes_to_app(
        app,
        agent_card_url=f"{path}/agent-card.json",
        rpc_url=path,
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "agent": agent.name}

    return app


async def serve_mesh(host: str = "0.0.0.0") -> None:
    """Run every specialist agent on its own port until interrupted."""
    toolsets = await load_toolsets()
    servers = []
    for service in MESH_SERVICES:
        card = service.build_card(f"{A2A_BASE_URL}:{service.port}")
        agent = service.create_agent(tools=service.select_tools(toolsets))
        app = build_agent_app(agent, card, service.path)
        logger.info(f"Starting {card.name} on {host}:{service.port}{service.path}")
        servers.append(uvicorn.Server(uvicorn.Config(app, host=host, port=service.port, log_level="info")))

    await asyncio.gather(*(server.serve() for server in servers))


def main() -> None:
    setup_logging()
    asyncio.run(serve_mesh())


if __name__ == "__main__":
    main()
