# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Travel Supervisor Graph Module

Contains the LangGraph implementation of the A2A orchestration:
- graph.py: TravelOrchestrator with the research and compose nodes
- models.py: Pydantic models for HTTP request/response bodies
- tools.py: A2A agent connections and the agent call helper
- shared.py: Shared orchestrator instance
"""

from agents.supervisors.travel.graph.graph import (
    TravelOrchestrator,
    build_local_orchestrator,
    build_orchestrator,
    build_remote_orchestrator,
)

__all__ = [
    "TravelOrchestrator",
    "build_local_orchestrator",
    "build_orchestrator",
    "build_remote_orchestrator",
]
