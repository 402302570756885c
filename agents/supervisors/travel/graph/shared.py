# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Shared State Module

Manages the orchestrator instance shared by the supervisor's HTTP surfaces.
This module provides a singleton pattern so the plan, conversation and chat
endpoints all drive the same orchestrator, and tests can swap it out.
"""

from typing import Optional

from agents.supervisors.travel.graph.graph import TravelOrchestrator

# Global orchestrator instance - initialized once at startup
_orchestrator: Optional[TravelOrchestrator] = None


def set_orchestrator(orchestrator: Optional[TravelOrchestrator]) -> None:
    """
    Set the global orchestrator instance.

    Called during application startup, or by tests to install an
    orchestrator backed by fake agents.

    Args:
        orchestrator: Configured TravelOrchestrator instance, or None to reset
    """
    global _orchestrator
    _orchestrator = orchestrator


def get_orchestrator() -> Optional[TravelOrchestrator]:
    """
    Get the global orchestrator instance.

    Returns:
        The shared TravelOrchestrator instance, or None if not initialized
    """
    return _orchestrator
