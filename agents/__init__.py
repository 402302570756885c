# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Tripmesh Agents

This package contains the A2A travel planning mesh.
Three specialist agents each produce one part of a trip, and a supervisor
orchestrates them and talks to users.

Modules:
- mesh: Protocol helpers, fan-out, signals and the agent servers
- route_planner, poi_researcher, plan_composer: The specialist agents
- travel: Domain models, search tools and text rendering
- supervisors.travel: Orchestrator, conversations, chat and the HTTP API
"""
