# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Agent Mesh Module

Building blocks shared by the specialist agents and the orchestrator:
- protocol: A2A message/event helpers and artifact extraction
- signals: Execution signals and the per-run execution context
- parallel: Supervised fan-out over asyncio tasks
- generation: Structured LLM generation
- base: Specialist agent lifecycle and the A2A executor
- server: FastAPI apps serving the agents
"""
