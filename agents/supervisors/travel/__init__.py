# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Travel Supervisor Module

This supervisor handles travel planning requests by:
1. Gathering journey details through a guided conversation or a chat
2. Asking the Route Planner for points of interest
3. Researching every point of interest in parallel with the POI Researcher
4. Having the Plan Composer write the final plan

Progress is streamed to clients as typed events over SSE and WebSocket.
The orchestration itself is a LangGraph workflow (see graph/).
"""
