# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Application Configuration

Central configuration module that loads settings from environment variables.
All configuration values are loaded at module import time from .env files.

Key sections:
- LLM: Language model configuration
- Agent Mesh: Base URL and ports of the specialist A2A agents
- Orchestration: Fan-out bounds and downstream call timeouts
- Conversations: Retention of conversation and chat sessions
- Tools: Web search, weather API and maps MCP settings
"""

import os
from dotenv import load_dotenv

load_dotenv()  # Automatically loads from `.env` or `.env.local`

# =============================================================================
# LLM Configuration
# =============================================================================
# Language model settings - uses litellm for provider abstraction
LLM_MODEL = os.getenv("LLM_MODEL", "openai/gpt-4o-mini")

# =============================================================================
# Agent Mesh Configuration
# =============================================================================
# Each specialist agent is served on its own port under a fixed path prefix
A2A_BASE_URL = os.getenv("A2A_BASE_URL", "http://localhost").rstrip("/")
ROUTE_PLANNER_PORT = int(os.getenv("ROUTE_PLANNER_PORT", "9101"))
POI_RESEARCHER_PORT = int(os.getenv("POI_RESEARCHER_PORT", "9102"))
PLAN_COMPOSER_PORT = int(os.getenv("PLAN_COMPOSER_PORT", "9103"))

ROUTE_PLANNER_PATH = "/a2a/route-planner"
POI_RESEARCHER_PATH = "/a2a/poi-researcher"
PLAN_COMPOSER_PATH = "/a2a/plan-composer"

# "remote" talks to the agents over HTTP, "local" runs them in-process
MESH_MODE = os.getenv("MESH_MODE", "remote").lower()

# =============================================================================
# Orchestration Configuration
# =============================================================================
# Maximum number of points of interest researched at the same time (0 = unbounded)
RESEARCH_MAX_CONCURRENCY = max(0, int(os.getenv("RESEARCH_MAX_CONCURRENCY", "8")))

# Upper bound for a single downstream agent call (LLM latency budget)
AGENT_CALL_TIMEOUT_SECONDS = float(os.getenv("AGENT_CALL_TIMEOUT_SECONDS", "300"))

# =============================================================================
# Conversation Configuration
# =============================================================================
CONVERSATION_MAX_AGE_SECONDS = int(os.getenv("CONVERSATION_MAX_AGE_SECONDS", "3600"))
SWEEP_INTERVAL_SECONDS = int(os.getenv("SWEEP_INTERVAL_SECONDS", "300"))

# =============================================================================
# Tool Configuration
# =============================================================================
# Tavily is used by the POI researcher for web search
# Get your API key at: https://tavily.com/
TAVILY_API_KEY = os.getenv("TAVILY_API_KEY", "")
TAVILY_API_URL = os.getenv("TAVILY_API_URL", "https://api.tavily.com/search")

WEATHER_API_URL = os.getenv("WEATHER_API_URL", "https://api.weatherapi.com/v1")
WEATHER_API_KEY = os.getenv("WEATHER_API_KEY", "")

# Google Maps MCP server giving the agents 'maps_*' tools; unset runs without maps
MAPS_MCP_URL = os.getenv("MAPS_MCP_URL", "")
MAPS_MCP_TRANSPORT = os.getenv("MAPS_MCP_TRANSPORT", "sse")

# =============================================================================
# Logging Configuration
# =============================================================================
LOGGING_LEVEL = os.getenv("LOGGING_LEVEL", "INFO").upper()

# =============================================================================
# HTTP Server Configuration
# =============================================================================
SUPERVISOR_HOST = os.getenv("SUPERVISOR_HOST", "0.0.0.0")
SUPERVISOR_PORT = int(os.getenv("SUPERVISOR_PORT", "8080"))
