# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Travel Supervisor Main Entry Point

FastAPI server for the A2A travel planning mesh.
This server exposes REST endpoints for:
- Planning a journey in one request, or as a live event stream
- Guided conversations that gather journey details before planning
- Free-form chat (see chat_routes.py)
- Health checks

Planning itself is delegated to the Route Planner, POI Researcher and Plan
Composer agents through the TravelOrchestrator.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional
from uuid import uuid4

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError
import uvicorn

from agents.supervisors.travel.chat_routes import chat_service, router as chat_router
from agents.supervisors.travel.conversation import (
    AgentResponse,
    ConversationContext,
    ConversationManager,
    ConversationNotFoundError,
    ConversationState,
    UserMessage,
)
from agents.supervisors.travel.events import (
    AgentError,
    AgentFinished,
    describe_event,
    encode_event,
    sse_frame,
    stream_plan,
)
from agents.supervisors.travel.graph import build_orchestrator, shared
from agents.supervisors.travel.graph.graph import ORCHESTRATOR_AGENT_ID, TravelOrchestrator
from agents.supervisors.travel.graph.models import A2ATravelPlanResponse
from agents.supervisors.travel.store import run_sweeper
from agents.travel.models import JourneyForm
from agents.travel.toolsets import load_toolsets
from config.config import (
    CONVERSATION_MAX_AGE_SECONDS,
    MESH_MODE,
    SUPERVISOR_HOST,
    SUPERVISOR_PORT,
    SWEEP_INTERVAL_SECONDS,
)
from config.logging_config import setup_logging

# Initialize logging
setup_logging()
logger = logging.getLogger("tripmesh.travel.supervisor.main")

# Load environment variables
load_dotenv()

conversation_manager = ConversationManager()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Install the orchestrator (unless one was set already) and run the
    background eviction of stale conversations and chat sessions.
    """
    if shared.get_orchestrator() is None:
        toolsets = await load_toolsets() if MESH_MODE == "local" else None
        shared.set_orchestrator(build_orchestrator(toolsets=toolsets))

    max_age_ms = CONVERSATION_MAX_AGE_SECONDS * 1000
    sweeper = asyncio.create_task(run_sweeper(
        [
            lambda: conversation_manager.cleanup_old_conversations(max_age_ms),
            lambda: chat_service.cleanup_old_sessions(max_age_ms),
        ],
        SWEEP_INTERVAL_SECONDS,
    ))
    try:
        yield
    finally:
        sweeper.cancel()


# Create FastAPI application
app = FastAPI(
    title="A2A Travel Planning Mesh",
    description="Plans trips by orchestrating route planning, POI research and plan composition agents",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure specific origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)


def _orchestrator() -> TravelOrchestrator:
    orchestrator = shared.get_orchestrator()
    if orchestrator is None:
        raise RuntimeError("Travel orchestrator is not initialized")
    return orchestrator


@app.post("/a2a/plan")
async def plan_travel(request: Request):
    """
    Plan a journey in a single request.

    The request body is a JourneyForm.

    Returns:
        200 {success: true, plan} on success
        400 {success: false, error} for an invalid form
        500 {success: false, error} when planning fails
    """
    try:
        form = JourneyForm.model_validate(await request.json())
        plan = await _orchestrator().plan_travel(form)
        return A2ATravelPlanResponse(success=True, plan=plan)
    except ValueError as ve:
        # Covers malformed JSON, schema violations and forms without travelers
        logger.error(f"Invalid journey form: {ve}")
        return JSONResponse(status_code=400, content=A2ATravelPlanResponse(success=False, error=str(ve)).to_dict())
    except Exception as e:
        logger.error(f"Error planning travel: {e}")
        return JSONResponse(status_code=500, content=A2ATravelPlanResponse(success=False, error=str(e)).to_dict())


@app.get("/a2a/plan/stream")
async def stream_travel_plan(journey_form: str = Query(alias="journeyForm")):
    """
    Plan a journey and stream its client events as server-sent events.

    `journeyForm` is the JSON-encoded JourneyForm. A malformed form yields a
    single AgentError event.

    Response format (one event per frame):
        data: {"event_type": "started", "agentId": "...", "runId": "..."}
        data: {"event_type": "message", "lines": ["Calling Route Planner Agent..."]}
        ...
        data: {"event_type": "finished", ..., "plan": {...}}
    """

    async def event_generator():
        try:
            form = JourneyForm.model_validate_json(journey_form)
        except ValidationError as e:
            logger.warning(f"Rejected malformed journey form: {e}")
            error = AgentError(agent_id=ORCHESTRATOR_AGENT_ID, run_id=str(uuid4()), message=f"Invalid journey form: {e}")
            yield sse_frame(encode_event(error))
            return

        async for event in stream_plan(_orchestrator(), form):
            yield sse_frame(encode_event(event))

    return StreamingResponse(event_generator(), media_type="text/event-stream", headers=SSE_HEADERS)


@app.get("/a2a/health")
async def health_check():
    """
    Basic health check endpoint.

    Returns:
        dict: Status indicator
    """
    return {"status": "healthy", "mode": "a2a-mesh"}


@app.post("/a2a/conversation/start")
async def start_conversation(user_message: UserMessage):
    try:
        return conversation_manager.start_conversation(user_message)
    except Exception as e:
        logger.error(f"Error starting conversation: {e}")
        failure = AgentResponse(
            conversation_id="",
            state=ConversationState.FAILED,
            message=f"Failed to start conversation: {e}",
        )
        return JSONResponse(status_code=500, content=failure.to_dict())


@app.post("/a2a/conversation/{conversation_id}/message")
async def send_conversation_message(conversation_id: str, user_message: UserMessage):
    """
    Apply one user turn to a conversation.

    Raises:
        400 with a FAILED AgentResponse when the conversation does not exist
    """
    try:
        return conversation_manager.handle_message(conversation_id, user_message)
    except ConversationNotFoundError as e:
        logger.warning(f"Bad request: {e}")
        failure = AgentResponse(conversation_id=conversation_id, state=ConversationState.FAILED, message=str(e))
        return JSONResponse(status_code=400, content=failure.to_dict())
    except Exception as e:
        logger.error(f"Error processing message: {e}")
        failure = AgentResponse(conversation_id=conversation_id, state=ConversationState.FAILED, message=f"Error: {e}")
        return JSONResponse(status_code=500, content=failure.to_dict())


@app.get("/a2a/conversation/{conversation_id}")
async def get_conversation(conversation_id: str) -> ConversationContext:
    context = conversation_manager.get_conversation(conversation_id)
    if context is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return context


def _conversation_frame(event: str, response: AgentResponse) -> str:
    return sse_frame(response.to_json(), event=event)


@app.get("/a2a/conversation/{conversation_id}/stream")
async def stream_conversation(conversation_id: str):
    """
    Plan a conversation's journey and stream the outcome.

    Event types:
        status:   AgentResponse, planning has started
        progress: plain-text progress line
        complete: AgentResponse carrying the plan
        error:    AgentResponse in state FAILED
    """

    async def event_generator():
        try:
            context = conversation_manager.mark_planning(conversation_id)
        except (ConversationNotFoundError, ValueError) as e:
            logger.warning(f"Cannot plan conversation {conversation_id}: {e}")
            yield _conversation_frame("error", AgentResponse(
                conversation_id=conversation_id,
                state=ConversationState.FAILED,
                message=str(e),
            ))
            return

        yield _conversation_frame("status", AgentResponse(
            conversation_id=conversation_id,
            state=ConversationState.PLANNING,
            message="Starting travel planning...",
        ))

        failure: Optional[str] = None
        async for event in stream_plan(_orchestrator(), context.journey_form):
            if isinstance(event, AgentFinished):
                conversation_manager.complete(conversation_id, event.plan)
                yield _conversation_frame("complete", AgentResponse(
                    conversation_id=conversation_id,
                    state=ConversationState.COMPLETED,
                    message="Your travel plan is ready!",
                    plan=event.plan,
                ))
            elif isinstance(event, AgentError):
                failure = event.message or "unknown error"
            else:
                progress = describe_event(event)
                if progress:
                    yield sse_frame(progress, event="progress")

        if failure is not None:
            conversation_manager.fail(conversation_id, failure)
            yield _conversation_frame("error", AgentResponse(
                conversation_id=conversation_id,
                state=ConversationState.FAILED,
                message=f"Planning failed: {failure}",
            ))

    return StreamingResponse(event_generator(), media_type="text/event-stream", headers=SSE_HEADERS)


def main() -> None:
    """Run the supervisor with uvicorn."""
    uvicorn.run(app, host=SUPERVISOR_HOST, port=SUPERVISOR_PORT)


# Run the FastAPI server using uvicorn
if __name__ == "__main__":
    main()
