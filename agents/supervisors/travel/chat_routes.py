# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Chat Routes

HTTP, SSE and WebSocket surfaces over the ChatService:
- POST /chat/session: create a session
- GET  /chat/session/{id}, /chat/session/{id}/messages: inspect a session
- POST /chat/message: run one turn and return its final event
- GET  /chat/stream: run one turn as server-sent events
- WS   /chat/ws, /chat/ws/{id}: run turns over a socket
"""

import logging
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from agents.supervisors.travel.chat import (
    ChatMessage,
    ChatRequest,
    ChatService,
    ChatSession,
    ChatStreamEvent,
)
from agents.supervisors.travel.events import sse_frame
from agents.supervisors.travel.graph.models import CreateSessionResponse
from agents.travel.models import JourneyForm

logger = logging.getLogger("tripmesh.travel.supervisor.chat_routes")

router = APIRouter(prefix="/chat", tags=["chat"])

chat_service = ChatService()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@router.post("/session", status_code=201)
async def create_session(session_id: Optional[str] = Query(default=None, alias="sessionId")) -> CreateSessionResponse:
    session = chat_service.create_session(session_id)
    logger.info(f"Created chat session {session.session_id}")
    return CreateSessionResponse(session_id=session.session_id)


@router.get("/session/{session_id}")
async def get_session(session_id: str) -> ChatSession:
    session = chat_service.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.get("/session/{session_id}/messages")
async def get_messages(session_id: str) -> list[ChatMessage]:
    return chat_service.get_messages(session_id)


@router.post("/message")
async def send_message(request: ChatRequest) -> ChatStreamEvent:
    """
    Run one chat turn to completion.

    Returns:
        The last event of the turn (done=True)
    """
    last_event = None
    async for event in chat_service.chat(request):
        last_event = event
    return last_event


@router.get("/stream")
async def stream_chat(
    message: str,
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    journey_form: Optional[str] = Query(default=None, alias="journeyForm"),
):
    """
    Run one chat turn as server-sent events.

    `journeyForm` is the JSON-encoded form. A malformed form produces a
    single error event followed by done.
    """

    async def event_generator():
        form = None
        if journey_form:
            try:
                form = JourneyForm.model_validate_json(journey_form)
            except ValidationError as e:
                logger.warning(f"Rejected malformed journey form: {e}")
                sid = session_id or str(uuid4())
                yield sse_frame(ChatStreamEvent(session_id=sid, type="error", content=f"Invalid journey form: {e}").to_json())
                yield sse_frame(ChatStreamEvent(session_id=sid, type="done", done=True).to_json())
                return

        request = ChatRequest(session_id=session_id, message=message, journey_form=form)
        async for event in chat_service.chat(request):
            yield sse_frame(event.to_json())

    return StreamingResponse(event_generator(), media_type="text/event-stream", headers=SSE_HEADERS)


def _decode_frame(text: str, session_id: str) -> ChatRequest:
    """Decode a socket frame as a ChatRequest, treating anything else as plain message text."""
    try:
        request = ChatRequest.model_validate_json(text)
    except ValidationError:
        return ChatRequest(session_id=session_id, message=text)
    if request.session_id is None:
        request = request.model_copy(update={"session_id": session_id})
    return request


async def _send(websocket: WebSocket, event: ChatStreamEvent) -> bool:
    try:
        await websocket.send_text(event.to_json())
        return True
    except Exception as e:
        logger.warning(f"Failed to send chat event to session {event.session_id}: {e}")
        return False


async def _serve_socket(websocket: WebSocket, session_id: Optional[str]) -> None:
    await websocket.accept()
    session = chat_service.create_session(session_id)
    connected = ChatStreamEvent(
        session_id=session.session_id,
        type="connected",
        content="Connected to travel planning assistant",
    )
    if not await _send(websocket, connected):
        return

    try:
        while True:
            text = await websocket.receive_text()
            request = _decode_frame(text, session.session_id)
            async for event in chat_service.chat(request):
                if not await _send(websocket, event):
                    return
    except WebSocketDisconnect:
        logger.info(f"Chat socket for session {session.session_id} disconnected")


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket):
    await _serve_socket(websocket, None)


@router.websocket("/ws/{session_id}")
async def chat_session_socket(websocket: WebSocket, session_id: str):
    await _serve_socket(websocket, session_id)
