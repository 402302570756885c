# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Tests for the supervisor and agent HTTP surfaces."""
import json

import pytest
from fastapi.testclient import TestClient

from agents.mesh.protocol import text_message
from agents.mesh.server import build_agent_app
from agents.route_planner.agent import RoutePlannerAgent
from agents.route_planner.card import build_agent_card
from agents.supervisors.travel.graph import build_local_orchestrator, shared
from agents.supervisors.travel.main import app
from config.config import ROUTE_PLANNER_PATH
from tests.fakes import FakeGenerator, make_form


def sse_events(body: str) -> list[tuple[str, str]]:
    """Split an SSE body into (event name, data) pairs."""
    events = []
    for frame in body.strip().split("\n\n"):
        name = "message"
        data = []
        for line in frame.splitlines():
            if line.startswith("event: "):
                name = line[len("event: "):]
            elif line.startswith("data: "):
                data.append(line[len("data: "):])
        events.append((name, "\n".join(data)))
    return events


@pytest.fixture
def install_orchestrator():
    def install(generator=None):
        shared.set_orchestrator(build_local_orchestrator(generator or FakeGenerator()))

    yield install
    shared.set_orchestrator(None)


@pytest.fixture
def client(install_orchestrator):
    install_orchestrator()
    with TestClient(app) as test_client:
        yield test_client


def form_json(**kwargs) -> dict:
    return make_form(**kwargs).to_dict()


class TestPlanEndpoints:
    """Test one-shot and streamed planning."""

    def test_health(self, client):
        assert client.get("/a2a/health").json() == {"status": "healthy", "mode": "a2a-mesh"}

    def test_plan_success(self, client):
        response = client.post("/a2a/plan", json=form_json())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["plan"]["title"] == "Roman Holiday"
        assert len(body["plan"]["days"]) == 3
        assert body["plan"]["countriesVisited"] == ["France", "Italy"]

    def test_plan_rejects_incomplete_form(self, client):
        response = client.post("/a2a/plan", json={"fromCity": "Paris"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_plan_rejects_form_without_travelers(self, client):
        response = client.post("/a2a/plan", json=form_json(travelers=()))

        assert response.status_code == 400
        assert "traveler" in response.json()["error"]

    def test_form_dates_travel_as_iso_strings(self):
        body = form_json()

        assert body["startDate"] == "2026-05-01T09:00:00"
        assert body["endDate"] == "2026-05-04T18:00:00"

    def test_plan_rejects_malformed_dates(self, client):
        body = form_json()
        body["startDate"] = "whenever"
        body["endDate"] = "banana"

        response = client.post("/a2a/plan", json=body)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "startDate" in response.json()["error"]

    def test_plan_stream_rejects_malformed_dates(self, client):
        body = form_json()
        body["startDate"] = "next spring"

        response = client.get("/a2a/plan/stream", params={"journeyForm": json.dumps(body)})

        events = [json.loads(data) for _, data in sse_events(response.text)]
        assert [e["event_type"] for e in events] == ["error"]

    def test_plan_failure_is_a_server_error(self, client, install_orchestrator):
        install_orchestrator(FakeGenerator(fail_research_for="Colosseum"))

        response = client.post("/a2a/plan", json=form_json())

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["error"]

    def test_plan_stream(self, client):
        response = client.get("/a2a/plan/stream", params={"journeyForm": json.dumps(form_json())})

        assert response.headers["content-type"].startswith("text/event-stream")
        events = [json.loads(data) for _, data in sse_events(response.text)]
        assert events[0]["event_type"] == "started"
        assert events[-1]["event_type"] == "finished"
        assert sum(e["event_type"] == "step2" for e in events) == 3

    def test_plan_stream_with_malformed_form(self, client):
        response = client.get("/a2a/plan/stream", params={"journeyForm": "{not json"})

        events = [json.loads(data) for _, data in sse_events(response.text)]
        assert len(events) == 1
        assert events[0]["event_type"] == "error"


class TestConversationEndpoints:
    """Test the guided conversation surface."""

    def start(self, client) -> str:
        response = client.post("/a2a/conversation/start", json={"message": "Plan my trip", "journeyForm": form_json()})
        assert response.status_code == 200
        assert response.json()["state"] == "AWAITING_CONFIRMATION"
        return response.json()["conversationId"]

    def test_confirm_and_stream_plan(self, client):
        conversation_id = self.start(client)

        response = client.post(f"/a2a/conversation/{conversation_id}/message", json={"message": "yes"})
        assert response.json()["state"] == "PLANNING"

        stream = client.get(f"/a2a/conversation/{conversation_id}/stream")
        events = sse_events(stream.text)
        names = [name for name, _ in events]
        assert names[0] == "status"
        assert "progress" in names
        assert names[-1] == "complete"
        complete = json.loads(events[-1][1])
        assert complete["state"] == "COMPLETED"
        assert complete["plan"]["title"] == "Roman Holiday"

        context = client.get(f"/a2a/conversation/{conversation_id}").json()
        assert context["state"] == "COMPLETED"
        assert context["result"]["title"] == "Roman Holiday"

    def test_failed_planning_streams_an_error(self, client, install_orchestrator):
        install_orchestrator(FakeGenerator(fail_compose=True))
        conversation_id = self.start(client)

        events = sse_events(client.get(f"/a2a/conversation/{conversation_id}/stream").text)

        assert events[-1][0] == "error"
        assert json.loads(events[-1][1])["state"] == "FAILED"
        assert client.get(f"/a2a/conversation/{conversation_id}").json()["state"] == "FAILED"

    def test_repeated_get_is_idempotent(self, client):
        conversation_id = self.start(client)

        first = client.get(f"/a2a/conversation/{conversation_id}").json()
        second = client.get(f"/a2a/conversation/{conversation_id}").json()

        assert first == second

    def test_unknown_conversation(self, client):
        message = client.post("/a2a/conversation/missing/message", json={"message": "yes"})
        assert message.status_code == 400
        assert message.json()["state"] == "FAILED"
        assert message.json()["conversationId"] == "missing"

        assert client.get("/a2a/conversation/missing").status_code == 404

        events = sse_events(client.get("/a2a/conversation/missing/stream").text)
        assert [name for name, _ in events] == ["error"]


class TestChatEndpoints:
    """Test the chat HTTP, SSE and WebSocket surfaces."""

    def test_session_lifecycle(self, client):
        created = client.post("/chat/session")
        assert created.status_code == 201
        session_id = created.json()["sessionId"]

        reply = client.post("/chat/message", json={"sessionId": session_id, "message": "Hello"})
        assert reply.json()["type"] == "done"
        assert reply.json()["done"] is True

        session = client.get(f"/chat/session/{session_id}").json()
        assert session["sessionId"] == session_id
        messages = client.get(f"/chat/session/{session_id}/messages").json()
        assert [m["role"] for m in messages] == ["USER", "ASSISTANT"]

    def test_unknown_session(self, client):
        assert client.get("/chat/session/missing").status_code == 404

    def test_chat_stream_plans_a_trip(self, client):
        response = client.get("/chat/stream", params={
            "sessionId": "stream-1",
            "message": "start planning",
            "journeyForm": json.dumps(form_json()),
        })

        events = [json.loads(data) for _, data in sse_events(response.text)]
        assert events[0]["type"] == "user_message"
        assert [e["type"] for e in events][-2:] == ["plan_result", "done"]
        assert events[-2]["planResult"]["title"] == "Roman Holiday"

    def test_chat_stream_with_malformed_form(self, client):
        response = client.get("/chat/stream", params={"message": "start", "journeyForm": "[]"})

        events = [json.loads(data) for _, data in sse_events(response.text)]
        assert [e["type"] for e in events] == ["error", "done"]

    def test_websocket_plain_text_turn(self, client):
        with client.websocket_connect("/chat/ws/ws-1") as websocket:
            connected = websocket.receive_json()
            assert connected["type"] == "connected"
            assert connected["sessionId"] == "ws-1"

            websocket.send_text("Hello")
            types = []
            while not types or types[-1] != "done":
                types.append(websocket.receive_json()["type"])

        assert types == ["user_message", "assistant_message", "done"]

    def test_websocket_structured_turn(self, client):
        with client.websocket_connect("/chat/ws") as websocket:
            session_id = websocket.receive_json()["sessionId"]

            websocket.send_text(json.dumps({"message": "yes", "journeyForm": form_json()}))
            events = []
            while not events or events[-1]["type"] != "done":
                events.append(websocket.receive_json())

        assert events[-2]["type"] == "plan_result"
        assert all(e["sessionId"] == session_id for e in events)


class TestAgentApp:
    """Test the HTTP app serving a specialist agent."""

    def agent_client(self) -> TestClient:
        agent = RoutePlannerAgent(FakeGenerator(), tools=[])
        return TestClient(build_agent_app(agent, build_agent_card("http://testserver"), ROUTE_PLANNER_PATH))

    def test_agent_card_and_health(self):
        client = self.agent_client()

        card = client.get(f"{ROUTE_PLANNER_PATH}/agent-card.json").json()
        assert card["name"] == "Route Planner Agent"
        assert card["url"] == "http://testserver/a2a/route-planner"
        assert client.get("/health").json() == {"status": "ok", "agent": "route_planner"}

    def test_message_send_returns_completed_task(self):
        client = self.agent_client()
        message = text_message(make_form()).model_dump(mode="json", by_alias=True, exclude_none=True)

        response = client.post(ROUTE_PLANNER_PATH, json={
            "jsonrpc": "2.0",
            "id": "req-1",
            "method": "message/send",
            "params": {"message": message},
        })

        result = response.json()["result"]
        assert result["status"]["state"] == "completed"
        assert result["artifacts"][0]["artifactId"] == "itinerary-ideas"
