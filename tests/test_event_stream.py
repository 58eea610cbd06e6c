"""
Test Case Suite: Realtime Event Stream
Test ID Range: TC-701 to TC-707
"""

import asyncio
import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient
from starlette.websockets import WebSocketDisconnect
from lynix.main import app
from lynix.services.events.hub import EventHub, event_hub, CALL_UPDATED, CHAT_MESSAGE
from lynix.utils.security import create_access_token


class TestEventHub:
    """
    Test Case TC-701: Publish Reaches Every Connection of a User
    Expected Result: each subscribed queue gets the event; other users get nothing
    """
    @pytest.mark.asyncio
    async def test_tc701_publish(self):
        """TC-701: Fan-out to a user's connections"""
        hub = EventHub(queue_size=10)
        tab_one = hub.subscribe("alice")
        tab_two = hub.subscribe("alice")
        other = hub.subscribe("bob")

        delivered = hub.publish("alice", CHAT_MESSAGE, {"text": "hi"})

        assert delivered == 2
        for queue in (tab_one, tab_two):
            event = queue.get_nowait()
            assert event["type"] == CHAT_MESSAGE
            assert event["payload"] == {"text": "hi"}
            assert "timestamp" in event
        assert other.empty()

    """
    Test Case TC-702: Full Queue Drops Instead of Blocking
    Expected Result: events past the bound are dropped
    """
    @pytest.mark.asyncio
    async def test_tc702_bounded_queue(self):
        """TC-702: Bounded subscriber queue"""
        hub = EventHub(queue_size=1)
        queue = hub.subscribe("alice")

        assert hub.publish("alice", CHAT_MESSAGE, {"n": 1}) == 1
        assert hub.publish("alice", CHAT_MESSAGE, {"n": 2}) == 0
        assert queue.qsize() == 1

    """
    Test Case TC-703: Unsubscribe and De-duplication
    Expected Result: publish_many delivers once per user; unsubscribed users get nothing
    """
    @pytest.mark.asyncio
    async def test_tc703_unsubscribe_and_dedupe(self):
        """TC-703: Unsubscribe and publish_many"""
        hub = EventHub(queue_size=10)
        queue = hub.subscribe("alice")

        assert hub.publish_many(["alice", "alice"], CALL_UPDATED, {}) == 1

        hub.unsubscribe("alice", queue)
        assert hub.subscriber_count() == 0
        assert hub.publish("alice", CALL_UPDATED, {}) == 0

    """
    Test Case TC-704: Call Changes Are Pushed to Both Parties
    Expected Result: caller and callee queues receive call.updated for the new call
    """
    @pytest.mark.asyncio
    async def test_tc704_call_push(self, client: AsyncClient, alice, bob, auth_headers):
        """TC-704: call.updated reaches both parties"""
        caller_queue = event_hub.subscribe("alice")
        callee_queue = event_hub.subscribe("bob")
        try:
            response = await client.post("/api/apps/phone/calls", headers=auth_headers("alice"), json={"callee_id": "bob"})
            call_id = response.json()["id"]

            for queue in (caller_queue, callee_queue):
                event = await asyncio.wait_for(queue.get(), timeout=1)
                assert event["type"] == CALL_UPDATED
                assert event["payload"]["id"] == call_id
                assert event["payload"]["status"] == "ringing"
        finally:
            event_hub.unsubscribe("alice", caller_queue)
            event_hub.unsubscribe("bob", callee_queue)


class TestEventWebSocket:
    """
    Test Case TC-705: Connect without Token
    Expected Result: closed with policy violation (1008)
    """
    def test_tc705_missing_token(self):
        """TC-705: WebSocket without token"""
        ws_client = TestClient(app)
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with ws_client.websocket_connect("/ws/events"):
                pass
        assert exc_info.value.code == 1008

    """
    Test Case TC-706: Connect with Invalid Token
    Expected Result: closed with policy violation (1008)
    """
    def test_tc706_invalid_token(self):
        """TC-706: WebSocket with a bad token"""
        ws_client = TestClient(app)
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with ws_client.websocket_connect("/ws/events?token=garbage"):
                pass
        assert exc_info.value.code == 1008

    """
    Test Case TC-707: Connect with Valid Token
    Expected Result: a connected greeting, then ping is answered with pong
    """
    def test_tc707_connected(self):
        """TC-707: WebSocket greeting and keepalive"""
        token = create_access_token(data={"sub": "alice", "type": "user"})
        ws_client = TestClient(app)

        with ws_client.websocket_connect(f"/ws/events?token={token}") as websocket:
            assert websocket.receive_json() == {"type": "connected", "user_id": "alice"}
            websocket.send_text("ping")
            assert websocket.receive_text() == "pong"
