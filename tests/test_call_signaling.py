"""
Test Case Suite: Call Signaling (Phone app)
Test ID Range: TC-101 to TC-110

Validates call initiation, the status state machine and status polling.
"""

import pytest
from httpx import AsyncClient
from lynix.models.call import CallStatus, can_transition, TERMINAL_CALL_STATUSES


async def _ring(client: AsyncClient, headers: dict, callee_id: str) -> dict:
    response = await client.post("/api/apps/phone/calls", headers=headers, json={"callee_id": callee_id})
    assert response.status_code == 201
    return response.json()


class TestCallStateMachine:
    """
    Test Case TC-101: Transition Table
    Expected Result: only ringing->active, ringing->declined and active->ended are legal
    """
    def test_tc101_transition_table(self):
        """TC-101: Legal and illegal transitions"""
        assert can_transition(CallStatus.RINGING, CallStatus.ACTIVE)
        assert can_transition(CallStatus.RINGING, CallStatus.DECLINED)
        assert can_transition(CallStatus.ACTIVE, CallStatus.ENDED)

        assert not can_transition(CallStatus.RINGING, CallStatus.ENDED)
        assert not can_transition(CallStatus.ACTIVE, CallStatus.DECLINED)
        assert not can_transition(CallStatus.DECLINED, CallStatus.ACTIVE)
        assert not can_transition(CallStatus.ENDED, CallStatus.ACTIVE)
        assert TERMINAL_CALL_STATUSES == {CallStatus.DECLINED, CallStatus.ENDED}


class TestCallInitiation:
    """
    Test Case TC-102: Initiate a Call
    Expected Result: 201 with status ringing; both parties see it on /status
    """
    @pytest.mark.asyncio
    async def test_tc102_initiate_call_visible_to_both(self, client: AsyncClient, alice, bob, auth_headers):
        """TC-102: Ringing call visible to caller and callee"""
        call = await _ring(client, auth_headers("alice"), "bob")

        assert call["status"] == "ringing"
        assert call["caller_id"] == "alice"
        assert call["callee_id"] == "bob"
        assert call["caller_username"] == "Alice"
        assert call["answered_at"] is None
        assert call["ended_at"] is None

        for user_id in ("alice", "bob"):
            response = await client.get("/api/apps/phone/status", headers=auth_headers(user_id))
            assert response.status_code == 200
            assert response.json()["id"] == call["id"]

    """
    Test Case TC-103: Call Yourself
    Expected Result: 400
    """
    @pytest.mark.asyncio
    async def test_tc103_call_self(self, client: AsyncClient, alice, auth_headers):
        """TC-103: Calling yourself is rejected"""
        response = await client.post("/api/apps/phone/calls", headers=auth_headers("alice"), json={"callee_id": "alice"})
        assert response.status_code == 400

    """
    Test Case TC-104: Call Unknown User
    Expected Result: 404
    """
    @pytest.mark.asyncio
    async def test_tc104_call_unknown_user(self, client: AsyncClient, alice, auth_headers):
        """TC-104: Calling an unknown user"""
        response = await client.post("/api/apps/phone/calls", headers=auth_headers("alice"), json={"callee_id": "ghost"})
        assert response.status_code == 404

    """
    Test Case TC-105: Status with No Call
    Expected Result: 200 with null body
    """
    @pytest.mark.asyncio
    async def test_tc105_status_without_call(self, client: AsyncClient, alice, auth_headers):
        """TC-105: Status when idle"""
        response = await client.get("/api/apps/phone/status", headers=auth_headers("alice"))
        assert response.status_code == 200
        assert response.json() is None

    """
    Test Case TC-106: Phone Directory Excludes Caller
    Expected Result: every other user is listed
    """
    @pytest.mark.asyncio
    async def test_tc106_directory_excludes_self(self, client: AsyncClient, alice, bob, admin, auth_headers):
        """TC-106: Directory excludes the caller"""
        response = await client.get("/api/apps/phone/users", headers=auth_headers("alice"))
        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == ["bob", "root"]


class TestCallStatusUpdates:
    """
    Test Case TC-107: Answer then Hang Up
    Expected Result: answered_at set on active; ended_at set on ended; status clears
    """
    @pytest.mark.asyncio
    async def test_tc107_answer_then_end(self, client: AsyncClient, alice, bob, auth_headers):
        """TC-107: Answer then end a call"""
        call = await _ring(client, auth_headers("alice"), "bob")

        response = await client.put(f"/api/apps/phone/calls/{call['id']}", headers=auth_headers("bob"), json={"status": "active"})
        assert response.status_code == 200
        active = response.json()
        assert active["status"] == "active"
        assert active["answered_at"] is not None
        assert active["ended_at"] is None

        response = await client.put(f"/api/apps/phone/calls/{call['id']}", headers=auth_headers("alice"), json={"status": "ended"})
        assert response.status_code == 200
        ended = response.json()
        assert ended["status"] == "ended"
        assert ended["answered_at"] == active["answered_at"]
        assert ended["ended_at"] is not None

        response = await client.get("/api/apps/phone/status", headers=auth_headers("bob"))
        assert response.json() is None

    """
    Test Case TC-108: Decline a Ringing Call
    Expected Result: status declined and neither timestamp is set
    """
    @pytest.mark.asyncio
    async def test_tc108_decline(self, client: AsyncClient, alice, bob, auth_headers):
        """TC-108: Decline a call"""
        call = await _ring(client, auth_headers("alice"), "bob")

        response = await client.put(f"/api/apps/phone/calls/{call['id']}", headers=auth_headers("bob"), json={"status": "declined"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "declined"
        assert data["answered_at"] is None
        assert data["ended_at"] is None

    """
    Test Case TC-109: Illegal Transitions
    Expected Result: 400 for ringing->ended, declined->active and unknown statuses
    """
    @pytest.mark.asyncio
    async def test_tc109_illegal_transitions(self, client: AsyncClient, alice, bob, auth_headers):
        """TC-109: Illegal status changes"""
        call = await _ring(client, auth_headers("alice"), "bob")
        url = f"/api/apps/phone/calls/{call['id']}"

        response = await client.put(url, headers=auth_headers("bob"), json={"status": "ended"})
        assert response.status_code == 400

        response = await client.put(url, headers=auth_headers("bob"), json={"status": "on-hold"})
        assert response.status_code == 400

        await client.put(url, headers=auth_headers("bob"), json={"status": "declined"})
        response = await client.put(url, headers=auth_headers("bob"), json={"status": "active"})
        assert response.status_code == 400

    """
    Test Case TC-110: Outsider Updates a Call
    Expected Result: 404 for a user who is not a party; 404 for an unknown call id
    """
    @pytest.mark.asyncio
    async def test_tc110_non_participant(self, client: AsyncClient, alice, bob, admin, auth_headers):
        """TC-110: Non-participant cannot change a call"""
        call = await _ring(client, auth_headers("alice"), "bob")

        response = await client.put(f"/api/apps/phone/calls/{call['id']}", headers=auth_headers("root"), json={"status": "active"})
        assert response.status_code == 404

        response = await client.put("/api/apps/phone/calls/9999", headers=auth_headers("alice"), json={"status": "active"})
        assert response.status_code == 404
