"""
Events Controller - WebSocket push stream

Query Parameters:
    token: access token from /api/users/login (required)

Server messages (JSON):
    {"type": "connected", "user_id": ...} once after accept, then
    {"type": "call.updated" | "chat.message" | "voice.message", "payload": {...}, "timestamp": ...}

Client messages are read only to detect disconnects; "ping" is answered with "pong".
"""
import asyncio
import logging
from typing import Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query, status
from lynix.services.events.hub import event_hub
from lynix.utils.security import get_token_subject

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Events"])


async def _forward_events(websocket: WebSocket, queue: asyncio.Queue):
    while True:
        event = await queue.get()
        await websocket.send_json(event)


async def _read_client(websocket: WebSocket):
    while True:
        message = await websocket.receive_text()
        if message == "ping":
            await websocket.send_text("pong")


@router.websocket("/ws/events")
async def event_stream(websocket: WebSocket, token: Optional[str] = Query(None)):
    user_id = get_token_subject(token)
    if not user_id:
        logger.warning("[WebSocket] Rejected event stream: missing or invalid token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    queue = event_hub.subscribe(user_id)

    try:
        await websocket.send_json({"type": "connected", "user_id": user_id})

        tasks = {
            asyncio.create_task(_forward_events(websocket, queue)),
            asyncio.create_task(_read_client(websocket)),
        }
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        for task in done:
            error = task.exception()
            if error and not isinstance(error, WebSocketDisconnect):
                logger.error(f"[WebSocket] Event stream for {user_id} failed: {error}")
    except WebSocketDisconnect:
        pass
    finally:
        event_hub.unsubscribe(user_id, queue)
