"""
Voice Server Controller - Room membership and the polled audio message log
"""
from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import List, Optional
from lynix.schemas.apps import (
    VoiceRoomResponse,
    VoiceParticipantResponse,
    VoiceMembershipRequest,
    VoiceMessageCreateRequest,
    VoiceMessageResponse,
)
from lynix.schemas.auth import MessageResponse
from lynix.services.exceptions import NotFoundError
from lynix.services.voice_server_service import (
    list_rooms,
    list_participants,
    set_membership,
    post_voice_message,
    get_messages_since,
)
from lynix.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api/apps/voiceserver", tags=["Voice Server"])


def _raise_for(e: ValueError):
    if isinstance(e, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/rooms", response_model=List[VoiceRoomResponse])
async def get_rooms(user_id: str = Depends(get_current_user_id)):
    return await list_rooms()


@router.get("/rooms/{room_id}/participants", response_model=List[VoiceParticipantResponse])
async def get_participants(room_id: str, user_id: str = Depends(get_current_user_id)):
    try:
        return await list_participants(room_id)
    except ValueError as e:
        _raise_for(e)


@router.post("/rooms/{room_id}/membership", response_model=MessageResponse)
async def change_membership(
    room_id: str,
    request: VoiceMembershipRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Join or leave a room"""
    try:
        await set_membership(room_id, user_id, request.action)
    except ValueError as e:
        _raise_for(e)
    return MessageResponse(message="OK")


@router.get("/rooms/{room_id}/messages", response_model=List[VoiceMessageResponse])
async def get_room_messages(
    room_id: str,
    since: Optional[str] = Query(None, description="ISO-8601 created_at of the last clip already seen"),
    user_id: str = Depends(get_current_user_id)
):
    """Clips created after `since`, oldest first"""
    try:
        return await get_messages_since(room_id, since)
    except ValueError as e:
        _raise_for(e)


@router.post("/rooms/{room_id}/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_room_message(
    room_id: str,
    request: VoiceMessageCreateRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Post a base64 audio clip to a room"""
    try:
        await post_voice_message(room_id, user_id, request.audio_data)
    except ValueError as e:
        _raise_for(e)
    return MessageResponse(message="Sent.")
