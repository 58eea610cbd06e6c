"""
Chat Controller - Direct messaging and unread alerts
"""
from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import List
from lynix.schemas.chat import (
    DirectoryEntry,
    DirectMessageCreateRequest,
    DirectMessageResponse,
    AlertResponse,
)
from lynix.services.exceptions import NotFoundError
from lynix.services.chat_service import send_message, get_conversation, get_alerts
from lynix.services.user_service import list_chat_users
from lynix.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api/chat", tags=["Chat"])


@router.get("/users", response_model=List[DirectoryEntry])
async def get_chat_users(user_id: str = Depends(get_current_user_id)):
    """Users that have chat enabled"""
    return await list_chat_users()


@router.get("/messages", response_model=List[DirectMessageResponse])
async def get_messages(
    with_user: str = Query(..., min_length=1, description="The other party of the conversation"),
    user_id: str = Depends(get_current_user_id)
):
    """
    Conversation with another user, oldest first.
    Fetching marks their unread messages to you as read.
    """
    return await get_conversation(viewer_id=user_id, other_id=with_user)


@router.post("/messages", response_model=DirectMessageResponse, status_code=status.HTTP_201_CREATED)
async def post_message(
    request: DirectMessageCreateRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Send a direct message"""
    try:
        return await send_message(sender_id=user_id, recipient_id=request.recipient_id, text=request.text)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/alerts", response_model=List[AlertResponse])
async def get_my_alerts(user_id: str = Depends(get_current_user_id)):
    """Unread messages addressed to you, newest first"""
    return await get_alerts(user_id)
