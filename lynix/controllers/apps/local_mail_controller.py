from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import List, Literal
from lynix.schemas.apps import LocalMailSendRequest, LocalMailResponse
from lynix.schemas.auth import MessageResponse
from lynix.services.local_mail_service import get_mailbox, send_mail, mark_mail_read
from lynix.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api/apps/localmail", tags=["Local Mail"])


@router.get("", response_model=List[LocalMailResponse])
async def get_my_mail(
    view: Literal["inbox", "sent"] = Query("inbox"),
    user_id: str = Depends(get_current_user_id)
):
    """Inbox or sent mail, newest first"""
    return await get_mailbox(user_id, view)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_local_mail(
    request: LocalMailSendRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Send a mail to one or more usernames (addresses are reduced to their local part)"""
    try:
        await send_mail(user_id, request.recipients, request.subject, request.body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return MessageResponse(message="Message sent.")


@router.patch("/{mail_id}/read", response_model=MessageResponse)
async def mark_read(mail_id: int, user_id: str = Depends(get_current_user_id)):
    if not await mark_mail_read(mail_id, user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Mail not found"
        )
    return MessageResponse(message="Marked as read.")
