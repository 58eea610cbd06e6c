from fastapi import APIRouter, Depends
from lynix.schemas.apps import NoteResponse, NoteSaveRequest
from lynix.schemas.auth import MessageResponse
from lynix.services.note_service import get_note, save_note
from lynix.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api/apps/notepad", tags=["Notepad"])


@router.get("", response_model=NoteResponse)
async def get_my_note(user_id: str = Depends(get_current_user_id)):
    return NoteResponse(content=await get_note(user_id))


@router.put("", response_model=MessageResponse)
async def save_my_note(request: NoteSaveRequest, user_id: str = Depends(get_current_user_id)):
    await save_note(user_id, request.content)
    return MessageResponse(message="Note saved.")
