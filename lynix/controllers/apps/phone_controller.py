"""
Phone Controller - Call signaling endpoints
Clients poll /status every few seconds or listen for call.updated on the event stream
"""
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List, Optional
from lynix.schemas.call import CallResponse, CallInitiateRequest, CallStatusUpdateRequest
from lynix.schemas.chat import DirectoryEntry
from lynix.services.call_service import initiate_call, get_call_status, update_call_status
from lynix.services.exceptions import NotFoundError
from lynix.services.user_service import list_other_users
from lynix.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api/apps/phone", tags=["Phone"])


@router.get("/users", response_model=List[DirectoryEntry])
async def get_callable_users(user_id: str = Depends(get_current_user_id)):
    """Everyone the caller can dial"""
    return await list_other_users(user_id)


@router.get("/status", response_model=Optional[CallResponse])
async def get_my_call_status(user_id: str = Depends(get_current_user_id)):
    """Most recent ringing or active call involving the caller, or null"""
    return await get_call_status(user_id)


@router.post("/calls", response_model=CallResponse, status_code=status.HTTP_201_CREATED)
async def start_call(
    request: CallInitiateRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Ring another user"""
    try:
        return await initiate_call(caller_id=user_id, callee_id=request.callee_id)
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


@router.put("/calls/{call_id}", response_model=CallResponse)
async def change_call_status(
    call_id: int,
    request: CallStatusUpdateRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Answer, decline or hang up a call"""
    try:
        return await update_call_status(call_id=call_id, user_id=user_id, status=request.status)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        # Unknown status or illegal transition
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
