from pydantic import BaseModel, Field
from typing import Optional


class CallResponse(BaseModel):
    """Response schema for call"""
    id: int
    caller_id: str
    callee_id: str
    caller_username: Optional[str] = None
    callee_username: Optional[str] = None
    status: str  # 'ringing' | 'active' | 'declined' | 'ended'
    created_at: str
    answered_at: Optional[str] = None
    ended_at: Optional[str] = None


class CallInitiateRequest(BaseModel):
    """Request schema for initiating a call"""
    callee_id: str = Field(..., min_length=1, description="User id of the person being called")


class CallStatusUpdateRequest(BaseModel):
    """Request schema for moving a call to a new status"""
    status: str = Field(..., description="One of ringing, active, declined, ended")
