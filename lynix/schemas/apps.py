from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional


class NoteResponse(BaseModel):
    content: str


class NoteSaveRequest(BaseModel):
    content: str = ""


class ContactRequest(BaseModel):
    # Name is checked by the service so a missing name answers 400
    name: Optional[str] = None
    email: Optional[EmailStr] = Field(None, description="Contact email address")
    phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        # The contact form posts "" for an untouched email field
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ContactResponse(BaseModel):
    id: int
    user_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class LocalMailSendRequest(BaseModel):
    recipients: List[str] = Field(default_factory=list)
    subject: str = ""
    body: str = ""


class LocalMailResponse(BaseModel):
    id: int
    sender_id: str
    sender_username: str
    recipient_username: str
    subject: str
    body: str
    timestamp: str
    is_read: bool


class VoiceRoomResponse(BaseModel):
    id: str
    name: str


class VoiceParticipantResponse(BaseModel):
    user_id: str
    username: str


class VoiceMembershipRequest(BaseModel):
    action: str = Field(..., description="'join' or 'leave'")


class VoiceMessageCreateRequest(BaseModel):
    audio_data: str = Field(..., description="Base64 encoded audio clip")


class VoiceMessageResponse(BaseModel):
    id: int
    room_id: str
    sender_id: str
    sender_username: str
    audio_data: str
    created_at: str
