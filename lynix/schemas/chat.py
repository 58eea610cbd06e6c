from pydantic import BaseModel, Field
from typing import List, Optional, Literal


class DirectoryEntry(BaseModel):
    id: str
    username: str


class DirectMessageCreateRequest(BaseModel):
    recipient_id: str = Field(..., min_length=1)
    text: str


class DirectMessageResponse(BaseModel):
    id: int
    sender_id: str
    recipient_id: str
    text: str
    is_read: bool
    timestamp: str


class AlertResponse(BaseModel):
    sender_id: str
    sender_username: str
    message_snippet: str


class ChatTurn(BaseModel):
    sender: Literal["user", "gemini"]
    text: str


class AIChatRequest(BaseModel):
    prompt: str = ""
    history: Optional[List[ChatTurn]] = None


class AIChatResponse(BaseModel):
    text: str
