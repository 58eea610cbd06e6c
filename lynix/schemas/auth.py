from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal


class PlanInfo(BaseModel):
    name: str = ""
    cost: str = ""
    details: str = ""


class BillingInfo(BaseModel):
    status: Literal["On Time", "Overdue", "Suspended"] = "On Time"
    owes: Optional[float] = None


class LoginRequest(BaseModel):
    # Empty values are rejected by the service with a 400, not a 422
    username: str = ""
    password: str = ""


class UserResponse(BaseModel):
    id: str
    username: str
    role: Literal["admin", "standard", "trial", "guest"]
    plan: PlanInfo
    email: Optional[str] = None
    sip: Optional[str] = None
    billing: BillingInfo
    chat_enabled: bool = False
    ai_enabled: bool = False
    localmail_enabled: bool = False

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(UserResponse):
    access_token: str
    token_type: str = "bearer"


class UserData(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    role: Literal["admin", "standard", "trial", "guest"] = "standard"
    plan: PlanInfo = Field(default_factory=PlanInfo)
    email: Optional[str] = None
    sip: Optional[str] = None
    billing: BillingInfo = Field(default_factory=BillingInfo)
    chat_enabled: bool = False
    ai_enabled: bool = False
    localmail_enabled: bool = False


class UserCreateRequest(BaseModel):
    user_data: UserData
    password: str = Field(..., min_length=1)


class UserUpdateRequest(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[Literal["admin", "standard", "trial", "guest"]] = None
    plan: Optional[PlanInfo] = None
    email: Optional[str] = None
    sip: Optional[str] = None
    billing: Optional[BillingInfo] = None
    chat_enabled: Optional[bool] = None
    ai_enabled: Optional[bool] = None
    localmail_enabled: Optional[bool] = None


class PasswordChangeRequest(BaseModel):
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    message: str
