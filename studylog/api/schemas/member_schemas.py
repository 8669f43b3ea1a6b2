from pydantic import BaseModel, ConfigDict
from typing import Optional

from studylog.services.member_service import UserRole

class MemberResponse(BaseModel):
    member_id: str
    name: str
    is_active: bool

    model_config = ConfigDict(
        from_attributes=True
    )

class PasswordStatusResponse(BaseModel):
    member_id: str
    role: UserRole
    is_set: bool

class PasswordSetRequest(BaseModel):
    password: str

class LoginRequest(BaseModel):
    role: UserRole
    password: Optional[str] = None

class AuthContextResponse(BaseModel):
    member_id: str
    name: str
    role: UserRole
    authenticated: bool
    needs_password_setup: bool = False

    model_config = ConfigDict(
        from_attributes=True
    )
