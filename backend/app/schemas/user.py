from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class SignUpRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class SignInRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AccountUpdate(BaseModel):
    """PATCH payload. A blank password leaves the current one in place."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class AdminUserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role_id: int = 1


class AdminUserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role_id: Optional[int] = None
