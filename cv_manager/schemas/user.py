"""User/관리자 요청·응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    email: str
    name: str
    department: Optional[str] = None


class UserCreate(UserBase):
    pass


class UserOut(UserBase):
    user_id: int
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserWithCVStatus(UserOut):
    is_admin: bool
    has_cv: bool
    cv_id: Optional[int] = None
    cv_updated_at: Optional[datetime] = None


class LoginRequest(BaseModel):
    email: str


class CurrentUserOut(UserOut):
    is_admin: bool


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: CurrentUserOut


class AdminCreate(BaseModel):
    user_id: int


class AdminOut(BaseModel):
    user_id: int
    email: str
    name: str
    granted_by: Optional[int] = None
    created_at: Optional[datetime] = None
