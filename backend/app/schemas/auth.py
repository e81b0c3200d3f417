from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from backend.app.models.user import RoleEnum


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1)
    role: RoleEnum = RoleEnum.CASHIER


class UserOut(BaseModel):
    id: int
    username: str
    role: RoleEnum

    class Config:
        from_attributes = True


class UserDetailOut(UserOut):
    created_at: datetime | None = None


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    user: UserOut
