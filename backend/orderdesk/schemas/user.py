# backend/orderdesk/schemas/user.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RoleName = Literal["admin", "user"]


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    role: RoleName = "user"
    is_active: bool = True
    email: str | None = None


class UserUpdate(BaseModel):
    password: str | None = Field(default=None, min_length=1)
    role: RoleName | None = None
    is_active: bool | None = None
    email: str | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str
    is_active: bool
    email: str | None = None
    created_at: datetime | None = None


class UserListResponse(BaseModel):
    items: list[UserResponse]
    total: int
