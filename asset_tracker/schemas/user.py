from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.roles import DEFAULT_ROLE, Principal


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {"email": "admin@example.com", "password": "password123"}
        }
    }


class LoginResponse(BaseModel):
    token: str
    user: Principal
    info: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "token": "<jwt>",
                "user": {"id": "1", "role": "Admin", "email": "admin@example.com"},
                "info": None,
            }
        }
    }


class UserCreate(BaseModel):
    email: str
    password: str
    role: str = DEFAULT_ROLE


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str
    created_at: str


class RoleInfo(BaseModel):
    role: str
    info: Optional[str] = None


class UserMessage(BaseModel):
    msg: str
