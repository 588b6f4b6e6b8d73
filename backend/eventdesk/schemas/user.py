"""Pydantic schemas for Users and authentication."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr


class RegisterRequest(BaseModel):
    username: str
    email: EmailStr
    password: str
    role: Optional[str] = None  # defaults to attendee
    admin_token: Optional[str] = None  # required when role == admin


class LoginRequest(BaseModel):
    # Accepts either the username or the email address.
    username: str
    password: str


class UserOut(BaseModel):
    user_id: str
    username: str
    email: str
    role: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


class CurrentUserResponse(BaseModel):
    user: UserOut
    capabilities: list[str]


class RoleUpdate(BaseModel):
    role: str
