"""Schemas for registration, login and the current user."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from patchpoint.schemas.common import APIModel


class RegisterRequest(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(APIModel):
    id: UUID
    name: str
    email: str
    created_at: Optional[datetime] = None


class UserEnvelope(APIModel):
    success: bool = True
    user: UserResponse


class AuthResponse(APIModel):
    success: bool = True
    user: UserResponse
    token: str
