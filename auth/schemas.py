"""
Pydantic schemas for the auth API wire format.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator


# ── Requests ───────────────────────────────────────────────────────────


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str
    password_confirmation: str


class BiometricRegisterRequest(BaseModel):
    device_id: str = Field(..., min_length=1)


class BiometricLoginRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    device_id: str = Field(..., min_length=1)


# ── Responses ──────────────────────────────────────────────────────────


class UserPayload(BaseModel):
    id: Union[int, str]

    @field_validator("id")
    @classmethod
    def _not_blank(cls, value: Union[int, str]) -> Union[int, str]:
        if isinstance(value, str) and not value.strip():
            raise ValueError("user id is blank")
        return value


class AuthResponse(BaseModel):
    """Body of a successful ``/auth/login`` or ``/auth/register``."""

    token: str = Field(..., min_length=1)
    user: UserPayload

    @property
    def user_id(self) -> str:
        return str(self.user.id)


class TokenResponse(BaseModel):
    """Body of a successful ``/auth/biometric-login``."""

    token: str = Field(..., min_length=1)


class ErrorResponse(BaseModel):
    message: Optional[str] = None
