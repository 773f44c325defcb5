"""Authentication request/response schemas."""

from __future__ import annotations

import uuid

from pydantic import EmailStr, Field, field_validator

from orgboard.core.auth import BCRYPT_MAX_BYTES

from .common import CamelModel, RequestModel


class RegisterRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        if len(value.encode()) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserSummary(CamelModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class AuthResponse(CamelModel):
    user: UserSummary
    tokens: TokenPair
