"""
Auth and user request/response schemas.
"""
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from taskboard.schemas.common import CamelModel, Envelope

Role = Literal["student", "teacher", "admin"]


def _password_length(v: str) -> str:
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes (bcrypt limit)")
    return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _password_length(v)


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=255)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _password_length(v)


class UserCreateRequest(RegisterRequest):
    """Admin-created account; role is explicit."""
    role: Role = "student"


class UserUpdateRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    role: Role | None = None
    password: str | None = Field(None, min_length=6)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str | None) -> str | None:
        return _password_length(v) if v is not None else v


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    role: str


class UserEnvelope(Envelope):
    user: UserResponse


class LoginResponse(UserEnvelope):
    token: str


class UserListResponse(Envelope):
    users: list[UserResponse]
