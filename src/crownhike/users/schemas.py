"""Request/response schemas for account endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from crownhike.schemas import UtcDatetime


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "Username cannot be blank"
            raise ValueError(msg)
        return v


class RegisterResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    user_id: int = Field(..., serialization_alias="userId")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str


class LoginResponse(BaseModel):
    ok: bool = True
    user: UserSummary
    token: str


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    created_at: UtcDatetime
    allow_location_sharing: bool


class ProfileEnvelope(BaseModel):
    ok: bool = True
    data: ProfileResponse


class ProfileUpdateRequest(BaseModel):
    """Only non-blank usernames and explicit sharing flags are applied."""

    username: str | None = Field(None, max_length=64)
    allow_location_sharing: bool | None = None


class PasswordChangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_password: str = Field(..., min_length=1, alias="oldPassword")
    new_password: str = Field(..., min_length=1, alias="newPassword")
