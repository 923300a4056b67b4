"""Pydantic schemas for authentication requests, responses and tokens."""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


# ============================================================================
# User Schemas
# ============================================================================


class UserBase(BaseModel):
    """Shared user fields."""

    name: str = Field(..., min_length=1, max_length=64, description="Unique user name")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("name")
    @classmethod
    def validate_name_characters(cls, v: str) -> str:
        if not _NAME_PATTERN.match(v):
            raise ValueError(
                "Name may only contain letters, digits, underscores, dots and hyphens"
            )
        return v


def _check_password_length(v: str) -> str:
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return v


class UserCreate(UserBase):
    """Registration request body."""

    password: str = Field(..., min_length=1, description="Plaintext password")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return _check_password_length(v)


class UserLogin(BaseModel):
    """Login request body.

    Deliberately looser than UserCreate: a name that could never have been
    registered is an authentication failure, not a validation error.
    """

    name: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return _check_password_length(v)


class UserIdentity(BaseModel):
    """Public identity of a user: the claims a token carries."""

    id: str
    name: str


class UserResponse(UserIdentity):
    """User record as returned by the service (never includes the hash)."""

    created_at: datetime


# ============================================================================
# Token Schemas
# ============================================================================


class TokenPayload(BaseModel):
    """Decoded JWT claims."""

    sub: str = Field(..., description="User ID")
    name: str = Field(..., description="User name")
    iat: int = Field(..., description="Issued at (unix seconds)")
    exp: int = Field(..., description="Expires at (unix seconds)")

    def identity(self) -> UserIdentity:
        return UserIdentity(id=self.sub, name=self.name)


class LoginResponse(BaseModel):
    """Successful login: the user identity and a bearer token."""

    user: UserIdentity
    token: str
    token_type: str = "bearer"


class RegistrationResponse(BaseModel):
    """Successful registration confirmation."""

    message: str
