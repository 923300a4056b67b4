"""Authentication Pydantic schemas for API validation."""

from .auth import (
    MAX_PASSWORD_BYTES,
    LoginResponse,
    RegistrationResponse,
    TokenPayload,
    UserBase,
    UserCreate,
    UserIdentity,
    UserLogin,
    UserResponse,
)

__all__ = [
    "MAX_PASSWORD_BYTES",
    "UserBase",
    "UserCreate",
    "UserLogin",
    "UserIdentity",
    "UserResponse",
    "TokenPayload",
    "LoginResponse",
    "RegistrationResponse",
]
