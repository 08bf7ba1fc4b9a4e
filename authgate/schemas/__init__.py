"""Pydantic request/response schemas."""

from authgate.schemas.auth import (
    AuthResponse,
    GoogleAuthRequest,
    GoogleAuthResponse,
    GoogleUserSummary,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    UserSummary,
    ValidateResponse,
)
from authgate.schemas.health import HealthResponse

__all__ = [
    "AuthResponse",
    "GoogleAuthRequest",
    "GoogleAuthResponse",
    "GoogleUserSummary",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "SignupRequest",
    "UserSummary",
    "ValidateResponse",
]
