"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

# Request fields are optional so that a missing field is reported as our own
# 400 ("All fields are required") rather than a schema validation error.


class SignupRequest(BaseModel):
    """New local account."""

    username: str | None = Field(default=None, description="Unique username")
    email: str | None = Field(default=None, description="Unique email address")
    password: str | None = Field(default=None, description="Plain-text password")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str | None = Field(default=None, description="Account email")
    password: str | None = Field(default=None, description="Password")


class GoogleAuthRequest(BaseModel):
    """Google ID token obtained by the client from Google Identity Services."""

    token: str | None = Field(default=None, description="Google ID token (JWT)")


class UserSummary(BaseModel):
    """Public view of a user (never includes the password hash)."""

    username: str
    email: str


class GoogleUserSummary(UserSummary):
    avatar: str | None = None


class AuthResponse(BaseModel):
    """Returned by signup and login."""

    message: str
    user: UserSummary
    token: str = Field(..., description="JWT bearer token")


class GoogleAuthResponse(BaseModel):
    """Returned by Google sign-in."""

    message: str
    user: GoogleUserSummary
    token: str = Field(..., description="JWT bearer token")


class ValidateResponse(BaseModel):
    valid: bool = True
    message: str = "Token is valid"


class MessageResponse(BaseModel):
    """Error body for every failed auth operation."""

    message: str
