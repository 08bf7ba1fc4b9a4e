"""Signup, login, token validation and Google sign-in routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from authgate.api.deps import get_auth_service
from authgate.schemas.auth import (
    AuthResponse,
    GoogleAuthRequest,
    GoogleAuthResponse,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    ValidateResponse,
)
from authgate.services.credentials import AuthService

router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageResponse}},
)
def signup(
    body: SignupRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Create a local account and return a bearer token for it."""
    return service.signup(body.username, body.email, body.password)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: {"model": MessageResponse}, 404: {"model": MessageResponse}},
)
def login(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    return service.login(body.email, body.password)


@router.get(
    "/validate",
    response_model=ValidateResponse,
    responses={401: {"model": MessageResponse}},
)
def validate(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> ValidateResponse:
    """Check a Bearer token; 401 if missing, invalid, expired or its user is gone."""
    return service.validate(credentials.credentials if credentials else None)


@router.post(
    "/google",
    response_model=GoogleAuthResponse,
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
)
def google_sign_in(
    body: GoogleAuthRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> GoogleAuthResponse:
    """Sign in with a Google ID token; the first sign-in creates the local account."""
    return service.google_sign_in(body.token)
