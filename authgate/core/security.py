"""Password hashing and JWT creation/verification for authentication."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from authgate.core.config import settings

# Bcrypt cost (rounds).
BCRYPT_ROUNDS = 10


class TokenError(Exception):
    """Raised when a bearer token cannot be accepted."""


class TokenExpiredError(TokenError):
    """Token signature is valid but exp is in the past."""


class TokenSignatureError(TokenError):
    """Token was not signed with our secret."""


class TokenMalformedError(TokenError):
    """Token is not a decodable JWT or lacks the id claim."""


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def generate_unusable_password_hash() -> str:
    """Hash of a random secret nobody knows; federated accounts cannot log in locally."""
    return hash_password(secrets.token_urlsafe(32))


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token carrying the user id and exp."""
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "id": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> str:
    """
    Decode and validate JWT; return the user id it was issued for.
    Raises TokenExpiredError, TokenSignatureError or TokenMalformedError.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("Token has expired") from e
    except jwt.InvalidSignatureError as e:
        raise TokenSignatureError("Token signature is invalid") from e
    except jwt.PyJWTError as e:
        raise TokenMalformedError(f"Token is malformed: {e}") from e

    user_id = payload.get("id")
    if not isinstance(user_id, str) or not user_id:
        raise TokenMalformedError("Token payload has no id")
    return user_id
