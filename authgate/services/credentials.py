"""Signup, login, token validation and Google sign-in on top of the identity store."""

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager

from authgate.core.errors import (
    AuthServiceError,
    BadRequestError,
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
)
from authgate.core.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    generate_unusable_password_hash,
    hash_password,
    verify_password,
)
from authgate.models.user import User
from authgate.schemas.auth import (
    AuthResponse,
    GoogleAuthResponse,
    GoogleUserSummary,
    UserSummary,
    ValidateResponse,
)
from authgate.services.google_identity import GoogleIdentity, GoogleIdentityVerifier
from authgate.stores.base import UserStore
from authgate.stores.selector import IdentityStore

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

# Subject-id suffix lengths tried in turn for a Google user's username; 0 means the whole id.
USERNAME_SUFFIX_LENGTHS = (4, 8, 0)


@contextmanager
def _operation(name: str) -> Iterator[None]:
    """Let our own errors through; report anything else as an internal error."""
    try:
        yield
    except AuthServiceError:
        raise
    except Exception as e:
        logger.exception("%s failed", name, extra={"operation": name})
        raise InternalError("Server error occurred") from e


def username_candidates(identity: GoogleIdentity) -> list[str]:
    """
    Usernames to try for a first-time Google user, in order.

    Base is the display name lower-cased with whitespace removed (the email's
    local part when Google sends no name), suffixed with the tail of the
    Google subject id.
    """
    if identity.name and identity.name.strip():
        base = _WHITESPACE.sub("", identity.name).lower()
    else:
        base = identity.email.split("@", 1)[0].lower()
    candidates: list[str] = []
    for length in USERNAME_SUFFIX_LENGTHS:
        suffix = identity.sub[-length:] if length else identity.sub
        name = base + suffix
        if name not in candidates:
            candidates.append(name)
    return candidates


class AuthService:
    """Credential operations. Each one selects a storage backend once and sticks to it."""

    def __init__(self, identity_store: IdentityStore, google: GoogleIdentityVerifier) -> None:
        self.identity_store = identity_store
        self.google = google

    def signup(
        self, username: str | None, email: str | None, password: str | None
    ) -> AuthResponse:
        if not username or not email or not password:
            raise BadRequestError("All fields are required")
        with _operation("signup"):
            store = self.identity_store.select()
            if store.find_conflict(email, username) is not None:
                raise ConflictError("Username or email already exists")
            user = User(username=username, email=email, password_hash=hash_password(password))
            user_id = store.create(user)
        logger.info("User signed up", extra={"user_id": user_id, "storage_backend": store.backend})
        return AuthResponse(
            message="User created successfully",
            user=UserSummary(username=username, email=email),
            token=create_access_token(user_id),
        )

    def login(self, email: str | None, password: str | None) -> AuthResponse:
        if not email or not password:
            raise BadRequestError("Email and password are required")
        with _operation("login"):
            user = self.identity_store.select().find_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Wrong password")
        return AuthResponse(
            message="Login successful",
            user=UserSummary(username=user.username, email=user.email),
            token=create_access_token(user.id),
        )

    def validate(self, token: str | None) -> ValidateResponse:
        """Accept a bearer token only if it verifies and its user still exists."""
        if not token:
            raise UnauthorizedError("No token provided")
        try:
            user_id = decode_access_token(token)
        except TokenError as e:
            logger.info("Token rejected: %s", e)
            raise UnauthorizedError("Invalid token") from e
        with _operation("validate"):
            user = self.identity_store.select().find_by_id(user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return ValidateResponse()

    def google_sign_in(self, id_token: str | None) -> GoogleAuthResponse:
        if not id_token:
            raise BadRequestError("Google token is required")
        identity = self.google.verify(id_token)
        with _operation("google_sign_in"):
            store = self.identity_store.select()
            user = store.find_by_email(identity.email)
            if user is None:
                user = self._create_google_user(store, identity)
        return GoogleAuthResponse(
            message="Google authentication successful",
            user=GoogleUserSummary(
                username=user.username,
                email=user.email,
                avatar=user.avatar or identity.picture,
            ),
            token=create_access_token(user.id),
        )

    def _create_google_user(self, store: UserStore, identity: GoogleIdentity) -> User:
        username = next(
            (c for c in username_candidates(identity) if store.find_by_username(c) is None),
            None,
        )
        if username is None:
            raise ConflictError("Username or email already exists")
        user = User(
            username=username,
            email=identity.email,
            password_hash=generate_unusable_password_hash(),
            avatar=identity.picture,
            google_id=identity.sub,
        )
        user_id = store.create(user)
        logger.info(
            "Created user from Google sign-in",
            extra={"user_id": user_id, "storage_backend": store.backend},
        )
        return user.model_copy(update={"id": user_id})
