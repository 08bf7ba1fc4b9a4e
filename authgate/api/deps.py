"""Shared dependencies: the identity store, Google verifier and auth service singletons."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from authgate.core.config import get_settings
from authgate.core.database import MongoConnection
from authgate.services.credentials import AuthService
from authgate.services.google_identity import GoogleIdentityVerifier
from authgate.stores.file import JsonFileUserStore
from authgate.stores.selector import IdentityStore


@lru_cache
def get_identity_store() -> IdentityStore:
    """Process-wide store: MongoDB when reachable, the users file otherwise."""
    settings = get_settings()
    return IdentityStore(
        MongoConnection.from_settings(settings),
        JsonFileUserStore(settings.USERS_FILE),
    )


@lru_cache
def get_google_verifier() -> GoogleIdentityVerifier:
    return GoogleIdentityVerifier.from_settings(get_settings())


def get_auth_service(
    identity_store: Annotated[IdentityStore, Depends(get_identity_store)],
    google: Annotated[GoogleIdentityVerifier, Depends(get_google_verifier)],
) -> AuthService:
    return AuthService(identity_store, google)
