"""Verify Google ID tokens against Google's published signing keys."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import jwt
from jwt import PyJWKClient
from jwt.exceptions import PyJWKClientError

from authgate.core.errors import AuthFailedError

if TYPE_CHECKING:
    from authgate.core.config import Settings

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ["accounts.google.com", "https://accounts.google.com"]

# Tolerated clock skew between us and Google, in seconds.
CLOCK_LEEWAY_SEC = 60


@dataclass(frozen=True)
class GoogleIdentity:
    """Claims we use from a verified Google ID token."""

    sub: str
    email: str
    name: str | None = None
    picture: str | None = None


class GoogleIdentityVerifier:
    """
    Checks RS256 signature, audience (our client id), issuer and expiry.

    Every failure surfaces as AuthFailedError, including an unset client id:
    without an audience to check against nothing is accepted.
    """

    def __init__(
        self,
        client_id: str | None,
        certs_url: str,
        timeout: float = 10.0,
        jwk_client: PyJWKClient | None = None,
    ) -> None:
        self.client_id = client_id
        self.jwk_client = jwk_client or PyJWKClient(certs_url, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "GoogleIdentityVerifier":
        return cls(
            settings.GOOGLE_CLIENT_ID,
            settings.GOOGLE_CERTS_URL,
            timeout=settings.GOOGLE_REQUEST_TIMEOUT_SEC,
        )

    def verify(self, id_token: str) -> GoogleIdentity:
        if not self.client_id:
            logger.error("Google sign-in attempted but GOOGLE_CLIENT_ID is not set")
            raise AuthFailedError("Google authentication failed")
        try:
            signing_key = self.jwk_client.get_signing_key_from_jwt(id_token).key
            payload = jwt.decode(
                id_token,
                signing_key,
                algorithms=["RS256"],
                audience=self.client_id,
                issuer=GOOGLE_ISSUERS,
                leeway=CLOCK_LEEWAY_SEC,
            )
        except PyJWKClientError as e:
            logger.warning("Google signing keys unavailable: %s", e)
            raise AuthFailedError("Google authentication failed") from e
        except jwt.PyJWTError as e:
            logger.info("Rejected Google ID token: %s", e)
            raise AuthFailedError("Google authentication failed") from e
        except Exception as e:
            logger.exception("Google ID token verification failed unexpectedly")
            raise AuthFailedError("Google authentication failed") from e

        sub = payload.get("sub")
        email = payload.get("email")
        if not isinstance(sub, str) or not sub or not isinstance(email, str) or not email:
            raise AuthFailedError("Google authentication failed")
        # Accounts are matched by email, so an unverified address must never sign in.
        if payload.get("email_verified") is not True:
            logger.info("Rejected Google ID token: email not verified")
            raise AuthFailedError("Google authentication failed")
        return GoogleIdentity(
            sub=sub,
            email=email,
            name=payload.get("name"),
            picture=payload.get("picture"),
        )
