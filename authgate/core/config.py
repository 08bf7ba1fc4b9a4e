"""Application configuration loaded from environment variables."""

import secrets
from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Signing secrets that have shipped as defaults somewhere and must never sign prod tokens.
KNOWN_INSECURE_SECRETS = frozenset(
    {"ganzakmk", "change-me-in-production", "secret", "changeme"}
)

# Allowed URL schemes for MONGO_URI (module-level so validators can use it).
VALID_MONGO_URI_PREFIXES = ("mongodb://", "mongodb+srv://")


class _EphemeralSecret(SecretStr):
    """Random per-process JWT secret generated in dev when none is configured."""


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"
    CORS_ORIGINS: list[str] = ["*"]

    # MongoDB: optional; without it (or while it is unreachable) users live in USERS_FILE
    MONGO_URI: str | None = None
    MONGO_DB_NAME: str = "authgate"
    MONGO_TIMEOUT_SEC: float = 5.0
    MONGO_PROBE_TIMEOUT_SEC: float = 0.5

    # Fallback store: JSON array of users, rewritten on every mutation
    USERS_FILE: str = "users.json"

    # JWT authentication. No default secret: prod refuses to start without one.
    JWT_SECRET: SecretStr | None = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # Google sign-in (optional; POST /auth/google fails closed while unset)
    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CERTS_URL: str = "https://www.googleapis.com/oauth2/v3/certs"
    GOOGLE_REQUEST_TIMEOUT_SEC: float = 10.0

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR")
        return level

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            raise ValueError("API_PREFIX must start with '/' (e.g. /api)")
        return v

    @field_validator("MONGO_URI")
    @classmethod
    def validate_mongo_uri(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if not any(v.strip().startswith(prefix) for prefix in VALID_MONGO_URI_PREFIXES):
            raise ValueError(
                "MONGO_URI must be a MongoDB URL (e.g. mongodb:// or mongodb+srv://)"
            )
        return v.strip()

    @field_validator("MONGO_TIMEOUT_SEC")
    @classmethod
    def validate_mongo_timeout(cls, v: float) -> float:
        if v <= 0 or v > 60:
            raise ValueError("MONGO_TIMEOUT_SEC must be greater than 0 and at most 60")
        return v

    @field_validator("MONGO_PROBE_TIMEOUT_SEC")
    @classmethod
    def validate_mongo_probe_timeout(cls, v: float) -> float:
        if v <= 0 or v > 10:
            raise ValueError(
                "MONGO_PROBE_TIMEOUT_SEC must be greater than 0 and at most 10"
            )
        return v

    @field_validator("USERS_FILE")
    @classmethod
    def validate_users_file(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("USERS_FILE must be set and non-empty")
        return v.strip()

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def validate_jwt_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "JWT_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v

    @field_validator("GOOGLE_CLIENT_ID")
    @classmethod
    def validate_google_client_id(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("GOOGLE_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_google_timeout(cls, v: float) -> float:
        if v <= 0 or v > 60:
            raise ValueError(
                "GOOGLE_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 60"
            )
        return v

    @model_validator(mode="after")
    def resolve_jwt_secret(self) -> "Settings":
        """
        Fail closed on a missing or well-known secret in prod.
        In dev, substitute a random secret that lives only as long as the process.
        """
        value = self.JWT_SECRET.get_secret_value().strip() if self.JWT_SECRET else ""
        if self.APP_ENV == "prod":
            if not value:
                raise ValueError("JWT_SECRET must be set and non-empty in production")
            if value.lower() in KNOWN_INSECURE_SECRETS:
                raise ValueError("JWT_SECRET is a well-known default; set a real secret")
            return self
        if not value:
            self.JWT_SECRET = _EphemeralSecret(secrets.token_urlsafe(32))
        return self

    @property
    def jwt_secret_ephemeral(self) -> bool:
        """True when dev runs with a generated secret; derived, never read from env."""
        return isinstance(self.JWT_SECRET, _EphemeralSecret)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
