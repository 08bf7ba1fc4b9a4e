"""User record shared by the MongoDB and JSON-file stores."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(BaseModel):
    """
    User account for local and Google authentication.

    Field aliases are the keys used on disk and in MongoDB documents
    (password, googleId, createdAt); Python code uses the snake_case names.
    id is None until a store assigns one.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    username: str
    email: str
    password_hash: str = Field(..., alias="password", min_length=1)
    avatar: str | None = None
    google_id: str | None = Field(default=None, alias="googleId")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")

    def to_record(self) -> dict[str, Any]:
        """Serialize with on-disk keys (JSON-safe; createdAt as ISO-8601)."""
        return self.model_dump(mode="json", by_alias=True)

    def to_document(self) -> dict[str, Any]:
        """Serialize for MongoDB: no id (the database assigns _id), native datetime."""
        return self.model_dump(by_alias=True, exclude={"id"})

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "User":
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)
