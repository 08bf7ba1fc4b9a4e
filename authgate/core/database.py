"""MongoDB connection management and connectivity probe."""

from typing import TYPE_CHECKING

import pymongo
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

if TYPE_CHECKING:
    from authgate.core.config import Settings


class MongoConnection:
    """
    Lazily-created MongoClient plus a cheap reachability check.

    The client is only built when MONGO_URI is configured; without it the
    connection always reports itself as disconnected.
    """

    def __init__(
        self,
        uri: str | None,
        db_name: str,
        timeout_sec: float = 5.0,
        probe_timeout_sec: float = 0.5,
    ) -> None:
        self._uri = uri
        self._db_name = db_name
        self._timeout_ms = int(timeout_sec * 1000)
        self._probe_timeout_sec = probe_timeout_sec
        self._client: MongoClient | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "MongoConnection":
        return cls(
            settings.MONGO_URI,
            settings.MONGO_DB_NAME,
            timeout_sec=settings.MONGO_TIMEOUT_SEC,
            probe_timeout_sec=settings.MONGO_PROBE_TIMEOUT_SEC,
        )

    @property
    def configured(self) -> bool:
        return self._uri is not None

    @property
    def client(self) -> MongoClient:
        if self._uri is None:
            raise RuntimeError("MONGO_URI is not configured")
        if self._client is None:
            # MongoClient connects in the background; construction never blocks.
            self._client = MongoClient(
                self._uri,
                serverSelectionTimeoutMS=self._timeout_ms,
                connectTimeoutMS=self._timeout_ms,
                timeoutMS=self._timeout_ms,
            )
        return self._client

    @property
    def db(self) -> Database:
        return self.client[self._db_name]

    def is_connected(self, timeout_sec: float | None = None) -> bool:
        """Run ping under the probe timeout (or timeout_sec) to verify the database is reachable."""
        if not self.configured:
            return False
        try:
            with pymongo.timeout(timeout_sec or self._probe_timeout_sec):
                self.client.admin.command("ping")
            return True
        except PyMongoError:
            return False

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
