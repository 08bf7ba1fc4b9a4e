"""In-memory user store mirrored to a JSON file (fallback when MongoDB is unreachable)."""

import json
import logging
import os
import tempfile
import threading
import time
from pathlib import Path

from pydantic import ValidationError

from authgate.core.errors import ConflictError
from authgate.models.user import User
from authgate.stores.base import UserStore

logger = logging.getLogger(__name__)


class JsonFileUserStore(UserStore):
    """
    Users held in a list owned by this instance; every mutation rewrites the file.

    Durability is best-effort: a failed write is logged and the in-memory copy
    stays authoritative for the rest of the process. A missing or corrupt file
    at startup yields an empty store.
    """

    backend = "file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._users: list[User] = self._load()

    def _load(self) -> list[User]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError("expected a JSON array of users")
            users = [User.model_validate(item) for item in raw]
        except (OSError, ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.error("Error loading users file %s: %s", self.path, e)
            return []
        logger.info("Loaded %s users from %s", len(users), self.path)
        return users

    def _save(self) -> None:
        """Write to a temp file beside the target, then rename it into place."""
        records = [u.to_record() for u in self._users]
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_name = fh.name
                json.dump(records, fh, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            logger.error(
                "Error saving users file %s: %s", self.path, e,
                extra={"user_count": len(records)},
            )
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

    def _next_id(self) -> str:
        taken = {u.id for u in self._users}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def create(self, user: User) -> str:
        with self._lock:
            for existing in self._users:
                if existing.email == user.email or existing.username == user.username:
                    raise ConflictError("Username or email already exists")
            stored = user.model_copy(update={"id": self._next_id()})
            self._users.append(stored)
            self._save()
        return stored.id

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users if u.email == email), None)

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self._users if u.username == username), None)

    def find_by_id(self, user_id: str) -> User | None:
        return next((u for u in self._users if u.id == user_id), None)

    def __len__(self) -> int:
        return len(self._users)
