"""Storage contract for user records."""

from abc import ABC, abstractmethod
from typing import ClassVar

from authgate.models.user import User


class UserStore(ABC):
    """Create and look up users. Implementations raise ConflictError on duplicate email/username."""

    backend: ClassVar[str]

    @abstractmethod
    def create(self, user: User) -> str:
        """Persist a new user and return its assigned id."""

    @abstractmethod
    def find_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def find_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def find_by_id(self, user_id: str) -> User | None: ...

    def find_conflict(self, email: str, username: str) -> User | None:
        """Return an existing user holding either the email or the username."""
        return self.find_by_email(email) or self.find_by_username(username)
