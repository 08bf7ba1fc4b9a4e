"""MongoDB-backed user store; ids are the database-assigned ObjectIds."""

from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from authgate.core.errors import ConflictError
from authgate.models.user import User
from authgate.stores.base import UserStore

USERS_COLLECTION = "users"


class MongoUserStore(UserStore):
    """User records in the users collection, unique on email and username."""

    backend = "mongo"

    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def ensure_indexes(self) -> None:
        """Create the unique indexes that enforce email/username uniqueness."""
        self.collection.create_index([("email", ASCENDING)], unique=True, name="email_unique")
        self.collection.create_index(
            [("username", ASCENDING)], unique=True, name="username_unique"
        )

    def _find_one(self, query: dict[str, Any]) -> User | None:
        doc = self.collection.find_one(query)
        return User.from_document(doc) if doc else None

    def create(self, user: User) -> str:
        try:
            result = self.collection.insert_one(user.to_document())
        except DuplicateKeyError as e:
            raise ConflictError("Username or email already exists") from e
        return str(result.inserted_id)

    def find_by_email(self, email: str) -> User | None:
        return self._find_one({"email": email})

    def find_by_username(self, username: str) -> User | None:
        return self._find_one({"username": username})

    def find_by_id(self, user_id: str) -> User | None:
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return self._find_one({"_id": oid})

    def find_conflict(self, email: str, username: str) -> User | None:
        return self._find_one({"$or": [{"email": email}, {"username": username}]})
