"""Per-operation choice between the MongoDB store and the JSON-file fallback."""

import logging

from pymongo.errors import PyMongoError

from authgate.core.database import MongoConnection
from authgate.stores.base import UserStore
from authgate.stores.file import JsonFileUserStore
from authgate.stores.mongo import USERS_COLLECTION, MongoUserStore

logger = logging.getLogger(__name__)


class IdentityStore:
    """
    Select the backend for one operation by probing MongoDB connectivity.

    The backends are independent: users created while connected are not
    visible in the fallback file and vice versa. Callers must call select()
    once per operation and use the returned store throughout it.
    """

    def __init__(self, connection: MongoConnection, fallback: JsonFileUserStore) -> None:
        self.connection = connection
        self.fallback = fallback
        self._mongo: MongoUserStore | None = None
        self._indexes_ready = False
        self._last_backend: str | None = None

    @property
    def mongo(self) -> MongoUserStore:
        if self._mongo is None:
            self._mongo = MongoUserStore(self.connection.db[USERS_COLLECTION])
        return self._mongo

    def _prepare_mongo(self) -> None:
        # Unique indexes back the email/username conflict check under concurrency.
        try:
            self.mongo.ensure_indexes()
            self._indexes_ready = True
        except PyMongoError as e:
            logger.warning("Could not ensure MongoDB indexes: %s", e)

    def select(self) -> UserStore:
        if self.connection.is_connected():
            if not self._indexes_ready:
                self._prepare_mongo()
            store: UserStore = self.mongo
        else:
            store = self.fallback
        if store.backend != self._last_backend:
            if self._last_backend is not None:
                logger.warning(
                    "Storage backend switched from %s to %s",
                    self._last_backend,
                    store.backend,
                    extra={"storage_backend": store.backend},
                )
            self._last_backend = store.backend
        return store
