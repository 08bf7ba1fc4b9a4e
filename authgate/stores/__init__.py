"""User storage backends: MongoDB, JSON-file fallback, and the per-operation selector."""

from authgate.stores.base import UserStore
from authgate.stores.file import JsonFileUserStore
from authgate.stores.mongo import MongoUserStore
from authgate.stores.selector import IdentityStore

__all__ = ["IdentityStore", "JsonFileUserStore", "MongoUserStore", "UserStore"]
