"""Unit tests for MongoUserStore and MongoConnection with a mocked driver."""

import unittest
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from authgate.core.database import MongoConnection
from authgate.core.errors import ConflictError
from authgate.models.user import User
from authgate.stores.mongo import MongoUserStore


def _doc(oid: ObjectId, **overrides: object) -> dict:
    doc = {
        "_id": oid,
        "username": "alice",
        "email": "a@x.com",
        "password": "$2b$10$hash",
        "avatar": None,
        "googleId": None,
        "createdAt": datetime(2024, 1, 1, tzinfo=UTC),
    }
    doc.update(overrides)
    return doc


class TestMongoUserStore(unittest.TestCase):
    def setUp(self) -> None:
        self.collection = MagicMock()
        self.store = MongoUserStore(self.collection)

    def test_create_returns_database_id(self) -> None:
        oid = ObjectId()
        self.collection.insert_one.return_value.inserted_id = oid
        user_id = self.store.create(
            User(username="alice", email="a@x.com", password_hash="$2b$10$hash")
        )
        self.assertEqual(user_id, str(oid))
        doc = self.collection.insert_one.call_args.args[0]
        self.assertEqual(doc["password"], "$2b$10$hash")
        self.assertNotIn("id", doc)
        self.assertNotIn("_id", doc)
        self.assertIsInstance(doc["createdAt"], datetime)

    def test_duplicate_key_is_conflict(self) -> None:
        self.collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        with self.assertRaises(ConflictError):
            self.store.create(User(username="alice", email="a@x.com", password_hash="h"))

    def test_find_by_id(self) -> None:
        oid = ObjectId()
        self.collection.find_one.return_value = _doc(oid)
        user = self.store.find_by_id(str(oid))
        self.assertEqual(user.id, str(oid))
        self.assertEqual(user.password_hash, "$2b$10$hash")
        self.collection.find_one.assert_called_once_with({"_id": oid})

    def test_find_by_id_with_non_object_id(self) -> None:
        self.assertIsNone(self.store.find_by_id("1712345678901"))
        self.collection.find_one.assert_not_called()

    def test_find_by_email_not_found(self) -> None:
        self.collection.find_one.return_value = None
        self.assertIsNone(self.store.find_by_email("nobody@x.com"))
        self.collection.find_one.assert_called_once_with({"email": "nobody@x.com"})

    def test_find_conflict_uses_single_or_query(self) -> None:
        self.collection.find_one.return_value = _doc(ObjectId())
        self.assertIsNotNone(self.store.find_conflict("a@x.com", "bob"))
        self.collection.find_one.assert_called_once_with(
            {"$or": [{"email": "a@x.com"}, {"username": "bob"}]}
        )

    def test_ensure_indexes_unique(self) -> None:
        self.store.ensure_indexes()
        self.assertEqual(self.collection.create_index.call_count, 2)
        for call in self.collection.create_index.call_args_list:
            self.assertTrue(call.kwargs["unique"])


class TestMongoConnection(unittest.TestCase):
    def test_unconfigured_is_never_connected(self) -> None:
        conn = MongoConnection(None, "authgate")
        self.assertFalse(conn.configured)
        self.assertFalse(conn.is_connected())
        with self.assertRaises(RuntimeError):
            _ = conn.client

    @patch("authgate.core.database.MongoClient")
    def test_ping_failure_is_disconnected(self, mock_client_cls: MagicMock) -> None:
        mock_client_cls.return_value.admin.command.side_effect = ServerSelectionTimeoutError(
            "no servers"
        )
        conn = MongoConnection("mongodb://localhost:27017", "authgate")
        self.assertFalse(conn.is_connected())

    @patch("authgate.core.database.MongoClient")
    def test_ping_success_is_connected(self, mock_client_cls: MagicMock) -> None:
        conn = MongoConnection("mongodb://localhost:27017", "authgate", timeout_sec=2.0)
        self.assertTrue(conn.is_connected())
        mock_client_cls.return_value.admin.command.assert_called_once_with("ping")
        kwargs = mock_client_cls.call_args.kwargs
        self.assertEqual(kwargs["serverSelectionTimeoutMS"], 2000)

    @patch("authgate.core.database.MongoClient")
    def test_close_releases_client(self, mock_client_cls: MagicMock) -> None:
        conn = MongoConnection("mongodb://localhost:27017", "authgate")
        _ = conn.client
        conn.close()
        mock_client_cls.return_value.close.assert_called_once()
        conn.close()
        mock_client_cls.return_value.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
