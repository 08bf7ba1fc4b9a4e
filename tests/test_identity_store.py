"""IdentityStore picks MongoDB or the file fallback per operation."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from pymongo.errors import OperationFailure

from authgate.core.database import MongoConnection
from authgate.models.user import User
from authgate.stores.file import JsonFileUserStore
from authgate.stores.mongo import MongoUserStore
from authgate.stores.selector import IdentityStore


class TestIdentityStoreSelection(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.fallback = JsonFileUserStore(Path(tmp.name) / "users.json")
        self.connection = MagicMock(spec=MongoConnection)
        self.store = IdentityStore(self.connection, self.fallback)

    def test_disconnected_uses_file(self) -> None:
        self.connection.is_connected.return_value = False
        self.assertIs(self.store.select(), self.fallback)

    def test_connected_uses_mongo(self) -> None:
        self.connection.is_connected.return_value = True
        selected = self.store.select()
        self.assertIsInstance(selected, MongoUserStore)
        self.assertEqual(selected.backend, "mongo")
        self.connection.db.__getitem__.assert_called_with("users")

    def test_indexes_ensured_once(self) -> None:
        self.connection.is_connected.return_value = True
        mongo = self.store.select()
        self.store.select()
        self.assertEqual(mongo.collection.create_index.call_count, 2)

    def test_index_failure_still_uses_mongo(self) -> None:
        self.connection.is_connected.return_value = True
        self.store.mongo.collection.create_index.side_effect = OperationFailure("not authorized")
        with self.assertLogs("authgate.stores.selector", level="WARNING"):
            selected = self.store.select()
        self.assertEqual(selected.backend, "mongo")

    def test_probe_runs_per_operation(self) -> None:
        self.connection.is_connected.return_value = False
        self.store.select()
        self.store.select()
        self.assertEqual(self.connection.is_connected.call_count, 2)

    def test_switch_is_logged(self) -> None:
        self.connection.is_connected.return_value = True
        self.store.select()
        self.connection.is_connected.return_value = False
        with self.assertLogs("authgate.stores.selector", level="WARNING") as logs:
            self.store.select()
        self.assertIn("from mongo to file", logs.output[0])

    def test_backends_are_not_synchronised(self) -> None:
        self.connection.is_connected.return_value = False
        self.store.select().create(User(username="alice", email="a@x.com", password_hash="h"))
        self.connection.is_connected.return_value = True
        mongo = self.store.select()
        mongo.collection.find_one.return_value = None
        self.assertIsNone(mongo.find_by_email("a@x.com"))


if __name__ == "__main__":
    unittest.main()
