# tests/test_storage_backends.py

"""Tests for the key/value storage backends."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from src.storage.backends import (
    FileStorage,
    MemoryStorage,
    StorageError,
    StorageQuotaExceeded,
)


class TestMemoryStorage(unittest.TestCase):
    """MemoryStorage unit tests."""

    def test_missing_key_is_none(self) -> None:
        self.assertIsNone(MemoryStorage().get_item("nope"))

    def test_set_then_get(self) -> None:
        storage = MemoryStorage()
        storage.set_item("k", "value")
        self.assertEqual(storage.get_item("k"), "value")

    def test_remove_missing_key_is_noop(self) -> None:
        """Removing an absent key does not raise."""
        MemoryStorage().remove_item("nope")

    def test_quota_exceeded_raises(self) -> None:
        """A write past the quota raises and keeps the old value."""
        storage = MemoryStorage(quota_bytes=10)
        storage.set_item("k", "small")
        with self.assertRaises(StorageQuotaExceeded):
            storage.set_item("k", "x" * 11)
        self.assertEqual(storage.get_item("k"), "small")

    def test_quota_counts_replaced_value_once(self) -> None:
        """Overwriting a key does not double count its old size."""
        storage = MemoryStorage(quota_bytes=10)
        storage.set_item("k", "x" * 10)
        storage.set_item("k", "y" * 10)
        self.assertEqual(storage.get_item("k"), "y" * 10)


class TestFileStorage(unittest.TestCase):
    """FileStorage unit tests."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.directory = Path(self._tmp.name) / "data"
        self.storage = FileStorage(self.directory)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_key_is_none(self) -> None:
        """Nothing written yet reads as None (directory absent)."""
        self.assertIsNone(self.storage.get_item("cache"))

    def test_set_creates_directory_and_file(self) -> None:
        self.storage.set_item("cache", '{"a": 1}')
        self.assertTrue((self.directory / "cache.json").exists())
        self.assertEqual(self.storage.get_item("cache"), '{"a": 1}')

    def test_unsafe_key_characters_replaced(self) -> None:
        """Keys cannot escape the storage directory."""
        self.storage.set_item("../evil/key", "x")
        self.assertTrue((self.directory / ".._evil_key.json").exists())

    def test_no_temp_files_left_behind(self) -> None:
        self.storage.set_item("cache", "one")
        self.storage.set_item("cache", "two")
        leftovers = list(self.directory.glob("*.tmp"))
        self.assertEqual(leftovers, [])

    def test_remove_item(self) -> None:
        self.storage.set_item("cache", "x")
        self.storage.remove_item("cache")
        self.assertIsNone(self.storage.get_item("cache"))

    def test_undecodable_file_wrapped(self) -> None:
        """A blob that is not UTF-8 surfaces as StorageError."""
        self.directory.mkdir(parents=True)
        (self.directory / "cache.json").write_bytes(b"\xff\xfe")
        with self.assertRaises(StorageError):
            self.storage.get_item("cache")

    def test_os_error_wrapped(self) -> None:
        """Disk failures surface as StorageError."""
        with patch(
            "src.storage.backends.os.replace",
            side_effect=OSError("disk full"),
        ):
            with self.assertRaises(StorageError):
                self.storage.set_item("cache", "x")
        self.assertEqual(list(self.directory.glob("*.tmp")), [])


if __name__ == "__main__":
    unittest.main()
