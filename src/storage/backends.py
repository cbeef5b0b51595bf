# src/storage/backends.py

"""Key/value string storage behind the result cache.

The cache persists one JSON blob under one key, the same way a browser
``localStorage`` is used.  Two backends exist: an in-memory dict for
tests and short-lived sessions, and a directory of JSON files for the
CLI and TUI.
"""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger("trendbuy.storage")

_SAFE_KEY_RE = re.compile(r"[^A-Za-z0-9_.-]")


class StorageError(Exception):
    """The backing store could not be read or written."""


class StorageQuotaExceeded(StorageError):
    """A write would exceed the backend's size quota."""


class StorageBackend(Protocol):
    """Minimal string key/value contract the cache depends on."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage with an optional byte quota."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            others = sum(
                len(v.encode("utf-8"))
                for k, v in self._items.items()
                if k != key
            )
            needed = others + len(value.encode("utf-8"))
            if needed > self._quota_bytes:
                msg = (
                    f"Writing {key!r} needs {needed} bytes, "
                    f"quota is {self._quota_bytes}"
                )
                raise StorageQuotaExceeded(msg)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage:
    """One ``<key>.json`` file per key inside a directory.

    Writes land in a temporary file first and are moved into place with
    :func:`os.replace`, so readers never observe a half-written blob.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{_SAFE_KEY_RE.sub('_', key)}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read {path}: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.directory, suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write {path}: {exc}") from exc
        logger.debug("Wrote %d chars to %s", len(value), path)

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot remove {path}: {exc}") from exc
