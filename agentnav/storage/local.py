"""Keyed-slot local storage.

A small string key/value store modeled on browser ``localStorage``: each key
holds one string that is read and written whole. Two implementations are
provided, a directory-backed one for real use and an in-memory one for tests
and embedding.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from agentnav.core.logging import get_logger
from agentnav.errors import PersistFailed

logger = get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStorage:
    """Interface for keyed-slot storage."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        """Replace the value stored under ``key``.

        Raises :class:`PersistFailed` if the write is rejected. A rejected
        write leaves the previous value in place.
        """
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class DirectoryStorage(LocalStorage):
    """Stores each key as ``<key>.json`` under a base directory.

    Writes go to a temporary file in the same directory which is then
    renamed over the slot, so readers see either the old or the new value.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self._base = Path(base_dir)
        self._base.mkdir(parents=True, exist_ok=True)

    @property
    def base_dir(self) -> Path:
        return self._base

    def _slot(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._base / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._slot(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._slot(key)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self._base)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("storage_write_failed", key=key, error=str(exc))
            raise PersistFailed(f"Could not write '{key}' to {self._base}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        path = self._slot(key)
        if path.exists():
            path.unlink()


class MemoryStorage(LocalStorage):
    """In-process storage with an optional total size quota in bytes."""

    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        self._slots: dict[str, str] = {}
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            others = sum(len(v.encode("utf-8")) for k, v in self._slots.items() if k != key)
            if others + len(value.encode("utf-8")) > self.quota_bytes:
                logger.error("storage_quota_exceeded", key=key, quota=self.quota_bytes)
                raise PersistFailed(f"Storage quota exceeded writing '{key}'")
        self._slots[key] = value

    def remove_item(self, key: str) -> None:
        self._slots.pop(key, None)
