"""The local overlay: the mutable copy of the navigation document.

Once an overlay exists it is the system of record and fully shadows the
bundled dataset.
"""

from __future__ import annotations

import json
from typing import Optional

from agentnav.catalog.validation import is_valid_collection
from agentnav.core.logging import get_logger
from agentnav.errors import PersistFailed
from agentnav.models.record import Collection
from agentnav.storage.local import LocalStorage

logger = get_logger(__name__)


class OverlayStore:
    """Reads and writes the whole navigation document in one storage slot."""

    STORAGE_KEY = "navigation_data"

    def __init__(self, storage: LocalStorage, key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key

    def read(self) -> Optional[Collection]:
        """Return the stored collection, or None if absent or not usable."""
        try:
            raw = self._storage.get_item(self._key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("overlay_unreadable", key=self._key, error=str(exc))
            return None
        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("overlay_not_json", key=self._key, error=str(exc))
            return None

        if not is_valid_collection(data):
            logger.warning("overlay_invalid_shape", key=self._key)
            return None
        return Collection.from_dict(data)

    def write_all(self, collection: Collection) -> None:
        """Replace the stored document with ``collection``.

        The collection is serialized before storage is touched, so a
        serialization error or a rejected write both leave the previous
        overlay as it was.
        """
        try:
            snapshot = json.dumps(collection.to_dict())
        except (TypeError, ValueError) as exc:
            raise PersistFailed(f"Navigation data is not serializable: {exc}") from exc

        self._storage.set_item(self._key, snapshot)
        logger.info("overlay_saved", key=self._key, items=len(collection.items))

    def clear(self) -> None:
        self._storage.remove_item(self._key)

    @property
    def exists(self) -> bool:
        return self.read() is not None
