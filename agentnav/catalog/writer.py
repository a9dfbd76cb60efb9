"""Mutation engine: create, update, and delete catalog records.

Each operation re-resolves the current authoritative collection, applies its
change to a copy, and writes the complete result back to the overlay. Nothing
is cached between calls, so an import or an edit from another process is
observed by the next operation. Two overlapping writers still race: the later
write wins.
"""

from __future__ import annotations

from typing import Optional

from agentnav.catalog.identity import generate_default_logo, generate_id
from agentnav.catalog.loader import SourceReader
from agentnav.catalog.validation import is_valid_record
from agentnav.core.logging import get_logger
from agentnav.errors import (
    DataUnavailable,
    DuplicateId,
    MalformedRecord,
    NotFound,
    PersistFailed,
)
from agentnav.models.input import RecordInput
from agentnav.models.record import Collection, Record
from agentnav.storage.overlay import OverlayStore
from agentnav.utils.timestamps import Clock, format_timestamp, next_timestamp, utc_now

logger = get_logger(__name__)


class CatalogWriter:
    """Applies admin mutations to the navigation collection."""

    def __init__(
        self,
        overlay: OverlayStore,
        reader: SourceReader,
        clock: Optional[Clock] = None,
    ) -> None:
        self.overlay = overlay
        self.reader = reader
        self._clock = clock or utc_now

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self) -> Collection:
        """Current authoritative state, never failing for lack of a source."""
        try:
            return self.reader.resolve_collection()
        except DataUnavailable as exc:
            logger.warning("collection_fallback_empty", error=str(exc))
            return Collection(items=[], last_updated=format_timestamp(self._clock()))

    def _save(self, collection: Collection) -> None:
        # PersistFailed propagates unchanged; the overlay keeps its old value
        self.overlay.write_all(collection)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(self, data: RecordInput) -> list[dict]:
        """Add a new record and return the updated item list."""
        current = self._load()
        now = self._clock()

        record_id = generate_id(data.name, now)
        if record_id in current.ids:
            raise DuplicateId(record_id)

        item = dict(data.to_fields())
        item["id"] = record_id
        item["logo"] = generate_default_logo(data.name).to_dict()
        item["lastUpdated"] = format_timestamp(now)
        if not is_valid_record(item):
            raise ValueError(f"Refusing to persist malformed record {record_id!r}")

        updated = Collection(
            items=current.items + [item],
            last_updated=next_timestamp(lambda: now, after=current.last_updated),
            extra=dict(current.extra),
        )
        self._save(updated)

        logger.info("record_created", id=record_id, name=data.name)
        return updated.items

    def update(self, record_id: str, data: RecordInput) -> list[dict]:
        """Merge ``data`` over an existing record; ``id`` and ``logo`` are kept."""
        current = self._load()
        index = current.index_of(record_id)
        if index == -1:
            raise NotFound(record_id)

        existing = current.items[index]
        item = {**existing, **data.to_fields()}
        for name in data.cleared_fields():
            item.pop(name, None)
        item["id"] = existing["id"]
        if "logo" in existing:
            item["logo"] = existing["logo"]
        else:
            item.pop("logo", None)
        item["lastUpdated"] = next_timestamp(self._clock, after=existing.get("lastUpdated", ""))
        if not is_valid_record(item):
            raise ValueError(f"Refusing to persist malformed record {record_id!r}")

        items = list(current.items)
        items[index] = item
        updated = Collection(
            items=items,
            last_updated=next_timestamp(self._clock, after=current.last_updated),
            extra=dict(current.extra),
        )
        self._save(updated)

        logger.info("record_updated", id=record_id)
        return updated.items

    def delete(self, record_id: str) -> list[dict]:
        """Remove a record and return the remaining items."""
        current = self._load()
        items = [
            item
            for item in current.items
            if not (isinstance(item, dict) and item.get("id") == record_id)
        ]
        if len(items) == len(current.items):
            raise NotFound(record_id)

        updated = Collection(
            items=items,
            last_updated=next_timestamp(self._clock, after=current.last_updated),
            extra=dict(current.extra),
        )
        self._save(updated)

        logger.info("record_deleted", id=record_id)
        return updated.items

    def replace(self, collection: Collection) -> Collection:
        """Persist an imported collection wholesale, discarding the old overlay."""
        try:
            self._save(collection)
        except PersistFailed:
            logger.error("import_not_saved", items=len(collection.items))
            raise
        logger.info("collection_replaced", items=len(collection.items))
        return collection

    def get(self, record_id: str) -> Record:
        """Return the typed record for ``record_id`` from current state."""
        item = self._load().find(record_id)
        if item is None:
            raise NotFound(record_id)
        if not is_valid_record(item):
            raise MalformedRecord(record_id)
        return Record.from_dict(item)
