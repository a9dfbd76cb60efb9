"""Error taxonomy for catalog loading, mutation, and file exchange.

Every error carries a human-readable message suitable for showing to the
admin. Underlying causes are chained with ``raise ... from exc``.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for all catalog failures surfaced to the user."""


class DataUnavailable(CatalogError):
    """Neither the local overlay nor the bundled dataset yielded valid data."""


class NotFound(CatalogError):
    """A mutation targeted a record id that does not exist."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f'Item with id "{record_id}" not found')
        self.record_id = record_id


class DuplicateId(CatalogError):
    """A generated record id collided with an existing record."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f'Item with id "{record_id}" already exists')
        self.record_id = record_id


class PersistFailed(CatalogError):
    """The overlay write was rejected; the previous overlay is still in place."""


class MalformedFile(CatalogError):
    """An uploaded file could not be read or parsed as JSON."""


class InvalidSchema(CatalogError):
    """An uploaded file parsed but does not have the collection shape."""


class MalformedRecord(CatalogError):
    """A record with the requested id exists but lacks the required fields."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f'Item with id "{record_id}" is malformed')
        self.record_id = record_id
