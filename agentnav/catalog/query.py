"""Catalog browsing: search, category filter, and ordering."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

from agentnav.catalog.validation import is_valid_record
from agentnav.models.record import Collection, Record
from agentnav.utils.timestamps import parse_timestamp

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class SearchQuery:
    """Filters for browsing the catalog."""

    text: str = ""
    category: Optional[str] = None
    include_id: bool = False  # also match the text against record ids


@dataclass
class SearchResult:
    """Records matching a query, newest first."""

    records: list[Record] = field(default_factory=list)
    total_count: int = 0
    skipped: int = 0  # items without a usable record shape
    query: SearchQuery = field(default_factory=SearchQuery)


def records_of(collection: Collection) -> tuple[list[Record], int]:
    """Typed records for every structurally valid item, plus a skip count."""
    records = [Record.from_dict(item) for item in collection.items if is_valid_record(item)]
    return records, len(collection.items) - len(records)


def newest_first(records: Iterable[Record]) -> list[Record]:
    return sorted(
        records,
        key=lambda r: parse_timestamp(r.last_updated) or _OLDEST,
        reverse=True,
    )


def unique_categories(records: Iterable[Record]) -> list[str]:
    categories: set[str] = set()
    for record in records:
        categories.update(record.category)
    return sorted(categories)


def matches(record: Record, query: SearchQuery) -> bool:
    if query.category and query.category not in record.category:
        return False
    if query.text:
        needle = query.text.lower()
        fields = [record.name, record.description]
        if query.include_id:
            fields.append(record.id)
        if not any(needle in value.lower() for value in fields):
            return False
    return True


def search(collection: Collection, query: Optional[SearchQuery] = None) -> SearchResult:
    """Filter the collection by category and free text."""
    query = query or SearchQuery()
    records, skipped = records_of(collection)
    results = [r for r in newest_first(records) if matches(r, query)]
    return SearchResult(records=results, total_count=len(results), skipped=skipped, query=query)
