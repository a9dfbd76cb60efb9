"""Shared fixtures: deterministic clocks, storage, and a bundled dataset."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from agentnav.catalog.loader import SourceReader
from agentnav.catalog.writer import CatalogWriter
from agentnav.storage.local import MemoryStorage
from agentnav.storage.overlay import OverlayStore

START = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class TickingClock:
    """Returns ``start``, then advances by ``step`` on every call."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


def sample_item(item_id: str = "seed-agent", name: str = "Seed Agent", **overrides) -> dict:
    item = {
        "id": item_id,
        "name": name,
        "website": "https://seed.example.com",
        "description": "A seeded agent",
        "category": ["chatbots"],
        "isOpenSource": False,
        "lastUpdated": "2024-01-01T00:00:00.000Z",
        "logo": {"bgColor": "#123456", "text": "SA"},
    }
    item.update(overrides)
    return item


def write_bundle(path: Path, items: list, last_updated: str = "2024-01-01T00:00:00.000Z") -> Path:
    path.write_text(json.dumps({"items": items, "lastUpdated": last_updated}))
    return path


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def overlay(storage):
    return OverlayStore(storage)


@pytest.fixture
def bundle_path(tmp_path):
    return write_bundle(tmp_path / "navigation.json", [sample_item()])


@pytest.fixture
def reader(overlay, bundle_path):
    return SourceReader(overlay, bundle_path)


@pytest.fixture
def writer(overlay, reader, clock):
    return CatalogWriter(overlay, reader, clock=clock)
