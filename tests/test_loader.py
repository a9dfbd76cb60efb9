"""Tests for resolving the authoritative collection."""

import json

import httpx
import pytest

from agentnav.catalog.loader import SourceReader, is_remote
from agentnav.errors import DataUnavailable
from agentnav.models.record import Collection
from agentnav.storage.local import DirectoryStorage, MemoryStorage
from agentnav.storage.overlay import OverlayStore

from conftest import sample_item, write_bundle


def _remote_reader(handler) -> SourceReader:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SourceReader(
        OverlayStore(MemoryStorage()),
        "https://example.com/data/navigation.json",
        http_client=client,
    )


def test_bundled_when_no_overlay(reader):
    collection = reader.resolve_collection()
    assert [item["id"] for item in collection.items] == ["seed-agent"]
    assert collection.last_updated == "2024-01-01T00:00:00.000Z"


def test_overlay_wins(reader, overlay):
    overlay.write_all(Collection(items=[sample_item("local-only")], last_updated="z"))
    collection = reader.resolve_collection()
    assert [item["id"] for item in collection.items] == ["local-only"]


def test_overlay_shadows_bundle_even_after_bundle_changes(reader, overlay, bundle_path):
    overlay.write_all(Collection(items=[], last_updated="2024-02-01T00:00:00.000Z"))

    write_bundle(bundle_path, [sample_item("a"), sample_item("b")])
    for _ in range(3):
        assert reader.resolve_collection().items == []


def test_invalid_overlay_falls_back_to_bundle(storage, reader):
    storage.set_item(OverlayStore.STORAGE_KEY, json.dumps({"items": "nope", "lastUpdated": "x"}))
    assert len(reader.resolve_collection().items) == 1


def test_missing_bundle(tmp_path):
    reader = SourceReader(OverlayStore(MemoryStorage()), tmp_path / "missing.json")
    with pytest.raises(DataUnavailable) as exc_info:
        reader.resolve_collection()
    assert isinstance(exc_info.value.__cause__, OSError)


def test_bundle_not_json(tmp_path):
    path = tmp_path / "navigation.json"
    path.write_text("<html>")
    reader = SourceReader(OverlayStore(MemoryStorage()), path)
    with pytest.raises(DataUnavailable):
        reader.resolve_collection()


def test_bundle_wrong_shape(tmp_path):
    path = tmp_path / "navigation.json"
    path.write_text(json.dumps({"agents": []}))
    reader = SourceReader(OverlayStore(MemoryStorage()), path)
    with pytest.raises(DataUnavailable):
        reader.resolve_collection()


def test_remote_bundle():
    payload = {"items": [sample_item()], "lastUpdated": "2024-01-01T00:00:00.000Z"}
    reader = _remote_reader(lambda request: httpx.Response(200, json=payload))
    assert reader.resolve_collection().items == payload["items"]


def test_remote_bundle_http_error():
    reader = _remote_reader(lambda request: httpx.Response(404))
    with pytest.raises(DataUnavailable) as exc_info:
        reader.resolve_collection()
    assert "404" in str(exc_info.value)


def test_remote_bundle_bad_payload():
    reader = _remote_reader(lambda request: httpx.Response(200, text="not json"))
    with pytest.raises(DataUnavailable):
        reader.resolve_collection()


def test_remote_bundle_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    reader = _remote_reader(handler)
    with pytest.raises(DataUnavailable):
        reader.resolve_collection()


def test_is_remote():
    assert is_remote("https://example.com/navigation.json")
    assert is_remote("http://localhost/navigation.json")
    assert not is_remote("/srv/data/navigation.json")


def test_undecodable_bundle_is_unavailable(tmp_path):
    bundle = tmp_path / "navigation.json"
    bundle.write_bytes(b"\xff\xfe\x00garbage")
    reader = SourceReader(OverlayStore(MemoryStorage()), bundle)

    with pytest.raises(DataUnavailable):
        reader.resolve_collection()


def test_undecodable_overlay_falls_back_to_bundle(tmp_path):
    slots = tmp_path / "slots"
    slots.mkdir()
    (slots / "navigation_data.json").write_bytes(b"\xff")
    bundle = write_bundle(tmp_path / "navigation.json", [sample_item()])
    reader = SourceReader(OverlayStore(DirectoryStorage(slots)), bundle)

    collection = reader.resolve_collection()

    assert collection.ids == {"seed-agent"}
