"""Tests for catalog browsing."""

from agentnav.catalog.query import SearchQuery, newest_first, records_of, search, unique_categories
from agentnav.models.record import Collection

from conftest import sample_item


def _collection() -> Collection:
    return Collection(
        items=[
            sample_item(
                "old", "Old Chat", category=["chatbots"], lastUpdated="2023-01-01T00:00:00.000Z"
            ),
            sample_item(
                "new",
                "Code Pilot",
                description="Writes CODE for you",
                category=["coding", "chatbots"],
                lastUpdated="2024-05-01T00:00:00.000Z",
            ),
            sample_item("mid", "Researcher", category=["search"], lastUpdated="2023-06-01T00:00:00Z"),
            {"id": "broken", "name": 7},
        ],
        last_updated="2024-05-01T00:00:00.000Z",
    )


def test_search_all_newest_first():
    result = search(_collection())
    assert [r.id for r in result.records] == ["new", "mid", "old"]
    assert result.total_count == 3
    assert result.skipped == 1


def test_search_by_category():
    result = search(_collection(), SearchQuery(category="chatbots"))
    assert [r.id for r in result.records] == ["new", "old"]


def test_search_by_text_matches_name_or_description():
    assert [r.id for r in search(_collection(), SearchQuery(text="code")).records] == ["new"]
    assert [r.id for r in search(_collection(), SearchQuery(text="RESEARCH")).records] == ["mid"]
    assert search(_collection(), SearchQuery(text="nothing like this")).records == []


def test_search_text_and_category_combined():
    result = search(_collection(), SearchQuery(text="chat", category="search"))
    assert result.records == []


def test_unique_categories_sorted():
    records, skipped = records_of(_collection())
    assert skipped == 1
    assert unique_categories(records) == ["chatbots", "coding", "search"]


def test_unparseable_timestamps_sort_last():
    collection = Collection(
        items=[sample_item("x", lastUpdated="yesterday"), sample_item("y")],
        last_updated="x",
    )
    records, _ = records_of(collection)
    assert [r.id for r in newest_first(records)] == ["y", "x"]


def test_search_by_id_only_when_asked():
    assert search(_collection(), SearchQuery(text="mid")).records == []

    result = search(_collection(), SearchQuery(text="MID", include_id=True))
    assert [r.id for r in result.records] == ["mid"]
