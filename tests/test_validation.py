"""Tests for the structural predicates and the strict submission model."""

import pytest
from pydantic import ValidationError

from agentnav.catalog.validation import collection_issues, is_valid_collection, is_valid_record
from agentnav.models.input import RecordInput, input_issues

from conftest import sample_item


def _submission(**overrides) -> dict:
    data = {
        "name": "Echo",
        "website": "https://echo.ai",
        "description": "desc",
        "category": ["chatbots"],
        "isOpenSource": True,
    }
    data.update(overrides)
    return data


# --- Structural tier ---


def test_valid_record():
    assert is_valid_record(sample_item())


def test_record_missing_field():
    item = sample_item()
    del item["website"]
    assert not is_valid_record(item)


def test_record_wrong_types():
    assert not is_valid_record(sample_item(category="chatbots"))
    assert not is_valid_record(sample_item(category=["ok", 3]))
    assert not is_valid_record(sample_item(isOpenSource=1))
    assert not is_valid_record(sample_item(lastUpdated=None))
    assert not is_valid_record("not a dict")


def test_structural_check_ignores_business_rules():
    # Empty name, bad URL and no categories are still structurally valid
    item = sample_item(name="", website="not a url", category=[])
    assert is_valid_record(item)


def test_valid_collection():
    assert is_valid_collection({"items": [], "lastUpdated": "x"})
    assert is_valid_collection({"items": [1, "two"], "lastUpdated": ""})


def test_invalid_collection():
    assert not is_valid_collection({"items": "not-an-array", "lastUpdated": "x"})
    assert not is_valid_collection({"items": []})
    assert not is_valid_collection({"items": [], "lastUpdated": 5})
    assert not is_valid_collection([])
    assert not is_valid_collection(None)


def test_collection_issues():
    assert collection_issues({"items": [], "lastUpdated": "x"}) == []
    issues = collection_issues({"items": "not-an-array"})
    assert any("items" in i for i in issues)
    assert any("lastUpdated" in i for i in issues)
    assert collection_issues([1, 2]) == ["Expected a JSON object, got list"]


# --- Strict tier ---


def test_record_input_accepts_valid_submission():
    record_input = RecordInput.model_validate(_submission())
    assert record_input.name == "Echo"
    assert record_input.is_open_source is True
    assert record_input.to_fields() == _submission()


def test_record_input_trims_and_dedupes_categories():
    record_input = RecordInput.model_validate(
        _submission(name="  Echo ", category=[" chatbots", "chatbots", "", "search"])
    )
    assert record_input.name == "Echo"
    assert record_input.category == ["chatbots", "search"]


def test_record_input_requires_text_fields():
    issues = input_issues(_submission(name="   ", description=""))
    assert any(i.startswith("name") for i in issues)
    assert any(i.startswith("description") for i in issues)


def test_record_input_rejects_relative_url():
    issues = input_issues(_submission(website="echo.ai"))
    assert any("website" in i for i in issues)
    assert input_issues(_submission(website="https://echo.ai/path?q=1")) == []


def test_record_input_requires_a_category():
    issues = input_issues(_submission(category=[]))
    assert any("category" in i for i in issues)
    assert input_issues(_submission(category=["  "])) != []


def test_record_input_rejects_system_fields():
    with pytest.raises(ValidationError):
        RecordInput.model_validate(_submission(id="chosen-id"))
    with pytest.raises(ValidationError):
        RecordInput.model_validate(_submission(logo={"bgColor": "#000000", "text": "X"}))


def test_record_input_blank_social_links_are_absent():
    record_input = RecordInput.model_validate(_submission(github="  ", twitter="@echo"))
    fields = record_input.to_fields()
    assert "github" not in fields
    assert fields["twitter"] == "@echo"
    assert record_input.cleared_fields() == ["github"]


def test_missing_required_fields_reported():
    issues = input_issues({"category": ["x"]})
    assert len(issues) == 3
