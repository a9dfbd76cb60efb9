"""Structural checks for catalog data coming from outside the process.

These are type checks only. They gate the local overlay and uploaded files
and deliberately do not enforce business rules (a record with an empty name
or a malformed website still passes). Submission-time rules live in
:class:`agentnav.models.input.RecordInput`.
"""

from __future__ import annotations

from typing import Any

RECORD_STRING_FIELDS = ("id", "name", "website", "description", "lastUpdated")


def is_valid_record(candidate: Any) -> bool:
    """Return True if ``candidate`` has the shape of a stored record."""
    if not isinstance(candidate, dict):
        return False

    for field_name in RECORD_STRING_FIELDS:
        if not isinstance(candidate.get(field_name), str):
            return False

    category = candidate.get("category")
    if not isinstance(category, list) or not all(isinstance(c, str) for c in category):
        return False

    # bool is checked exactly; JSON 0/1 are not booleans
    return isinstance(candidate.get("isOpenSource"), bool)


def is_valid_collection(candidate: Any) -> bool:
    """Return True if ``candidate`` has the shape of a navigation document."""
    return (
        isinstance(candidate, dict)
        and isinstance(candidate.get("items"), list)
        and isinstance(candidate.get("lastUpdated"), str)
    )


def collection_issues(candidate: Any) -> list[str]:
    """Explain why ``candidate`` fails :func:`is_valid_collection`."""
    if not isinstance(candidate, dict):
        return [f"Expected a JSON object, got {type(candidate).__name__}"]

    issues: list[str] = []
    if "items" not in candidate:
        issues.append("Missing required field: items")
    elif not isinstance(candidate["items"], list):
        issues.append("Field 'items' must be an array")

    if "lastUpdated" not in candidate:
        issues.append("Missing required field: lastUpdated")
    elif not isinstance(candidate["lastUpdated"], str):
        issues.append("Field 'lastUpdated' must be a string")
    return issues
