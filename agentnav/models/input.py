"""Submission-time input model for creating and editing records.

This is the strict tier: it runs only when an admin submits a record, never
when loading the overlay or an imported file.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

_URL = TypeAdapter(AnyUrl)


class RecordInput(BaseModel):
    """Fields an admin may author. ``id``, ``logo`` and ``lastUpdated`` are
    system-managed and rejected here."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str
    website: str
    description: str
    category: list[str]
    is_open_source: bool = Field(default=False, alias="isOpenSource")
    github: Optional[str] = None
    twitter: Optional[str] = None
    discord: Optional[str] = None

    @field_validator("name", "description")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("is required")
        return value

    @field_validator("website")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("is required")
        try:
            _URL.validate_python(value)
        except ValidationError as exc:
            raise ValueError("Please enter a valid URL") from exc
        return value

    @field_validator("category")
    @classmethod
    def _categories(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for raw in value:
            name = raw.strip()
            if name and name not in seen:
                seen.append(name)
        if not seen:
            raise ValueError("At least one category is required")
        return seen

    @field_validator("github", "twitter", "discord")
    @classmethod
    def _blank_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    def to_fields(self) -> dict[str, Any]:
        """Serialized record fields, camelCase, omitting absent social links."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def cleared_fields(self) -> list[str]:
        """Optional fields the submission explicitly set to nothing."""
        return [
            name
            for name in ("github", "twitter", "discord")
            if name in self.model_fields_set and getattr(self, name) is None
        ]


def input_issues(data: dict) -> list[str]:
    """Return a list of problems with a submission. Empty list means valid."""
    try:
        RecordInput.model_validate(data)
    except ValidationError as exc:
        issues = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err["loc"]) or "input"
            issues.append(f"{loc}: {err['msg']}")
        return issues
    return []
