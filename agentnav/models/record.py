"""Catalog data models: records, their derived logo, and the collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

RECORD_KEYS = {
    "id",
    "name",
    "website",
    "description",
    "category",
    "isOpenSource",
    "lastUpdated",
    "logo",
    "github",
    "twitter",
    "discord",
}

SOCIAL_KEYS = ("github", "twitter", "discord")


@dataclass(frozen=True)
class Logo:
    """Default display asset derived from a record's name."""

    background_color: str
    initials: str

    def to_dict(self) -> dict:
        return {"bgColor": self.background_color, "text": self.initials}

    @classmethod
    def from_dict(cls, data: Any) -> Optional[Logo]:
        """Read any of the logo spellings found in catalog files."""
        if not isinstance(data, dict):
            return None
        color = data.get("bgColor") or data.get("backgroundColor") or data.get("color") or ""
        initials = data.get("text") or data.get("initials") or ""
        return cls(background_color=str(color), initials=str(initials))


@dataclass
class Record:
    """A single catalog entry (an agent listing)."""

    id: str
    name: str
    website: str
    description: str
    category: list[str] = field(default_factory=list)
    is_open_source: bool = False
    last_updated: str = ""  # ISO 8601
    logo: Optional[Logo] = None
    github: Optional[str] = None
    twitter: Optional[str] = None
    discord: Optional[str] = None

    # Keys we do not model, kept so a rewrite never drops them
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data: dict[str, Any] = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "name": self.name,
                "website": self.website,
                "description": self.description,
                "category": list(self.category),
                "isOpenSource": self.is_open_source,
                "lastUpdated": self.last_updated,
            }
        )
        if self.logo is not None:
            data["logo"] = self.logo.to_dict()
        for key in SOCIAL_KEYS:
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Record:
        """Build a record from a structurally valid item dict."""
        return cls(
            id=data["id"],
            name=data["name"],
            website=data["website"],
            description=data["description"],
            category=list(data.get("category", [])),
            is_open_source=data.get("isOpenSource", False),
            last_updated=data.get("lastUpdated", ""),
            logo=Logo.from_dict(data.get("logo")),
            github=data.get("github"),
            twitter=data.get("twitter"),
            discord=data.get("discord"),
            extra={k: v for k, v in data.items() if k not in RECORD_KEYS},
        )


@dataclass
class Collection:
    """The full navigation document: ordered items plus a timestamp.

    Items are kept as the JSON-shaped dicts they were loaded as. Only the
    collection-level shape is checked at load time, so an item is not
    guaranteed to convert to a :class:`Record`.
    """

    items: list[dict] = field(default_factory=list)
    last_updated: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data: dict[str, Any] = dict(self.extra)
        data["items"] = self.items
        data["lastUpdated"] = self.last_updated
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Collection:
        return cls(
            items=list(data["items"]),
            last_updated=data["lastUpdated"],
            extra={k: v for k, v in data.items() if k not in ("items", "lastUpdated")},
        )

    def find(self, record_id: str) -> Optional[dict]:
        for item in self.items:
            if isinstance(item, dict) and item.get("id") == record_id:
                return item
        return None

    def index_of(self, record_id: str) -> int:
        for i, item in enumerate(self.items):
            if isinstance(item, dict) and item.get("id") == record_id:
                return i
        return -1

    @property
    def ids(self) -> set[str]:
        return {
            item["id"]
            for item in self.items
            if isinstance(item, dict) and isinstance(item.get("id"), str)
        }
