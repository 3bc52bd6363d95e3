"""Item, site and snapshot records written to the daily JSON file."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from scripts.heuristics import iso


@dataclass
class RawItem:
    title: str
    url: str
    summary: str = ""
    published_at: datetime | None = None
    tags: list[str] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NormalizedItem:
    id: str
    title: str
    url: str
    summary: str
    tags: tuple[str, ...]
    published_at: datetime | None
    published_at_relative: str
    thumbnail: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "thumbnail": self.thumbnail,
            "summary": self.summary,
            "tags": list(self.tags),
            "publishedAt": iso(self.published_at),
            "publishedAtRelative": self.published_at_relative,
        }


@dataclass(frozen=True)
class SiteRecord:
    source: str
    source_name: str
    source_url: str
    updated_at: datetime
    updated_at_relative: str
    items: tuple[NormalizedItem, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "sourceName": self.source_name,
            "sourceUrl": self.source_url,
            "updatedAt": iso(self.updated_at),
            "updatedAtRelative": self.updated_at_relative,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class Snapshot:
    date: str
    sites: tuple[SiteRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "sites": [site.to_dict() for site in self.sites],
        }
