"""Canonical catalog entities created by bulk ingestion.

Entities carry only their own attributes. Relations between them are explicit
association rows (see ``associations``), never properties of either side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from trackgraph.domain.model.entity import Entity
from trackgraph.domain.model.enums import AudioUploadStatus, EntityType, ReleaseFormat

if TYPE_CHECKING:
    from datetime import date, datetime


@dataclass(eq=False, kw_only=True)
class Artist(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ARTIST

    first_name: str
    surname: str
    display_name: str | None = None
    slug: str
    is_active: bool = True
    created_by: str | None = None

    @property
    def name(self) -> str:
        """Display name, falling back to the structured name parts."""
        if self.display_name:
            return self.display_name
        return f"{self.first_name} {self.surname}".strip()


@dataclass(eq=False, kw_only=True)
class Group(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.GROUP

    name: str
    display_name: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.name


@dataclass(eq=False, kw_only=True)
class Release(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.RELEASE

    title: str
    release_date: date
    formats: list[ReleaseFormat] = field(
        default_factory=lambda: [ReleaseFormat.DIGITAL]
    )
    labels: list[str] = field(default_factory=list[str])
    catalog_number: str | None = None
    cover_art: str | None = None


@dataclass(eq=False, kw_only=True)
class Track(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TRACK

    title: str
    duration: float
    audio_location: str
    position: int = 0
    cover_art: str | None = None
    content_hash: str | None = None
    upload_status: AudioUploadStatus = AudioUploadStatus.COMPLETED
    published_on: datetime | None = None
