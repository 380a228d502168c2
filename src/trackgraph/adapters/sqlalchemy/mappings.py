"""SQLAlchemy mapping metadata for the trackgraph domain model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Any, Final, cast

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from trackgraph.domain.model import (
    Artist,
    ArtistGroup,
    ArtistRelease,
    AssociationKind,
    AudioUploadStatus,
    Group,
    Release,
    ReleaseFormat,
    ReleaseTrack,
    Track,
    TrackArtist,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class StringListType(TypeDecorator[list[str]]):
    """Ordered list of strings stored as a JSON array."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: list[str] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps([str(item) for item in value])

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[str]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        items = cast(list[Any], loaded)
        return [item for item in items if isinstance(item, str)]


class ReleaseFormatListType(TypeDecorator[list[ReleaseFormat]]):
    impl = String
    cache_ok = True

    def process_bind_param(
        self, value: list[ReleaseFormat] | None, dialect: Dialect
    ) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps([ReleaseFormat(item).value for item in value])

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[ReleaseFormat]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        items = cast(list[Any], loaded)
        return [ReleaseFormat(item) for item in items if isinstance(item, str)]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Entity tables ---------------------------------------------------------------

artist_table = Table(
    "artist",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("first_name", String, nullable=False),
    Column("surname", String, nullable=False),
    Column("display_name", String, nullable=True),
    Column("slug", String, nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_by", String, nullable=True),
    UniqueConstraint("slug", name="uq_artist_slug"),
)

group_table = Table(
    "music_group",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("display_name", String, nullable=True),
)

release_table = Table(
    "release",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("title", String, nullable=False),
    Column("release_date", Date, nullable=False),
    Column("formats", ReleaseFormatListType(), nullable=False),
    Column("labels", StringListType(), nullable=False),
    Column("catalog_number", String, nullable=True),
    Column("cover_art", String, nullable=True),
    Index("ix_release_title", "title"),
)

track_table = Table(
    "track",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("title", String, nullable=False),
    Column("duration", Float, nullable=False),
    Column("audio_location", String, nullable=False),
    Column("position", Integer, nullable=False, default=0),
    Column("cover_art", String, nullable=True),
    Column("content_hash", String, nullable=True),
    Column(
        "upload_status",
        Enum(AudioUploadStatus, native_enum=False),
        nullable=False,
        default=AudioUploadStatus.COMPLETED,
    ),
    Column("published_on", UTCDateTime(), nullable=True),
    UniqueConstraint("title", name="uq_track_title"),
    Index("ix_track_content_hash", "content_hash"),
)

# Association tables ----------------------------------------------------------
# Primary key column order matches the id pair order of each AssociationKind.

artist_release_table = Table(
    "artist_release",
    mapper_registry.metadata,
    Column(
        "artist_id", UUIDColumnType, ForeignKey("artist.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "release_id", UUIDColumnType, ForeignKey("release.id", ondelete="CASCADE"), primary_key=True
    ),
)

track_artist_table = Table(
    "track_artist",
    mapper_registry.metadata,
    Column(
        "track_id", UUIDColumnType, ForeignKey("track.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "artist_id", UUIDColumnType, ForeignKey("artist.id", ondelete="CASCADE"), primary_key=True
    ),
)

group_member_table = Table(
    "group_member",
    mapper_registry.metadata,
    Column(
        "artist_id", UUIDColumnType, ForeignKey("artist.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "group_id",
        UUIDColumnType,
        ForeignKey("music_group.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

release_track_table = Table(
    "release_track",
    mapper_registry.metadata,
    Column(
        "release_id", UUIDColumnType, ForeignKey("release.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "track_id", UUIDColumnType, ForeignKey("track.id", ondelete="CASCADE"), primary_key=True
    ),
    Column("position", Integer, nullable=False, default=0),
    Column("cover_art", String, nullable=True),
)

ASSOCIATION_TABLES: Final[dict[AssociationKind, Table]] = {
    AssociationKind.ARTIST_RELEASE: artist_release_table,
    AssociationKind.TRACK_ARTIST: track_artist_table,
    AssociationKind.ARTIST_GROUP: group_member_table,
    AssociationKind.RELEASE_TRACK: release_track_table,
}


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Artist, artist_table)
    mapper_registry.map_imperatively(Group, group_table)
    mapper_registry.map_imperatively(Release, release_table)
    mapper_registry.map_imperatively(Track, track_table)

    mapper_registry.map_imperatively(ArtistRelease, artist_release_table)
    mapper_registry.map_imperatively(TrackArtist, track_artist_table)
    mapper_registry.map_imperatively(ArtistGroup, group_member_table)
    mapper_registry.map_imperatively(ReleaseTrack, release_track_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
