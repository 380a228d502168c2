"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator for canonical entities and the resolution cache."""

    ARTIST = "artist"
    GROUP = "group"
    RELEASE = "release"
    TRACK = "track"


class AssociationKind(StrEnum):
    """Join relations between canonical entities.

    Pair order is fixed per kind: ``(artist, release)``, ``(track, artist)``,
    ``(artist, group)`` and ``(release, track)``.
    """

    ARTIST_RELEASE = "artist_release"
    TRACK_ARTIST = "track_artist"
    ARTIST_GROUP = "artist_group"
    RELEASE_TRACK = "release_track"


class ReleaseFormat(StrEnum):
    DIGITAL = "digital"
    CD = "cd"
    VINYL = "vinyl"
    CASSETTE = "cassette"
    OTHER = "other"


class AudioUploadStatus(StrEnum):
    PENDING = "pending"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    FAILED = "failed"
