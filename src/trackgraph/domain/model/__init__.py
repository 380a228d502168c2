"""Public domain model surface."""

from __future__ import annotations

from trackgraph.domain.model.associations import (
    ASSOCIATION_CLASSES,
    ArtistGroup,
    ArtistRelease,
    Association,
    ReleaseTrack,
    TrackArtist,
    build_association,
)
from trackgraph.domain.model.entity import Entity
from trackgraph.domain.model.enums import (
    AssociationKind,
    AudioUploadStatus,
    EntityType,
    ReleaseFormat,
)
from trackgraph.domain.model.music import Artist, Group, Release, Track

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    # associations
    "ASSOCIATION_CLASSES",
    "ArtistRelease",
    "TrackArtist",
    "ArtistGroup",
    "ReleaseTrack",
    "Association",
    "build_association",
    # music
    "Artist",
    "Group",
    "Release",
    "Track",
    # enums
    "AssociationKind",
    "AudioUploadStatus",
    "EntityType",
    "ReleaseFormat",
]
