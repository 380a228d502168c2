"""Association rows.

One row per distinct entity pair; the stores enforce that with composite keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, TypeAlias

from .enums import AssociationKind

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class ArtistRelease:
    KIND: ClassVar[AssociationKind] = AssociationKind.ARTIST_RELEASE

    artist_id: UUID
    release_id: UUID


@dataclass(eq=False, kw_only=True)
class TrackArtist:
    KIND: ClassVar[AssociationKind] = AssociationKind.TRACK_ARTIST

    track_id: UUID
    artist_id: UUID


@dataclass(eq=False, kw_only=True)
class ArtistGroup:
    KIND: ClassVar[AssociationKind] = AssociationKind.ARTIST_GROUP

    artist_id: UUID
    group_id: UUID


@dataclass(eq=False, kw_only=True)
class ReleaseTrack:
    """Placement of a track on a release."""

    KIND: ClassVar[AssociationKind] = AssociationKind.RELEASE_TRACK

    release_id: UUID
    track_id: UUID
    position: int = 0
    cover_art: str | None = None


Association: TypeAlias = ArtistRelease | TrackArtist | ArtistGroup | ReleaseTrack

ASSOCIATION_CLASSES: dict[AssociationKind, type[Association]] = {
    AssociationKind.ARTIST_RELEASE: ArtistRelease,
    AssociationKind.TRACK_ARTIST: TrackArtist,
    AssociationKind.ARTIST_GROUP: ArtistGroup,
    AssociationKind.RELEASE_TRACK: ReleaseTrack,
}


def build_association(kind: AssociationKind, left_id: UUID, right_id: UUID) -> Association:
    """Create the association row for ``kind`` from an ordered id pair."""

    match kind:
        case AssociationKind.ARTIST_RELEASE:
            return ArtistRelease(artist_id=left_id, release_id=right_id)
        case AssociationKind.TRACK_ARTIST:
            return TrackArtist(track_id=left_id, artist_id=right_id)
        case AssociationKind.ARTIST_GROUP:
            return ArtistGroup(artist_id=left_id, group_id=right_id)
        case AssociationKind.RELEASE_TRACK:
            return ReleaseTrack(release_id=left_id, track_id=right_id)
