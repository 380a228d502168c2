"""Which artist-side entities a descriptor resolves to."""

from __future__ import annotations

from dataclasses import dataclass

from .descriptors import clean


@dataclass(frozen=True, slots=True)
class ArtistGroupPlan:
    """Names to resolve for one descriptor.

    ``link_artist_to_group`` is set only when both an individual artist and a
    group are resolved, in which case the artist becomes a group member.
    """

    artist_name: str | None = None
    group_name: str | None = None

    @property
    def link_artist_to_group(self) -> bool:
        return self.artist_name is not None and self.group_name is not None


def same_name(left: str, right: str) -> bool:
    return left.strip().lower() == right.strip().lower()


def plan_artist_group(artist: str | None, album_artist: str | None) -> ArtistGroupPlan:
    """Decide from the artist / album-artist tags what to resolve.

    - album artist present: always a group; the track artist is resolved as an
      individual member only when it names someone else.
    - only a track artist: a single performer, no group.
    - neither: nothing.
    """

    artist_name = clean(artist)
    group_name = clean(album_artist)

    if group_name is not None:
        if artist_name is not None and not same_name(artist_name, group_name):
            return ArtistGroupPlan(artist_name=artist_name, group_name=group_name)
        return ArtistGroupPlan(group_name=group_name)
    if artist_name is not None:
        return ArtistGroupPlan(artist_name=artist_name)
    return ArtistGroupPlan()
