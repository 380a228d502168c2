"""Ports for persisting catalog entities and their associations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from uuid import UUID

    from trackgraph.domain.model import (
        Artist,
        AssociationKind,
        AudioUploadStatus,
        Group,
        Release,
        Track,
    )


@runtime_checkable
class EntityStore(Protocol):
    """Storage capability consumed by the resolvers and the batch orchestrator.

    The same contract is offered by the ambient store (every write is durable
    immediately) and by the transaction-scoped store handed out by a unit of
    work (writes become durable on commit). Callers never branch on which one
    they hold.

    Name lookups are case-insensitive exact matches on trimmed input. Writes
    raise ``InfrastructureError`` (or ``ConflictError`` for uniqueness
    violations) rather than driver-specific exceptions.
    """

    # artists
    def find_artist_by_name(
        self, display_name: str, *, first_name: str, surname: str
    ) -> Artist | None:
        """Return the first artist whose display name, or first name + surname, matches."""
        ...

    def artist_slug_exists(self, slug: str) -> bool: ...

    def create_artist(
        self,
        artist: Artist,
        *,
        release_id: UUID | None = None,
        track_id: UUID | None = None,
    ) -> Artist:
        """Persist ``artist`` plus optional Artist-Release / Track-Artist rows."""
        ...

    # groups
    def find_group_by_name(self, name: str) -> Group | None:
        """Return the first group whose name or display name matches."""
        ...

    def create_group(self, group: Group, *, artist_id: UUID | None = None) -> Group: ...

    # releases
    def find_release_by_title(self, title: str) -> Release | None: ...

    def create_release(self, release: Release) -> Release: ...

    # associations
    def find_association(self, kind: AssociationKind, left_id: UUID, right_id: UUID) -> bool: ...

    def create_association(self, kind: AssociationKind, left_id: UUID, right_id: UUID) -> None: ...

    # tracks
    def create_track(
        self,
        track: Track,
        *,
        release_id: UUID | None = None,
        artist_id: UUID | None = None,
    ) -> Track:
        """Persist ``track`` plus optional Release-Track / Track-Artist rows."""
        ...

    def get_track(self, track_id: UUID) -> Track | None: ...

    def find_tracks_by_content_hash(self, hashes: Collection[str]) -> Sequence[Track]: ...

    def update_track_audio(
        self,
        track_id: UUID,
        *,
        status: AudioUploadStatus,
        audio_location: str | None = None,
    ) -> None: ...
