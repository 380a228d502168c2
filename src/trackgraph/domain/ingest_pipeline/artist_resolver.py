"""Find-or-create for canonical artists."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from trackgraph.domain.model import Artist, AssociationKind, EntityType

from .cache import CachedEntity
from .errors import InfrastructureError, ResolutionError, ValidationError
from .names import parse_artist_name
from .slugs import generate_unique_slug

if TYPE_CHECKING:
    from uuid import UUID

    from trackgraph.domain.ports import EntityStore

    from .cache import ResolutionCache

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArtistResolution:
    id: UUID
    display_name: str
    created: bool
    from_cache: bool = False
    release_linked: bool = False
    track_linked: bool = False
    slug: str | None = None
    searched_name: str = ""

    entity_type: ClassVar[EntityType] = EntityType.ARTIST


def resolve_artist(
    name: str,
    *,
    store: EntityStore,
    cache: ResolutionCache,
    release_id: UUID | None = None,
    track_id: UUID | None = None,
    created_by: str | None = None,
) -> ArtistResolution:
    """Return the canonical artist called ``name``, creating it when unknown.

    Lookup order is the batch cache, then the store (display name, falling back
    to first name + surname). Requested Artist-Release and Track-Artist rows are
    created when missing, whichever way the artist was found.
    """

    searched = name.strip() if name else ""
    if not searched:
        raise ValidationError("Artist name is required")

    try:
        return _resolve(searched, store, cache, release_id, track_id, created_by)
    except InfrastructureError as exc:
        log.warning("Artist resolution failed for %r: %s", searched, exc)
        raise ResolutionError("Failed to find or create artist") from exc


def _resolve(
    name: str,
    store: EntityStore,
    cache: ResolutionCache,
    release_id: UUID | None,
    track_id: UUID | None,
    created_by: str | None,
) -> ArtistResolution:
    cached = cache.get(EntityType.ARTIST, name)
    if cached is not None:
        return _link_existing(
            store,
            cached.id,
            cached.display_name,
            name,
            release_id,
            track_id,
            from_cache=True,
        )

    parts = parse_artist_name(name)
    existing = store.find_artist_by_name(
        parts.display_name, first_name=parts.first_name, surname=parts.surname
    )
    if existing is not None:
        cache.put(
            EntityType.ARTIST,
            name,
            CachedEntity(id=existing.id, display_name=existing.name, was_created=False),
        )
        return _link_existing(
            store,
            existing.id,
            existing.name,
            name,
            release_id,
            track_id,
            from_cache=False,
        )

    slug = generate_unique_slug(name, store.artist_slug_exists)
    artist = store.create_artist(
        Artist(
            first_name=parts.first_name,
            surname=parts.surname,
            display_name=parts.display_name,
            slug=slug,
            is_active=True,
            created_by=created_by,
        ),
        release_id=release_id,
        track_id=track_id,
    )
    cache.put(
        EntityType.ARTIST,
        name,
        CachedEntity(id=artist.id, display_name=parts.display_name, was_created=True),
    )
    log.debug("Created artist %s (%s)", parts.display_name, slug)
    return ArtistResolution(
        id=artist.id,
        display_name=parts.display_name,
        created=True,
        release_linked=release_id is not None,
        track_linked=track_id is not None,
        slug=slug,
        searched_name=name,
    )


def _link_existing(
    store: EntityStore,
    artist_id: UUID,
    display_name: str,
    searched: str,
    release_id: UUID | None,
    track_id: UUID | None,
    *,
    from_cache: bool,
) -> ArtistResolution:
    release_linked = False
    track_linked = False
    if release_id is not None and not store.find_association(
        AssociationKind.ARTIST_RELEASE, artist_id, release_id
    ):
        store.create_association(AssociationKind.ARTIST_RELEASE, artist_id, release_id)
        release_linked = True
    if track_id is not None and not store.find_association(
        AssociationKind.TRACK_ARTIST, track_id, artist_id
    ):
        store.create_association(AssociationKind.TRACK_ARTIST, track_id, artist_id)
        track_linked = True
    return ArtistResolution(
        id=artist_id,
        display_name=display_name,
        created=False,
        from_cache=from_cache,
        release_linked=release_linked,
        track_linked=track_linked,
        searched_name=searched,
    )
