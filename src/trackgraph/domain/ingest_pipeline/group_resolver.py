"""Find-or-create for canonical groups."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from trackgraph.domain.model import AssociationKind, EntityType, Group

from .cache import CachedEntity
from .errors import InfrastructureError, ResolutionError, ValidationError

if TYPE_CHECKING:
    from uuid import UUID

    from trackgraph.domain.ports import EntityStore

    from .cache import ResolutionCache

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GroupResolution:
    id: UUID
    display_name: str
    created: bool
    from_cache: bool = False
    artist_linked: bool = False
    searched_name: str = ""

    entity_type: ClassVar[EntityType] = EntityType.GROUP


def resolve_group(
    name: str,
    *,
    store: EntityStore,
    cache: ResolutionCache,
    artist_id: UUID | None = None,
) -> GroupResolution:
    """Return the canonical group called ``name`` (matched on name or display name).

    With ``artist_id`` the artist is made a member unless it already is.
    """

    searched = name.strip() if name else ""
    if not searched:
        raise ValidationError("Group name is required")

    try:
        cached = cache.get(EntityType.GROUP, searched)
        if cached is not None:
            linked = _link_member(store, cached.id, artist_id)
            return GroupResolution(
                id=cached.id,
                display_name=cached.display_name,
                created=False,
                from_cache=True,
                artist_linked=linked,
                searched_name=searched,
            )

        existing = store.find_group_by_name(searched)
        if existing is not None:
            cache.put(
                EntityType.GROUP,
                searched,
                CachedEntity(id=existing.id, display_name=existing.label, was_created=False),
            )
            linked = _link_member(store, existing.id, artist_id)
            return GroupResolution(
                id=existing.id,
                display_name=existing.label,
                created=False,
                artist_linked=linked,
                searched_name=searched,
            )

        group = store.create_group(Group(name=searched, display_name=searched), artist_id=artist_id)
    except InfrastructureError as exc:
        log.warning("Group resolution failed for %r: %s", searched, exc)
        raise ResolutionError("Failed to find or create group") from exc

    cache.put(
        EntityType.GROUP,
        searched,
        CachedEntity(id=group.id, display_name=searched, was_created=True),
    )
    return GroupResolution(
        id=group.id,
        display_name=searched,
        created=True,
        artist_linked=artist_id is not None,
        searched_name=searched,
    )


def _link_member(store: EntityStore, group_id: UUID, artist_id: UUID | None) -> bool:
    if artist_id is None:
        return False
    if store.find_association(AssociationKind.ARTIST_GROUP, artist_id, group_id):
        return False
    store.create_association(AssociationKind.ARTIST_GROUP, artist_id, group_id)
    return True
