from __future__ import annotations

from uuid import uuid4

import pytest

from tests.helpers.catalog import FakeEntityStore
from trackgraph.domain.ingest_pipeline import (
    InfrastructureError,
    ResolutionCache,
    ResolutionError,
    ValidationError,
    resolve_group,
)
from trackgraph.domain.model import AssociationKind, Group


def test_creates_group_with_trimmed_name(fake_store: FakeEntityStore) -> None:
    result = resolve_group("  The Band ", store=fake_store, cache=ResolutionCache())

    assert result.created
    group = fake_store.tables.groups[result.id]
    assert group.name == "The Band"
    assert group.display_name == "The Band"
    assert fake_store.associations(AssociationKind.ARTIST_GROUP) == []


def test_creates_group_with_member(fake_store: FakeEntityStore) -> None:
    artist_id = uuid4()

    result = resolve_group(
        "The Band", store=fake_store, cache=ResolutionCache(), artist_id=artist_id
    )

    assert result.artist_linked
    assert fake_store.associations(AssociationKind.ARTIST_GROUP) == [(artist_id, result.id)]


def test_matches_existing_group_by_display_name(fake_store: FakeEntityStore) -> None:
    group = Group(name="the-band", display_name="The Band")
    fake_store.tables.groups[group.id] = group

    result = resolve_group("THE BAND", store=fake_store, cache=ResolutionCache())

    assert result.id == group.id
    assert result.display_name == "The Band"
    assert not result.created


def test_cached_group_links_new_members_only_once(fake_store: FakeEntityStore) -> None:
    cache = ResolutionCache()
    artist_id = uuid4()
    created = resolve_group("The Band", store=fake_store, cache=cache)

    linked = resolve_group("the band", store=fake_store, cache=cache, artist_id=artist_id)
    again = resolve_group("THE BAND", store=fake_store, cache=cache, artist_id=artist_id)

    assert linked.id == again.id == created.id
    assert linked.from_cache and linked.artist_linked
    assert not again.artist_linked
    assert fake_store.calls["find_group_by_name"] == 1
    assert fake_store.associations(AssociationKind.ARTIST_GROUP) == [(artist_id, created.id)]


def test_blank_name_is_rejected(fake_store: FakeEntityStore) -> None:
    with pytest.raises(ValidationError):
        resolve_group(" ", store=fake_store, cache=ResolutionCache())


def test_store_failure_is_wrapped(fake_store: FakeEntityStore) -> None:
    fake_store.fail("create_group", InfrastructureError("disk full"))

    with pytest.raises(ResolutionError, match="Failed to find or create group"):
        resolve_group("The Band", store=fake_store, cache=ResolutionCache())
