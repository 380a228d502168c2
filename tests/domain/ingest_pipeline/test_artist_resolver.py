from __future__ import annotations

from uuid import uuid4

import pytest

from tests.helpers.catalog import FakeEntityStore
from trackgraph.domain.ingest_pipeline import (
    InfrastructureError,
    ResolutionCache,
    ResolutionError,
    ValidationError,
    resolve_artist,
)
from trackgraph.domain.model import Artist, AssociationKind


def _existing_artist(store: FakeEntityStore, **overrides: object) -> Artist:
    values: dict[str, object] = {
        "first_name": "John",
        "surname": "Doe",
        "display_name": "John Doe",
        "slug": "john-doe",
    }
    values.update(overrides)
    artist = Artist(**values)  # type: ignore[arg-type]
    store.tables.artists[artist.id] = artist
    return artist


def test_creates_artist_with_parsed_name_and_slug(fake_store: FakeEntityStore) -> None:
    cache = ResolutionCache()
    release_id = uuid4()

    result = resolve_artist(
        "  Jane Doe ", store=fake_store, cache=cache, release_id=release_id, created_by="admin-1"
    )

    assert result.created
    assert result.slug == "jane-doe"
    artist = fake_store.tables.artists[result.id]
    assert (artist.first_name, artist.surname, artist.display_name) == ("Jane", "Doe", "Jane Doe")
    assert artist.created_by == "admin-1"
    assert artist.is_active
    assert fake_store.associations(AssociationKind.ARTIST_RELEASE) == [(result.id, release_id)]
    assert cache.get(result.entity_type, "jane doe") is not None


def test_slug_collision_with_other_artist_gets_suffix(fake_store: FakeEntityStore) -> None:
    _existing_artist(fake_store, first_name="Johnny", surname="D.", display_name="Johnny D.")

    result = resolve_artist("John Doe", store=fake_store, cache=ResolutionCache())

    assert result.created
    assert result.slug == "john-doe-1"


def test_finds_existing_artist_case_insensitively(fake_store: FakeEntityStore) -> None:
    artist = _existing_artist(fake_store)

    result = resolve_artist("JOHN DOE", store=fake_store, cache=ResolutionCache())

    assert not result.created
    assert result.id == artist.id
    assert result.display_name == "John Doe"
    assert fake_store.calls["create_artist"] == 0


def test_finds_existing_artist_by_name_parts(fake_store: FakeEntityStore) -> None:
    artist = _existing_artist(fake_store, display_name="J. Doe")

    result = resolve_artist("john doe", store=fake_store, cache=ResolutionCache())

    assert result.id == artist.id


def test_cache_hit_skips_store_lookup(fake_store: FakeEntityStore) -> None:
    cache = ResolutionCache()
    first = resolve_artist("Jane Doe", store=fake_store, cache=cache)

    second = resolve_artist("jane doe", store=fake_store, cache=cache)

    assert second.id == first.id
    assert second.from_cache
    assert fake_store.calls["find_artist_by_name"] == 1
    assert fake_store.calls["create_artist"] == 1


def test_existing_artist_links_are_created_once(fake_store: FakeEntityStore) -> None:
    artist = _existing_artist(fake_store)
    release_id, track_id = uuid4(), uuid4()
    cache = ResolutionCache()

    first = resolve_artist(
        "John Doe", store=fake_store, cache=cache, release_id=release_id, track_id=track_id
    )
    second = resolve_artist(
        "John Doe", store=fake_store, cache=cache, release_id=release_id, track_id=track_id
    )

    assert first.release_linked and first.track_linked
    assert not second.release_linked and not second.track_linked
    assert fake_store.associations(AssociationKind.ARTIST_RELEASE) == [(artist.id, release_id)]
    assert fake_store.associations(AssociationKind.TRACK_ARTIST) == [(track_id, artist.id)]
    assert fake_store.calls["create_association"] == 2


@pytest.mark.parametrize("name", ["", "   "])
def test_blank_name_is_rejected_without_store_access(
    fake_store: FakeEntityStore, name: str
) -> None:
    with pytest.raises(ValidationError, match="Artist name is required"):
        resolve_artist(name, store=fake_store, cache=ResolutionCache())

    assert sum(fake_store.calls.values()) == 0


def test_store_failure_is_wrapped(fake_store: FakeEntityStore) -> None:
    original = InfrastructureError("connection reset")
    fake_store.fail("find_artist_by_name", original)

    with pytest.raises(ResolutionError, match="Failed to find or create artist") as exc:
        resolve_artist("Jane Doe", store=fake_store, cache=ResolutionCache())

    assert exc.value.__cause__ is original
