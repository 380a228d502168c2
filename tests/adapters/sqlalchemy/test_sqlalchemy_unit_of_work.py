from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from tests.helpers.catalog import make_descriptor
from trackgraph.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from trackgraph.domain.ingest_pipeline import ConflictError, ingest_batch
from trackgraph.domain.ingest_pipeline.orchestrator import DUPLICATE_TITLE_MESSAGE
from trackgraph.domain.model import Artist, AssociationKind, Release, Track

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:")
    engine_b = create_engine("sqlite+pysqlite:///:memory:")

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_store_requires_entered_unit_of_work(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    uow = sqlite_unit_of_work()

    with pytest.raises(StartupError):
        _ = uow.store


def test_ambient_writes_are_committed_immediately(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        release = uow.store.create_release(Release(title="Album", release_date=date(2020, 1, 1)))

    with sqlite_unit_of_work() as uow:
        found = uow.store.find_release_by_title("album")
        assert found is not None
        assert found.id == release.id


def test_transaction_commits_on_clean_exit(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow, uow.transaction() as store:
        track = store.create_track(Track(title="Kept", duration=1.0, audio_location="s3://k"))

    with sqlite_unit_of_work() as uow:
        assert uow.store.get_track(track.id) is not None


def test_transaction_rolls_back_only_its_own_writes(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        release = uow.store.create_release(Release(title="Album", release_date=date(2020, 1, 1)))
        artist = Artist(first_name="Jane", surname="Doe", display_name="Jane Doe", slug="jane-doe")

        with pytest.raises(RuntimeError), uow.transaction() as store:
            store.create_artist(artist, release_id=release.id)
            raise RuntimeError("item failed")

        assert uow.store.find_release_by_title("Album") is not None
        assert not uow.store.artist_slug_exists("jane-doe")
        assert not uow.store.find_association(
            AssociationKind.ARTIST_RELEASE, artist.id, release.id
        )


def test_transactions_do_not_nest(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow, uow.transaction():
        with pytest.raises(RuntimeError, match="nest"), uow.transaction():
            pass


def test_batch_over_sqlite_isolates_duplicate_title(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    descriptors = [
        make_descriptor("Intro", album="Live", artist="Jane Doe", album_artist="The Band"),
        make_descriptor("Intro", album="live", artist="New Person", album_artist="The Band"),
        make_descriptor("Outro", album="LIVE", artist="new person", album_artist="the band"),
    ]

    with sqlite_unit_of_work() as uow:
        result = ingest_batch(descriptors, uow=uow)

    assert (result.success_count, result.failed_count) == (2, 1)
    assert result.results[1].error == DUPLICATE_TITLE_MESSAGE

    with sqlite_unit_of_work() as uow:
        store = uow.store
        release = store.find_release_by_title("live")
        assert release is not None
        new_person = store.find_artist_by_name("New Person", first_name="New", surname="Person")
        assert new_person is not None
        assert new_person.slug == "new-person"
        outro = result.results[2].track_id
        assert outro is not None
        assert store.find_association(AssociationKind.TRACK_ARTIST, outro, new_person.id)
        assert store.find_association(AssociationKind.RELEASE_TRACK, release.id, outro)


def test_conflicting_write_in_transaction_raises_conflict(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.store.create_track(Track(title="Taken", duration=1.0, audio_location="s3://t"))

        with pytest.raises(ConflictError), uow.transaction() as store:
            store.create_track(Track(title="Taken", duration=2.0, audio_location="s3://u"))

        assert uow.store.find_tracks_by_content_hash({"missing"}) == []
