from __future__ import annotations

from datetime import date

import pytest

from tests.helpers.catalog import FakeEntityStore
from trackgraph.domain.ingest_pipeline import (
    InfrastructureError,
    ReleaseMetadata,
    ResolutionError,
    ValidationError,
    resolve_release,
)
from trackgraph.domain.ingest_pipeline.release_resolver import (
    determine_formats,
    parse_release_date,
)
from trackgraph.domain.model import Release, ReleaseFormat

FIXED_TODAY = date(2024, 6, 1)


def _today() -> date:
    return FIXED_TODAY


def test_creates_release_from_album_metadata(fake_store: FakeEntityStore) -> None:
    metadata = ReleaseMetadata(
        album=" Night Drive ",
        year=1999,
        label=" Warp ",
        catalog_number="WARP-01",
        cover_art="https://cdn.example.com/cover.jpg",
        lossless=True,
    )

    result = resolve_release(metadata, store=fake_store, today=_today)

    assert result.created
    release = fake_store.tables.releases[result.id]
    assert release.title == "Night Drive"
    assert release.release_date == date(1999, 1, 1)
    assert release.labels == ["Warp"]
    assert release.catalog_number == "WARP-01"
    assert release.formats == [ReleaseFormat.DIGITAL]
    assert release.cover_art == "https://cdn.example.com/cover.jpg"


def test_finds_existing_release_by_title(fake_store: FakeEntityStore) -> None:
    existing = Release(title="Night Drive", release_date=date(2001, 1, 1))
    fake_store.tables.releases[existing.id] = existing

    result = resolve_release(ReleaseMetadata(album="NIGHT DRIVE"), store=fake_store)

    assert not result.created
    assert result.id == existing.id
    assert result.display_name == "Night Drive"
    assert fake_store.calls["create_release"] == 0


def test_blank_album_is_rejected(fake_store: FakeEntityStore) -> None:
    with pytest.raises(ValidationError, match="Album name is required"):
        resolve_release(ReleaseMetadata(album="  "), store=fake_store)


def test_store_failure_is_wrapped(fake_store: FakeEntityStore) -> None:
    fake_store.fail("find_release_by_title", InfrastructureError("timeout"))

    with pytest.raises(ResolutionError, match="Failed to find or create release"):
        resolve_release(ReleaseMetadata(album="Night Drive"), store=fake_store)


@pytest.mark.parametrize(
    ("year", "date_text", "expected"),
    [
        (None, "2003-04-05", date(2003, 4, 5)),
        (1990, "2003-04-05T10:00:00", date(2003, 4, 5)),
        (1987, "not a date", date(1987, 1, 1)),
        (1987, None, date(1987, 1, 1)),
        (1900, None, None),
        (2100, None, None),
        (None, "2024", date(2024, 1, 1)),
        (None, "2024-03", date(2024, 3, 1)),
        (1987, "2024-13", date(1987, 1, 1)),
        (None, "1850", None),
        (None, "  ", None),
        (None, None, None),
    ],
)
def test_parse_release_date(year: int | None, date_text: str | None, expected: date | None) -> None:
    assert parse_release_date(year, date_text) == expected


def test_release_date_falls_back_to_today(fake_store: FakeEntityStore) -> None:
    result = resolve_release(ReleaseMetadata(album="Undated"), store=fake_store, today=_today)

    assert fake_store.tables.releases[result.id].release_date == FIXED_TODAY


def test_year_only_date_tag_is_not_replaced_by_today(fake_store: FakeEntityStore) -> None:
    metadata = ReleaseMetadata(album="Tagged", date="2024")

    result = resolve_release(metadata, store=fake_store, today=_today)

    assert fake_store.tables.releases[result.id].release_date == date(2024, 1, 1)


def test_formats_are_digital_regardless_of_lossless_flag() -> None:
    assert determine_formats(lossless=True) == [ReleaseFormat.DIGITAL]
    assert determine_formats(lossless=False) == [ReleaseFormat.DIGITAL]
    assert determine_formats() == [ReleaseFormat.DIGITAL]
