from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from trackgraph.adapters.descriptors import (
    DescriptorLoadError,
    TrackPayload,
    load_descriptors,
    parse_descriptors,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_camel_case_payload_maps_to_descriptor() -> None:
    (descriptor,) = parse_descriptors(
        [
            {
                "title": "Song",
                "duration": 181,
                "audioUrl": "s3://bucket/song.mp3",
                "position": 2,
                "coverArt": "https://cdn/cover.jpg",
                "album": "Album",
                "year": "1999",
                "date": "1999-05-01",
                "label": "Warp",
                "catalogNumber": "WARP-01",
                "albumArtist": "The Band",
                "artist": "Jane Doe",
                "lossless": True,
                "audioFileHash": "abc123",
                "bitrate": 320,
            }
        ]
    )

    assert descriptor.title == "Song"
    assert descriptor.duration == 181.0
    assert descriptor.audio_location == "s3://bucket/song.mp3"
    assert descriptor.position == 2
    assert descriptor.cover_art == "https://cdn/cover.jpg"
    assert descriptor.year == 1999
    assert descriptor.catalog_number == "WARP-01"
    assert descriptor.album_artist == "The Band"
    assert descriptor.lossless is True
    assert descriptor.content_hash == "abc123"


def test_snake_case_and_wrapped_batches_are_accepted() -> None:
    descriptors = parse_descriptors(
        {"tracks": [{"title": "A", "duration": 1, "audio_location": "s3://a"}, {"title": "B"}]}
    )

    assert [d.title for d in descriptors] == ["A", "B"]
    assert descriptors[0].audio_location == "s3://a"
    assert descriptors[1].duration is None


def test_blank_optional_strings_become_none() -> None:
    payload = TrackPayload.model_validate(
        {"title": None, "album": "  ", "artist": "", "year": "", "audioUrl": " "}
    )

    assert payload.title == ""
    assert payload.album is None
    assert payload.artist is None
    assert payload.year is None
    assert payload.audio_location is None


def test_invalid_payload_raises_load_error() -> None:
    with pytest.raises(DescriptorLoadError, match="Invalid track batch"):
        parse_descriptors([{"title": "A", "duration": "long"}])
    with pytest.raises(DescriptorLoadError):
        parse_descriptors("not a batch")


def test_load_descriptors_reads_json_file(tmp_path: Path) -> None:
    path = tmp_path / "batch.json"
    path.write_text(json.dumps([{"title": "A", "duration": 1, "audioUrl": "s3://a"}]))

    (descriptor,) = load_descriptors(path)

    assert descriptor.title == "A"


def test_load_descriptors_reports_unreadable_files(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("[{")

    with pytest.raises(DescriptorLoadError, match="not valid JSON"):
        load_descriptors(broken)
    with pytest.raises(DescriptorLoadError, match="Cannot read"):
        load_descriptors(tmp_path / "missing.json")
