"""Input records for a bulk ingestion batch."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class TrackDescriptor:
    """One track as described by its uploaded file and tags.

    ``duration`` is in seconds. ``year``/``date``/``label``/``catalog_number``
    describe the album the track belongs to and only matter when the release
    is created from this descriptor.
    """

    title: str
    duration: float | None
    audio_location: str | None = None
    position: int | None = None
    cover_art: str | None = None
    album: str | None = None
    year: int | None = None
    date: str | None = None
    label: str | None = None
    catalog_number: str | None = None
    album_artist: str | None = None
    artist: str | None = None
    lossless: bool | None = None
    content_hash: str | None = None

    def release_metadata(self) -> ReleaseMetadata | None:
        album = clean(self.album)
        if album is None:
            return None
        return ReleaseMetadata(
            album=album,
            year=self.year,
            date=self.date,
            label=self.label,
            catalog_number=self.catalog_number,
            album_artist=self.album_artist,
            cover_art=self.cover_art,
            lossless=self.lossless,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class ReleaseMetadata:
    """Album-level fields used to find or create a release."""

    album: str
    year: int | None = None
    date: str | None = None
    label: str | None = None
    catalog_number: str | None = None
    album_artist: str | None = None
    cover_art: str | None = None
    lossless: bool | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class IngestOptions:
    auto_create_release: bool = True
    publish_immediately: bool = False
    defer_audio_upload: bool = False


def clean(value: str | None) -> str | None:
    """Trim ``value``; blank strings become ``None``."""

    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
