"""Translate batch payloads into domain track descriptors."""

from __future__ import annotations

import json
from logging import getLogger
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from trackgraph.domain.ingest_pipeline import TrackDescriptor

from .schema import BatchPayload, TrackPayload

log = getLogger(__name__)


class DescriptorLoadError(ValueError):
    """Raised when a batch file cannot be read or does not match the schema."""


def to_descriptor(payload: TrackPayload) -> TrackDescriptor:
    return TrackDescriptor(
        title=payload.title,
        duration=payload.duration,
        audio_location=payload.audio_location,
        position=payload.position,
        cover_art=payload.cover_art,
        album=payload.album,
        year=payload.year,
        date=payload.date,
        label=payload.label,
        catalog_number=payload.catalog_number,
        album_artist=payload.album_artist,
        artist=payload.artist,
        lossless=payload.lossless,
        content_hash=payload.content_hash,
    )


def parse_descriptors(raw: object) -> list[TrackDescriptor]:
    """Validate already-decoded JSON and return descriptors in input order."""

    try:
        batch = BatchPayload.model_validate(raw)
    except PydanticValidationError as exc:
        raise DescriptorLoadError(f"Invalid track batch: {exc}") from exc
    return [to_descriptor(track) for track in batch.tracks]


def load_descriptors(source: str | Path) -> list[TrackDescriptor]:
    """Read and validate a JSON batch file."""

    path = Path(source)
    log.debug("Loading track batch from %s", path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DescriptorLoadError(f"Cannot read track batch {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DescriptorLoadError(f"Track batch {path} is not valid JSON: {exc}") from exc
    descriptors = parse_descriptors(raw)
    log.info("Loaded %d track descriptor(s) from %s", len(descriptors), path)
    return descriptors

