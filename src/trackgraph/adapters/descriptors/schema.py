"""Pydantic models describing a bulk-upload batch file."""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class DescriptorBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TrackPayload(DescriptorBaseModel):
    """One entry of the batch, as extracted from an audio file and its tags."""

    title: str = ""
    duration: float | None = None
    audio_location: str | None = Field(
        default=None,
        validation_alias=AliasChoices("audioUrl", "audioLocation", "audio_location"),
    )
    position: int | None = None
    cover_art: str | None = Field(
        default=None, validation_alias=AliasChoices("coverArt", "cover_art")
    )
    album: str | None = None
    year: int | None = None
    date: str | None = None
    label: str | None = None
    catalog_number: str | None = Field(
        default=None, validation_alias=AliasChoices("catalogNumber", "catalog_number")
    )
    album_artist: str | None = Field(
        default=None, validation_alias=AliasChoices("albumArtist", "album_artist")
    )
    artist: str | None = None
    lossless: bool | None = None
    content_hash: str | None = Field(
        default=None,
        validation_alias=AliasChoices("contentHash", "audioFileHash", "content_hash"),
    )

    @field_validator("title", mode="before")
    @classmethod
    def _none_title_to_blank(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("year", "position", "duration", mode="before")
    @classmethod
    def _blank_number_to_none(cls, value: object) -> object:
        return _blank_to_none(value)

    _normalize_optional_text = field_validator(
        "audio_location",
        "cover_art",
        "album",
        "date",
        "label",
        "catalog_number",
        "album_artist",
        "artist",
        "content_hash",
        mode="before",
    )(_blank_to_none)


class BatchPayload(DescriptorBaseModel):
    """A batch file: either a bare JSON array or ``{"tracks": [...]}``."""

    tracks: list[TrackPayload]

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_list(cls, value: object) -> object:
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            return {"tracks": list(cast(Sequence[object], value))}
        return value
