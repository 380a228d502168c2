"""Artist name handling."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ArtistNameParts:
    first_name: str
    surname: str
    display_name: str


def parse_artist_name(name: str) -> ArtistNameParts:
    """Split ``name`` on whitespace into first name and surname.

    A single token (stage names like "Madonna") fills both parts. Otherwise the
    first token is the first name and the rest, single-spaced, the surname.
    The display name is the trimmed input with case and punctuation intact.
    """

    display_name = name.strip()
    parts = display_name.split()
    if not parts:
        raise ValueError("artist name must not be blank")
    if len(parts) == 1:
        return ArtistNameParts(first_name=parts[0], surname=parts[0], display_name=display_name)
    return ArtistNameParts(
        first_name=parts[0],
        surname=" ".join(parts[1:]),
        display_name=display_name,
    )
