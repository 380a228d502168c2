"""Slug generation for URL-safe unique identifiers."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from .errors import ResolutionExhaustedError

if TYPE_CHECKING:
    from collections.abc import Callable

MAX_SLUG_ATTEMPTS: Final[int] = 100

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(name: str) -> str:
    slug = _DISALLOWED.sub("", name.lower().strip())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def generate_unique_slug(
    name: str,
    exists: Callable[[str], bool],
    *,
    max_attempts: int = MAX_SLUG_ATTEMPTS,
) -> str:
    """Return the slug of ``name``, suffixed ``-1``, ``-2``, ... until ``exists`` says it is free.

    Raises ``ResolutionExhaustedError`` once ``max_attempts`` suffixes were taken.
    """

    base = slugify(name)
    if not exists(base):
        return base
    for suffix in range(1, max_attempts + 1):
        candidate = f"{base}-{suffix}"
        if not exists(candidate):
            return candidate
    raise ResolutionExhaustedError(
        f'Could not generate unique slug for "{name}" after {max_attempts} attempts'
    )
