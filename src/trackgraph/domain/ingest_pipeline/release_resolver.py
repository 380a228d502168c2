"""Find-or-create for canonical releases built from album tags."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar, Final

from trackgraph.domain.model import EntityType, Release, ReleaseFormat

from .descriptors import clean
from .errors import InfrastructureError, ResolutionError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from trackgraph.domain.ports import EntityStore

    from .descriptors import ReleaseMetadata

log = getLogger(__name__)

MIN_RELEASE_YEAR: Final[int] = 1900
MAX_RELEASE_YEAR: Final[int] = 2100

_PARTIAL_DATE: Final[re.Pattern[str]] = re.compile(r"(\d{4})(?:-(\d{1,2}))?")


@dataclass(frozen=True, slots=True)
class ReleaseResolution:
    id: UUID
    title: str
    created: bool
    searched_name: str = ""

    entity_type: ClassVar[EntityType] = EntityType.RELEASE

    @property
    def display_name(self) -> str:
        return self.title


def resolve_release(
    metadata: ReleaseMetadata,
    *,
    store: EntityStore,
    today: Callable[[], date] = date.today,
) -> ReleaseResolution:
    """Return the first release titled like ``metadata.album``, creating one when absent.

    Titles are matched case-insensitively and are not scoped by artist or label,
    so different albums sharing a title resolve to the same release.
    """

    title = clean(metadata.album)
    if title is None:
        raise ValidationError("Album name is required to find or create a release")

    try:
        existing = store.find_release_by_title(title)
        if existing is not None:
            return ReleaseResolution(
                id=existing.id, title=existing.title, created=False, searched_name=title
            )

        label = clean(metadata.label)
        release = store.create_release(
            Release(
                title=title,
                release_date=parse_release_date(metadata.year, metadata.date) or today(),
                formats=determine_formats(lossless=metadata.lossless),
                labels=[label] if label else [],
                catalog_number=clean(metadata.catalog_number),
                cover_art=clean(metadata.cover_art),
            )
        )
    except InfrastructureError as exc:
        log.warning("Release resolution failed for %r: %s", title, exc)
        raise ResolutionError("Failed to find or create release") from exc

    log.debug("Created release %r", title)
    return ReleaseResolution(id=release.id, title=release.title, created=True, searched_name=title)


def parse_release_date(year: int | None, date_text: str | None) -> date | None:
    """Full date first (ISO date or datetime), then ``YYYY``/``YYYY-MM`` tags as the
    first day of that period, then 1 January of a plausible ``year``.
    """

    text = clean(date_text)
    if text is not None:
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
        partial = _parse_partial_date(text)
        if partial is not None:
            return partial
        log.debug("Ignoring unparseable release date %r", text)

    if year is not None and MIN_RELEASE_YEAR < year < MAX_RELEASE_YEAR:
        return date(year, 1, 1)
    return None


def _parse_partial_date(text: str) -> date | None:
    match = _PARTIAL_DATE.fullmatch(text)
    if match is None:
        return None
    year = int(match.group(1))
    month = int(match.group(2) or 1)
    if not MIN_RELEASE_YEAR < year < MAX_RELEASE_YEAR or not 1 <= month <= 12:
        return None
    return date(year, month, 1)


def determine_formats(*, lossless: bool | None = None) -> list[ReleaseFormat]:
    # Tags cannot tell physical media apart; every ingested release is digital.
    _ = lossless
    return [ReleaseFormat.DIGITAL]
