"""Error taxonomy for bulk ingestion."""

from __future__ import annotations

from collections.abc import Iterator


class IngestError(Exception):
    """Base class for ingestion failures."""


class ValidationError(IngestError):
    """Required input is blank, missing or out of range. Raised before any store access."""


class ResolutionError(IngestError):
    """A resolver could not find or create its entity.

    The message is safe to show to callers; the underlying failure is chained
    as ``__cause__``.
    """


class ResolutionExhaustedError(ResolutionError):
    """Slug generation ran out of candidates."""


class InfrastructureError(IngestError):
    """The store failed (unreachable, aborted transaction, constraint failure)."""


class ConflictError(InfrastructureError):
    """A uniqueness constraint rejected the write."""


def iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc`` followed by its chained causes/contexts, without cycles."""

    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__
