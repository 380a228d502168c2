"""Fire-and-forget collaborators notified by ingestion."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """One audit record, e.g. ``media.artist.created``."""

    event: str
    actor_id: str | None = None
    metadata: Mapping[str, object] = field(default_factory=dict[str, object])
    timestamp: datetime = field(default_factory=_utcnow)


@runtime_checkable
class AuditSink(Protocol):
    def record(self, event: AuditEvent) -> None: ...


@runtime_checkable
class CacheInvalidator(Protocol):
    def invalidate(self, paths: frozenset[str]) -> None: ...


class NullAuditSink:
    def record(self, event: AuditEvent) -> None:
        _ = event


class NullCacheInvalidator:
    def invalidate(self, paths: frozenset[str]) -> None:
        _ = paths
