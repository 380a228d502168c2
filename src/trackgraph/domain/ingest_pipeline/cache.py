"""Batch-scoped memory of resolved entities."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from trackgraph.domain.model import EntityType

if TYPE_CHECKING:
    from collections.abc import Iterator
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class CachedEntity:
    id: UUID
    display_name: str
    was_created: bool


def cache_key(name: str) -> str:
    return name.strip().lower()


def _empty_buckets() -> dict[EntityType, dict[str, CachedEntity]]:
    return {
        EntityType.ARTIST: {},
        EntityType.GROUP: {},
        EntityType.RELEASE: {},
    }


@dataclass(slots=True)
class ResolutionCache:
    """Normalized name -> resolved entity, one map per entity type.

    Create one per batch and pass it down explicitly. While ``staging()`` is
    active, writes are held back and only merged when the block exits cleanly,
    so entities from a rolled-back item never leak into later items.
    """

    _entries: dict[EntityType, dict[str, CachedEntity]] = field(default_factory=_empty_buckets)
    _staged: dict[EntityType, dict[str, CachedEntity]] | None = None

    def get(self, entity_type: EntityType, name: str) -> CachedEntity | None:
        key = cache_key(name)
        if self._staged is not None:
            staged = self._staged[entity_type].get(key)
            if staged is not None:
                return staged
        return self._entries[entity_type].get(key)

    def put(self, entity_type: EntityType, name: str, entry: CachedEntity) -> None:
        target = self._staged if self._staged is not None else self._entries
        target[entity_type][cache_key(name)] = entry

    def created_count(self, entity_type: EntityType) -> int:
        return sum(1 for entry in self._entries[entity_type].values() if entry.was_created)

    @contextmanager
    def staging(self) -> Iterator[None]:
        if self._staged is not None:
            raise RuntimeError("ResolutionCache staging does not nest")
        self._staged = _empty_buckets()
        try:
            yield
        except BaseException:
            self._staged = None
            raise
        staged, self._staged = self._staged, None
        for entity_type, bucket in staged.items():
            self._entries[entity_type].update(bucket)
