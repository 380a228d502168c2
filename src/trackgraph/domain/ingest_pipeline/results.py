"""Per-item and batch-level outcomes."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class ItemResult:
    index: int
    success: bool
    title: str
    track_id: UUID | None = None
    error: str | None = None
    release_id: UUID | None = None
    release_title: str | None = None
    release_created: bool | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class BatchResult:
    success: bool
    success_count: int
    failed_count: int
    results: tuple[ItemResult, ...] = ()
    error: str | None = None

    @classmethod
    def rejected(cls, error: str, *, failed_count: int) -> BatchResult:
        """Short-circuit result for batches that never reached per-item processing."""
        return cls(
            success=False,
            success_count=0,
            failed_count=failed_count,
            results=(),
            error=error,
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "successCount": self.success_count,
            "failedCount": self.failed_count,
            "results": [_item_to_dict(item) for item in self.results],
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


_ITEM_KEYS = {
    "index": "index",
    "success": "success",
    "track_id": "trackId",
    "title": "title",
    "error": "error",
    "release_id": "releaseId",
    "release_title": "releaseTitle",
    "release_created": "releaseCreated",
}


def _item_to_dict(item: ItemResult) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for name, value in asdict(item).items():
        if value is None:
            continue
        payload[_ITEM_KEYS[name]] = str(value) if name in {"track_id", "release_id"} else value
    return payload


@dataclass(slots=True)
class ResultAggregator:
    """Collects item results in input order."""

    _results: list[ItemResult] = field(default_factory=list[ItemResult])

    def add(self, result: ItemResult) -> None:
        self._results.append(result)

    def succeeded(
        self,
        index: int,
        title: str,
        *,
        track_id: UUID,
        release_id: UUID | None = None,
        release_title: str | None = None,
        release_created: bool | None = None,
    ) -> None:
        self.add(
            ItemResult(
                index=index,
                success=True,
                title=title,
                track_id=track_id,
                release_id=release_id,
                release_title=release_title,
                release_created=release_created,
            )
        )

    def failed(self, index: int, title: str, error: str) -> None:
        self.add(ItemResult(index=index, success=False, title=title, error=error))

    @property
    def success_count(self) -> int:
        return sum(1 for result in self._results if result.success)

    @property
    def failed_count(self) -> int:
        return sum(1 for result in self._results if not result.success)

    def build(self) -> BatchResult:
        failed = self.failed_count
        return BatchResult(
            success=failed == 0,
            success_count=self.success_count,
            failed_count=failed,
            results=tuple(self._results),
        )
