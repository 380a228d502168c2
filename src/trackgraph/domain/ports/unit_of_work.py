"""Unit-of-work abstraction separating ambient writes from per-item transactions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contextlib import AbstractContextManager
    from types import TracebackType

    from trackgraph.domain.ports.persistence import EntityStore


@runtime_checkable
class UnitOfWork(Protocol):
    """Store access for one ingestion run.

    ``store`` commits each write as it happens. ``transaction()`` yields a store
    whose writes commit together when the block exits normally and roll back
    when it raises; writes committed earlier through ``store`` are untouched.
    """

    @property
    def store(self) -> EntityStore: ...

    def transaction(self) -> AbstractContextManager[EntityStore]: ...

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
