"""SQLAlchemy-backed unit of work for bulk track ingestion."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from trackgraph.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from trackgraph.adapters.sqlalchemy.repositories import SqlAlchemyEntityStore, translate_errors
from trackgraph.config import get_database_config

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call trackgraph.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:  # pyright: ignore[reportUnusedFunction]
        _ = connection_record
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, metadata, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        engine = create_engine(database_uri or get_database_config().uri)
        _enable_sqlite_foreign_keys(engine)
    start_mappers()
    create_all_tables(engine)

    _STATE.engine = engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class SqlAlchemyUnitOfWork:
    """One session per ingestion run.

    ``store`` commits after every write. ``transaction()`` hands out a store on
    the same session that only flushes, then commits once the block exits
    cleanly or rolls back everything written inside it.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None
        self._store: SqlAlchemyEntityStore | None = None
        self._in_transaction = False

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self.session = self.session_factory()
        self._store = SqlAlchemyEntityStore(self.session, autocommit=True)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        self._store = None
        return False

    @property
    def store(self) -> SqlAlchemyEntityStore:
        if self._store is None:
            raise StartupError("Unit of work session not initialised")
        return self._store

    @contextmanager
    def transaction(self) -> Iterator[SqlAlchemyEntityStore]:
        if self._in_transaction:
            raise RuntimeError("Unit of work transactions do not nest")
        session = self.session
        self._in_transaction = True
        try:
            yield SqlAlchemyEntityStore(session, autocommit=False)
        except BaseException:
            session.rollback()
            raise
        else:
            try:
                with translate_errors("Transaction commit failed"):
                    session.commit()
            except Exception:
                session.rollback()
                raise
        finally:
            self._in_transaction = False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


if TYPE_CHECKING:
    from trackgraph.domain.ports import UnitOfWork

    _uow_check: UnitOfWork = SqlAlchemyUnitOfWork()
