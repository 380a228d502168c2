"""SQLAlchemy adapter package for trackgraph."""

from __future__ import annotations

from .mappings import ASSOCIATION_TABLES, create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyEntityStore, translate_errors
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "ASSOCIATION_TABLES",
    "SqlAlchemyEntityStore",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
    "translate_errors",
]
