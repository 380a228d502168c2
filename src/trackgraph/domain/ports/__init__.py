"""Domain port definitions for adapters."""

from __future__ import annotations

from .notifications import (
    AuditEvent,
    AuditSink,
    CacheInvalidator,
    NullAuditSink,
    NullCacheInvalidator,
)
from .persistence import EntityStore
from .unit_of_work import UnitOfWork

__all__ = [
    "AuditEvent",
    "AuditSink",
    "CacheInvalidator",
    "EntityStore",
    "NullAuditSink",
    "NullCacheInvalidator",
    "UnitOfWork",
]
