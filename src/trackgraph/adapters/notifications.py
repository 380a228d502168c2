"""Logging-backed audit sink and cache invalidation signal."""

from __future__ import annotations

import json
from logging import INFO, Logger, getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trackgraph.domain.ports import AuditEvent

AUDIT_LOGGER_NAME = "trackgraph.audit"

log = getLogger(__name__)


def serialize_event(event: AuditEvent) -> str:
    payload = {
        "event": event.event,
        "actor_id": event.actor_id,
        "timestamp": event.timestamp.isoformat(),
        "metadata": dict(event.metadata),
    }
    return json.dumps(payload, default=str, sort_keys=True)


class LoggingAuditSink:
    """Write each audit event as one JSON line on the audit logger."""

    def __init__(self, logger: Logger | None = None, *, level: int = INFO) -> None:
        self.logger = logger or getLogger(AUDIT_LOGGER_NAME)
        self.level = level

    def record(self, event: AuditEvent) -> None:
        self.logger.log(self.level, "%s", serialize_event(event))


class LoggingCacheInvalidator:
    """Announce invalidated paths; the hosting web layer purges its own caches."""

    def __init__(self, logger: Logger | None = None) -> None:
        self.logger = logger or log

    def invalidate(self, paths: frozenset[str]) -> None:
        for path in sorted(paths):
            self.logger.info("Invalidating cached path %s", path)
