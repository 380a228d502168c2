"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from logging import getLogger
from typing import TYPE_CHECKING

from trackgraph.adapters.notifications import LoggingAuditSink, LoggingCacheInvalidator
from trackgraph.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from trackgraph.domain.ingest_pipeline import ingest_batch
from trackgraph.domain.model import AudioUploadStatus
from trackgraph.domain.ports import UnitOfWork
from trackgraph.domain.track_audio import (
    DuplicateTrack,
    check_duplicate_tracks,
    mark_track_uploading,
    update_track_audio,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from trackgraph.domain.ingest_pipeline import BatchResult, IngestOptions, TrackDescriptor
    from trackgraph.domain.ports import AuditSink, CacheInvalidator

UnitOfWorkFactory = Callable[[], UnitOfWork]


log = getLogger(__name__)


def _resolve_factory(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def ingest_tracks(
    descriptors: Sequence[TrackDescriptor],
    options: IngestOptions | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    audit: AuditSink | None = None,
    invalidator: CacheInvalidator | None = None,
    actor_id: str | None = None,
) -> BatchResult:
    """Ingest a batch of track descriptors using the configured adapters."""

    effective_uow = _resolve_factory(unit_of_work_factory)
    with effective_uow() as uow:
        result = ingest_batch(
            descriptors,
            uow=uow,
            options=options,
            audit=audit or LoggingAuditSink(),
            invalidator=invalidator or LoggingCacheInvalidator(),
            actor_id=actor_id,
        )
    log.info(
        "Bulk ingest finished: success=%s, succeeded=%d, failed=%d",
        result.success,
        result.success_count,
        result.failed_count,
    )
    return result


def find_duplicate_tracks(
    hashes: Iterable[str],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[DuplicateTrack]:
    """Return stored tracks whose audio content hash is among ``hashes``."""

    effective_uow = _resolve_factory(unit_of_work_factory)
    with effective_uow() as uow:
        return check_duplicate_tracks(uow, hashes)


def start_track_upload(
    track_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> None:
    effective_uow = _resolve_factory(unit_of_work_factory)
    with effective_uow() as uow:
        mark_track_uploading(uow, track_id)
    log.info("Track %s upload started", track_id)


def complete_track_upload(
    track_id: UUID,
    *,
    status: AudioUploadStatus,
    audio_location: str,
    error: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    audit: AuditSink | None = None,
    actor_id: str | None = None,
) -> None:
    """Finalize a deferred upload as completed (with its location) or failed."""

    effective_uow = _resolve_factory(unit_of_work_factory)
    with effective_uow() as uow:
        update_track_audio(
            uow,
            track_id,
            audio_location=audio_location,
            status=status,
            error=error,
            audit=audit or LoggingAuditSink(),
            actor_id=actor_id,
        )
    log.info("Track %s upload finished with status %s", track_id, status)
