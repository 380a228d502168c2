"""Application services for audio files attached to ingested tracks."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from trackgraph.domain.model import AudioUploadStatus
from trackgraph.domain.ports import AuditEvent, AuditSink, NullAuditSink

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from trackgraph.domain.ports import UnitOfWork

log = getLogger(__name__)

_OPEN_UPLOAD_STATES: Final[frozenset[AudioUploadStatus]] = frozenset(
    {AudioUploadStatus.PENDING, AudioUploadStatus.UPLOADING}
)
_FINAL_UPLOAD_STATES: Final[frozenset[AudioUploadStatus]] = frozenset(
    {AudioUploadStatus.COMPLETED, AudioUploadStatus.FAILED}
)


class TrackNotFoundError(LookupError):
    """Raised when a track id does not exist."""


class UploadStateError(ValueError):
    """Raised when an upload status change is not allowed from the current status."""


@dataclass(frozen=True, slots=True)
class DuplicateTrack:
    """A stored track whose audio content hash matched a candidate upload."""

    content_hash: str
    track_id: UUID
    title: str
    audio_location: str
    upload_status: AudioUploadStatus


def check_duplicate_tracks(uow: UnitOfWork, hashes: Iterable[str]) -> list[DuplicateTrack]:
    """Return the stored tracks whose content hash is among ``hashes``."""

    wanted = {value.strip() for value in hashes if value and value.strip()}
    if not wanted:
        return []
    tracks = uow.store.find_tracks_by_content_hash(wanted)
    return [
        DuplicateTrack(
            content_hash=track.content_hash,
            track_id=track.id,
            title=track.title,
            audio_location=track.audio_location,
            upload_status=track.upload_status,
        )
        for track in tracks
        if track.content_hash is not None
    ]


def mark_track_uploading(uow: UnitOfWork, track_id: UUID) -> None:
    """Flag a deferred upload as in progress."""

    track = uow.store.get_track(track_id)
    if track is None:
        raise TrackNotFoundError(f"Track not found: {track_id}")
    if track.upload_status not in _OPEN_UPLOAD_STATES:
        raise UploadStateError(f"Track upload status is already {track.upload_status}")
    uow.store.update_track_audio(track_id, status=AudioUploadStatus.UPLOADING)


def update_track_audio(
    uow: UnitOfWork,
    track_id: UUID,
    *,
    audio_location: str,
    status: AudioUploadStatus,
    error: str | None = None,
    audit: AuditSink | None = None,
    actor_id: str | None = None,
) -> None:
    """Record the outcome of a deferred upload.

    Only tracks that are still pending or uploading can be finalized. A failed
    upload keeps the track's current audio location.
    """

    if status not in _FINAL_UPLOAD_STATES:
        raise UploadStateError(f"Upload can only be finalized as completed or failed, not {status}")
    track = uow.store.get_track(track_id)
    if track is None:
        raise TrackNotFoundError(f"Track not found: {track_id}")
    if track.upload_status not in _OPEN_UPLOAD_STATES:
        raise UploadStateError(f"Track upload status is already {track.upload_status}")

    completed = status is AudioUploadStatus.COMPLETED
    uow.store.update_track_audio(
        track_id,
        status=status,
        audio_location=audio_location if completed else None,
    )
    if error:
        log.warning("Upload for track %s failed: %s", track_id, error)

    sink = audit or NullAuditSink()
    metadata: dict[str, object] = {
        "track_id": str(track_id),
        "update_type": "audio_upload",
        "status": status.value,
    }
    if completed:
        metadata["audio_location"] = audio_location
    if error:
        metadata["error"] = error
    try:
        sink.record(AuditEvent(event="media.track.updated", actor_id=actor_id, metadata=metadata))
    except Exception:
        log.exception("Audit sink rejected media.track.updated")
