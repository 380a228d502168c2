"""Batch orchestrator: validate, resolve shared resources, then ingest item by item."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final, TypeAlias

from trackgraph.domain.model import AudioUploadStatus, EntityType, Track
from trackgraph.domain.ports import (
    AuditEvent,
    AuditSink,
    CacheInvalidator,
    NullAuditSink,
    NullCacheInvalidator,
)

from .artist_resolver import ArtistResolution, resolve_artist
from .cache import CachedEntity, ResolutionCache
from .decision import ArtistGroupPlan, plan_artist_group
from .descriptors import IngestOptions, TrackDescriptor, clean
from .errors import ConflictError, ResolutionError, ValidationError, iter_causes
from .group_resolver import GroupResolution, resolve_group
from .release_resolver import ReleaseResolution, resolve_release
from .results import BatchResult, ResultAggregator

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from trackgraph.domain.ports import EntityStore, UnitOfWork

log = getLogger(__name__)

MAX_BATCH_SIZE: Final[int] = 100
PENDING_AUDIO_LOCATION: Final[str] = "pending://upload"

NO_TRACKS_MESSAGE: Final[str] = "No tracks provided"
TOO_MANY_TRACKS_MESSAGE: Final[str] = f"Maximum {MAX_BATCH_SIZE} tracks can be uploaded at once"
DUPLICATE_TITLE_MESSAGE: Final[str] = "A track with this title already exists"
TRACK_FAILED_MESSAGE: Final[str] = "Failed to create track"
UNEXPECTED_ERROR_MESSAGE: Final[str] = "An unexpected error occurred"

INVALIDATED_PATHS: Final[frozenset[str]] = frozenset(
    {"/admin/tracks", "/admin/artists", "/admin/releases", "/admin/groups"}
)

Resolution: TypeAlias = ArtistResolution | GroupResolution | ReleaseResolution


class BatchState(StrEnum):
    VALIDATING = "validating"
    PRE_RESOLVING = "pre_resolving_shared_resources"
    PROCESSING_ITEMS = "processing_items"
    AGGREGATING = "aggregating"
    DONE = "done"
    REJECTED = "rejected"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class BatchIngestion:
    """Turn a batch of track descriptors into tracks linked to canonical entities.

    Releases, and the groups named by album artists, are resolved once up front
    through the ambient store so they survive any later item failure; an error
    there aborts the whole batch. Every item then gets its own transaction
    covering its artist, group, track and association writes.
    """

    uow: UnitOfWork
    options: IngestOptions = field(default_factory=IngestOptions)
    audit: AuditSink = field(default_factory=NullAuditSink)
    invalidator: CacheInvalidator = field(default_factory=NullCacheInvalidator)
    actor_id: str | None = None
    clock: Callable[[], datetime] = _utcnow
    today: Callable[[], date] = date.today

    state: BatchState = field(default=BatchState.VALIDATING, init=False)
    cache: ResolutionCache = field(default_factory=ResolutionCache, init=False)

    def run(self, descriptors: Sequence[TrackDescriptor]) -> BatchResult:
        self.cache = ResolutionCache()
        self._enter(BatchState.VALIDATING)
        rejection = self._validate_batch(descriptors)
        if rejection is not None:
            self._enter(BatchState.REJECTED)
            log.info("Rejected batch of %d tracks: %s", len(descriptors), rejection.error)
            return rejection

        log.info(
            "Starting bulk ingest: tracks=%d, auto_create_release=%s, publish=%s, defer_upload=%s",
            len(descriptors),
            self.options.auto_create_release,
            self.options.publish_immediately,
            self.options.defer_audio_upload,
        )

        self._enter(BatchState.PRE_RESOLVING)
        try:
            self._resolve_shared_resources(descriptors)
        except Exception as exc:
            self._enter(BatchState.FAILED)
            log.exception("Shared resource resolution failed; aborting batch")
            return BatchResult.rejected(
                pre_pass_failure_message(exc), failed_count=len(descriptors)
            )

        self._enter(BatchState.PROCESSING_ITEMS)
        aggregator = ResultAggregator()
        for index, descriptor in enumerate(descriptors):
            self._process_item(index, descriptor, aggregator)

        self._enter(BatchState.AGGREGATING)
        result = aggregator.build()
        self._emit(
            AuditEvent(
                event="media.tracks.bulk_created",
                actor_id=self.actor_id,
                metadata={
                    "total_tracks": len(descriptors),
                    "success_count": result.success_count,
                    "failed_count": result.failed_count,
                    "auto_create_release": self.options.auto_create_release,
                    "releases_created": self.cache.created_count(EntityType.RELEASE),
                    "artists_created": self.cache.created_count(EntityType.ARTIST),
                    "groups_created": self.cache.created_count(EntityType.GROUP),
                },
                timestamp=self.clock(),
            )
        )
        self._invalidate()
        self._enter(BatchState.DONE)
        log.info(
            "Finished bulk ingest: succeeded=%d, failed=%d",
            result.success_count,
            result.failed_count,
        )
        return result

    # Validating -------------------------------------------------------------

    def _validate_batch(self, descriptors: Sequence[TrackDescriptor]) -> BatchResult | None:
        if not descriptors:
            return BatchResult.rejected(NO_TRACKS_MESSAGE, failed_count=0)
        if len(descriptors) > MAX_BATCH_SIZE:
            return BatchResult.rejected(TOO_MANY_TRACKS_MESSAGE, failed_count=len(descriptors))
        return None

    # PreResolvingSharedResources --------------------------------------------

    def _resolve_shared_resources(self, descriptors: Sequence[TrackDescriptor]) -> None:
        if not self.options.auto_create_release:
            return
        store = self.uow.store
        for descriptor in descriptors:
            metadata = descriptor.release_metadata()
            if metadata is None:
                continue
            if self.cache.get(EntityType.RELEASE, metadata.album) is None:
                release = resolve_release(metadata, store=store, today=self.today)
                self.cache.put(
                    EntityType.RELEASE,
                    metadata.album,
                    CachedEntity(
                        id=release.id, display_name=release.title, was_created=release.created
                    ),
                )
                self._audit_resolution(release)

            plan = plan_artist_group(descriptor.artist, descriptor.album_artist)
            if plan.group_name is not None:
                group = resolve_group(plan.group_name, store=store, cache=self.cache)
                if not group.from_cache:
                    self._audit_resolution(group)

    # ProcessingItems --------------------------------------------------------

    def _process_item(
        self, index: int, descriptor: TrackDescriptor, aggregator: ResultAggregator
    ) -> None:
        title = clean(descriptor.title)
        if title is None:
            aggregator.failed(index, descriptor.title or f"Track {index + 1}", "Title is required")
            return
        audio_location = clean(descriptor.audio_location)
        if audio_location is None and not self.options.defer_audio_upload:
            aggregator.failed(index, descriptor.title, "Audio location is required")
            return
        duration = descriptor.duration
        if duration is None or not math.isfinite(duration) or duration <= 0:
            aggregator.failed(index, descriptor.title, "Valid duration is required")
            return

        release = self._cached_release(descriptor)
        plan = plan_artist_group(descriptor.artist, descriptor.album_artist)
        resolutions: list[ArtistResolution | GroupResolution] = []
        try:
            with self.cache.staging(), self.uow.transaction() as store:
                track = self._create_track(
                    store,
                    descriptor,
                    title=title,
                    audio_location=audio_location,
                    release=release,
                    plan=plan,
                    resolutions=resolutions,
                )
        except Exception as exc:
            message = classify_failure(exc)
            log.warning("Track %d (%r) failed: %s", index, descriptor.title, message)
            log.debug("Track %d failure detail", index, exc_info=exc)
            aggregator.failed(index, descriptor.title, message)
            return

        for resolution in resolutions:
            if not resolution.from_cache:
                self._audit_resolution(resolution)
        aggregator.succeeded(
            index,
            descriptor.title,
            track_id=track.id,
            release_id=release.id if release else None,
            release_title=release.display_name if release else None,
            release_created=release.was_created if release else None,
        )

    def _cached_release(self, descriptor: TrackDescriptor) -> CachedEntity | None:
        if not self.options.auto_create_release:
            return None
        album = clean(descriptor.album)
        if album is None:
            return None
        return self.cache.get(EntityType.RELEASE, album)

    def _create_track(
        self,
        store: EntityStore,
        descriptor: TrackDescriptor,
        *,
        title: str,
        audio_location: str | None,
        release: CachedEntity | None,
        plan: ArtistGroupPlan,
        resolutions: list[ArtistResolution | GroupResolution],
    ) -> Track:
        release_id = release.id if release else None

        artist_id = None
        if plan.artist_name is not None:
            artist = resolve_artist(
                plan.artist_name,
                store=store,
                cache=self.cache,
                release_id=release_id,
                created_by=self.actor_id,
            )
            resolutions.append(artist)
            artist_id = artist.id

        if plan.group_name is not None:
            group = resolve_group(
                plan.group_name,
                store=store,
                cache=self.cache,
                artist_id=artist_id if plan.link_artist_to_group else None,
            )
            resolutions.append(group)

        if audio_location is None:
            location, status = PENDING_AUDIO_LOCATION, AudioUploadStatus.PENDING
        else:
            location, status = audio_location, AudioUploadStatus.COMPLETED

        return store.create_track(
            Track(
                title=title,
                duration=descriptor.duration or 0,
                audio_location=location,
                position=descriptor.position or 0,
                cover_art=clean(descriptor.cover_art),
                content_hash=clean(descriptor.content_hash),
                upload_status=status,
                published_on=self.clock() if self.options.publish_immediately else None,
            ),
            release_id=release_id,
            artist_id=artist_id,
        )

    # Notifications ----------------------------------------------------------

    def _audit_resolution(self, resolution: Resolution) -> None:
        kind = resolution.entity_type.value
        metadata: dict[str, object] = {
            f"{kind}_id": str(resolution.id),
            f"{kind}_name": resolution.display_name,
            "searched_name": resolution.searched_name,
        }
        if isinstance(resolution, ArtistResolution):
            metadata["artist_release_created"] = resolution.release_linked
            metadata["track_artist_created"] = resolution.track_linked
            if resolution.slug is not None:
                metadata["slug"] = resolution.slug
        elif isinstance(resolution, GroupResolution):
            metadata["artist_group_created"] = resolution.artist_linked
        if resolution.created:
            metadata["source"] = "bulk-upload"
        action = "created" if resolution.created else "found"
        self._emit(
            AuditEvent(
                event=f"media.{kind}.{action}",
                actor_id=self.actor_id,
                metadata=metadata,
                timestamp=self.clock(),
            )
        )

    def _emit(self, event: AuditEvent) -> None:
        try:
            self.audit.record(event)
        except Exception:
            log.exception("Audit sink rejected %s", event.event)

    def _invalidate(self) -> None:
        try:
            self.invalidator.invalidate(INVALIDATED_PATHS)
        except Exception:
            log.exception("Cache invalidation failed")

    def _enter(self, state: BatchState) -> None:
        log.debug("Batch state %s -> %s", self.state, state)
        self.state = state


def pre_pass_failure_message(exc: BaseException) -> str:
    """Message of the error that aborted the pre-pass, unwrapped from resolver failures."""

    error = exc
    while isinstance(error, ResolutionError) and error.__cause__ is not None:
        error = error.__cause__
    return str(error).strip() or UNEXPECTED_ERROR_MESSAGE


def classify_failure(exc: BaseException) -> str:
    """Map a per-item exception to the message reported for that item."""

    for cause in iter_causes(exc):
        if isinstance(cause, ConflictError):
            return DUPLICATE_TITLE_MESSAGE
        text = str(cause).lower()
        if "unique" in text or "duplicate" in text:
            return DUPLICATE_TITLE_MESSAGE
    if isinstance(exc, ValidationError):
        return str(exc)
    return TRACK_FAILED_MESSAGE


def ingest_batch(
    descriptors: Sequence[TrackDescriptor],
    *,
    uow: UnitOfWork,
    options: IngestOptions | None = None,
    audit: AuditSink | None = None,
    invalidator: CacheInvalidator | None = None,
    actor_id: str | None = None,
) -> BatchResult:
    """Ingest ``descriptors`` using an open unit of work."""

    ingestion = BatchIngestion(
        uow=uow,
        options=options or IngestOptions(),
        audit=audit or NullAuditSink(),
        invalidator=invalidator or NullCacheInvalidator(),
        actor_id=actor_id,
    )
    return ingestion.run(descriptors)
