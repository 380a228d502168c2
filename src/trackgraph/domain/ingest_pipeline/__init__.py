"""Bulk track ingestion.

Descriptors are validated as a batch, releases (and album-artist groups) are
resolved once per batch, then each descriptor is committed in its own
transaction as a track linked to its canonical artist, group and release. A
``ResolutionCache`` scoped to one run keeps repeated names from being looked
up or created twice.
"""

from __future__ import annotations

from .artist_resolver import ArtistResolution, resolve_artist
from .cache import CachedEntity, ResolutionCache
from .decision import ArtistGroupPlan, plan_artist_group
from .descriptors import IngestOptions, ReleaseMetadata, TrackDescriptor
from .errors import (
    ConflictError,
    InfrastructureError,
    IngestError,
    ResolutionError,
    ResolutionExhaustedError,
    ValidationError,
)
from .group_resolver import GroupResolution, resolve_group
from .names import ArtistNameParts, parse_artist_name
from .orchestrator import MAX_BATCH_SIZE, BatchIngestion, BatchState, ingest_batch
from .release_resolver import ReleaseResolution, resolve_release
from .results import BatchResult, ItemResult, ResultAggregator
from .slugs import generate_unique_slug, slugify

__all__ = [
    "MAX_BATCH_SIZE",
    "ArtistGroupPlan",
    "ArtistNameParts",
    "ArtistResolution",
    "BatchIngestion",
    "BatchResult",
    "BatchState",
    "CachedEntity",
    "ConflictError",
    "GroupResolution",
    "InfrastructureError",
    "IngestError",
    "IngestOptions",
    "ItemResult",
    "ReleaseMetadata",
    "ReleaseResolution",
    "ResolutionCache",
    "ResolutionError",
    "ResolutionExhaustedError",
    "ResultAggregator",
    "TrackDescriptor",
    "ValidationError",
    "generate_unique_slug",
    "ingest_batch",
    "parse_artist_name",
    "plan_artist_group",
    "resolve_artist",
    "resolve_group",
    "resolve_release",
    "slugify",
]
