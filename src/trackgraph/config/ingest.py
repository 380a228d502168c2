"""Batch ingestion settings."""

from __future__ import annotations

from dataclasses import dataclass

from trackgraph.domain.ingest_pipeline.descriptors import IngestOptions

from .env import env_flag, optional_env_var


@dataclass(frozen=True, slots=True)
class IngestConfig:
    """Defaults applied to batches started from the CLI or application layer."""

    actor_id: str | None = None
    auto_create_release: bool = True
    publish_immediately: bool = False
    defer_audio_upload: bool = False

    def to_options(self) -> IngestOptions:
        return IngestOptions(
            auto_create_release=self.auto_create_release,
            publish_immediately=self.publish_immediately,
            defer_audio_upload=self.defer_audio_upload,
        )


def get_ingest_config() -> IngestConfig:
    return IngestConfig(
        actor_id=optional_env_var("TRACKGRAPH_ACTOR_ID"),
        auto_create_release=env_flag("TRACKGRAPH_AUTO_CREATE_RELEASE", default=True),
        publish_immediately=env_flag("TRACKGRAPH_PUBLISH_IMMEDIATELY", default=False),
        defer_audio_upload=env_flag("TRACKGRAPH_DEFER_AUDIO_UPLOAD", default=False),
    )
