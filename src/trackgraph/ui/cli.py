# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from trackgraph.adapters.descriptors import DescriptorLoadError, load_descriptors
from trackgraph.app import (
    complete_track_upload,
    find_duplicate_tracks,
    ingest_tracks,
    start_track_upload,
)
from trackgraph.config import ConfigurationError, configure_logging, get_ingest_config
from trackgraph.domain.model import AudioUploadStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from trackgraph.config import IngestConfig

log = logging.getLogger(__name__)

_UPLOAD_STATUSES = ("uploading", "completed", "failed")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ingest tracks into the trackgraph catalog")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Bulk-create tracks from a JSON batch file")
    ingest.add_argument("file", type=str, help="JSON array of track descriptors")
    ingest.add_argument(
        "--no-auto-release",
        action="store_true",
        help="Do not find or create releases from album metadata",
    )
    ingest.add_argument(
        "--publish",
        action="store_true",
        help="Mark created tracks as published now",
    )
    ingest.add_argument(
        "--defer-upload",
        action="store_true",
        help="Accept tracks without an audio location; their upload finishes later",
    )
    ingest.add_argument(
        "--actor-id",
        type=str,
        help="Id recorded on created artists and audit events (defaults to config)",
    )

    duplicates = subparsers.add_parser(
        "duplicates", help="List stored tracks matching audio content hashes"
    )
    duplicates.add_argument("hashes", nargs="+", help="Content hashes to look up")

    upload = subparsers.add_parser("upload-status", help="Update a deferred audio upload")
    upload.add_argument("track_id", type=str, help="Id of the track")
    upload.add_argument("--status", choices=_UPLOAD_STATUSES, required=True)
    upload.add_argument(
        "--audio-location",
        type=str,
        help="Final audio location (required when status is completed)",
    )
    upload.add_argument("--error", type=str, help="Failure detail recorded in the audit log")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _ingest_config(args: argparse.Namespace) -> IngestConfig:
    config = get_ingest_config()
    return replace(
        config,
        actor_id=args.actor_id or config.actor_id,
        auto_create_release=config.auto_create_release and not args.no_auto_release,
        publish_immediately=config.publish_immediately or args.publish,
        defer_audio_upload=config.defer_audio_upload or args.defer_upload,
    )


def _run_ingest(args: argparse.Namespace) -> int:
    config = _ingest_config(args)
    descriptors = load_descriptors(args.file)
    result = ingest_tracks(descriptors, config.to_options(), actor_id=config.actor_id)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.success else 1


def _run_duplicates(args: argparse.Namespace) -> int:
    duplicates = find_duplicate_tracks(args.hashes)
    payload = [
        {
            "contentHash": duplicate.content_hash,
            "trackId": str(duplicate.track_id),
            "title": duplicate.title,
            "audioLocation": duplicate.audio_location,
            "uploadStatus": duplicate.upload_status.value,
        }
        for duplicate in duplicates
    ]
    print(json.dumps(payload, indent=2))
    return 0


def _run_upload_status(args: argparse.Namespace) -> int:
    track_id = _parse_uuid(args.track_id)
    status = AudioUploadStatus(args.status)
    if status is AudioUploadStatus.UPLOADING:
        start_track_upload(track_id)
        return 0
    if status is AudioUploadStatus.COMPLETED and not args.audio_location:
        raise ValueError("--audio-location is required when status is completed")
    complete_track_upload(
        track_id,
        status=status,
        audio_location=args.audio_location or "",
        error=args.error,
        actor_id=get_ingest_config().actor_id,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        if parsed_args.command == "ingest":
            exit_code = _run_ingest(parsed_args)
        elif parsed_args.command == "duplicates":
            exit_code = _run_duplicates(parsed_args)
        elif parsed_args.command == "upload-status":
            exit_code = _run_upload_status(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (DescriptorLoadError, ConfigurationError, ValueError):
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)

    sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
