"""Public interface for the batch-file input adapter."""

from __future__ import annotations

from .schema import BatchPayload, TrackPayload
from .translator import DescriptorLoadError, load_descriptors, parse_descriptors, to_descriptor

__all__ = [
    "BatchPayload",
    "DescriptorLoadError",
    "TrackPayload",
    "load_descriptors",
    "parse_descriptors",
    "to_descriptor",
]
