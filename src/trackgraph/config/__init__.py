"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, optional_env_var
from .errors import ConfigurationError
from .ingest import IngestConfig, get_ingest_config
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "IngestConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "get_database_config",
    "get_ingest_config",
    "get_storage_config",
    "optional_env_var",
]
