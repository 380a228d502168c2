"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import Final

from .errors import ConfigurationError

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


def optional_env_var(name: str) -> str | None:
    """Return a stripped environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_flag(name: str, *, default: bool) -> bool:
    """Parse a boolean environment variable."""

    value = optional_env_var(name)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value for {name}: {value!r}")
