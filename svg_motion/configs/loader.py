"""Settings loader.

Loads a stored settings file (YAML) of any known schema version, validates
it against that version's schema, and upgrades it to the latest version.
Also writes settings back out for import/export between machines.

Usage::

    from svg_motion.configs.loader import load_settings
    settings = load_settings()                        # shipped defaults
    settings = load_settings("/custom/plotter.yaml")  # explicit path
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from svg_motion.configs.settings import (
    LATEST_VERSION,
    Settings,
    settings_from_dict,
    try_upgrade,
)
from svg_motion.utils.fs import atomic_yaml_dump, load_yaml

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "default_settings.yaml"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_settings(data: dict[str, Any]) -> Settings:
    """Validate a raw settings mapping and upgrade it to the latest version.

    Raises
    ------
    ConfigError
        If the mapping is not a dict or fails its schema.
    UnsupportedVersion
        If its schema version is unknown or cannot be upgraded.
    """
    if not isinstance(data, dict):
        raise ConfigError(
            f"Settings must be a mapping, got {type(data).__name__}"
        )
    try:
        stored = settings_from_dict(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc
    return try_upgrade(stored, LATEST_VERSION)


def load_settings(path: str | Path | None = None) -> Settings:
    """Load, validate and upgrade settings from YAML.

    Parameters
    ----------
    path : str | Path | None
        Settings file.  ``None`` loads the defaults shipped alongside this
        module.

    Returns
    -------
    Settings
        Latest-version, frozen settings.

    Raises
    ------
    ConfigError
        If the file is empty or any field fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = DEFAULT_SETTINGS_PATH if path is None else Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    logger.info("Loading settings from %s", path)
    data = load_yaml(path)
    if data is None:
        raise ConfigError(f"Empty settings file: {path}")

    settings = parse_settings(data)
    logger.info("Settings loaded successfully")
    return settings


def save_settings(settings: Settings, path: str | Path) -> None:
    """Write *settings* as YAML (atomic replace)."""
    atomic_yaml_dump(settings.model_dump(mode="json"), path)
    logger.info("Saved settings v%d to %s", settings.schema_version, path)
