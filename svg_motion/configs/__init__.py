"""Versioned settings model, loading and upgrades."""

from svg_motion.configs.loader import (
    ConfigError,
    load_settings,
    parse_settings,
    save_settings,
)
from svg_motion.configs.settings import (
    LATEST_VERSION,
    ConversionConfig,
    MachineConfig,
    PostprocessConfig,
    Settings,
    SettingsV1,
    SettingsV2,
    UnsupportedVersion,
    VersionError,
    settings_from_dict,
    try_upgrade,
)

__all__ = [
    "LATEST_VERSION",
    "ConfigError",
    "ConversionConfig",
    "MachineConfig",
    "PostprocessConfig",
    "Settings",
    "SettingsV1",
    "SettingsV2",
    "UnsupportedVersion",
    "VersionError",
    "load_settings",
    "parse_settings",
    "save_settings",
    "settings_from_dict",
    "try_upgrade",
]
