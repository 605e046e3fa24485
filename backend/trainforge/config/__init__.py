"""Configuration package."""

from trainforge.config.processing import (
    ProcessingSettings,
    get_processing_settings,
    processing_settings,
)
from trainforge.config.settings import (
    Settings,
    get_settings,
    load_yaml_config,
    settings,
    yaml_config,
)

__all__ = [
    # Processing settings
    "processing_settings",
    "ProcessingSettings",
    "get_processing_settings",
    # Application settings
    "Settings",
    "get_settings",
    "load_yaml_config",
    "settings",
    "yaml_config",
]
