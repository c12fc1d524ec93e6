"""Configuration module for version-tracker."""

from version_tracker.config.settings import (
    DEFAULT_PROJECT_VERSION,
    LoggingConfig,
    TrackerSettings,
    load_tracker_config,
    parse_trackable,
    project_version_of,
    validate_tracker_config,
)

__all__ = [
    "DEFAULT_PROJECT_VERSION",
    "LoggingConfig",
    "TrackerSettings",
    "load_tracker_config",
    "parse_trackable",
    "project_version_of",
    "validate_tracker_config",
]
