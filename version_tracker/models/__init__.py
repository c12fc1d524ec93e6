"""Data models for version-tracker."""

from version_tracker.models.records import (
    BuildLog,
    BuildRecord,
    Trackable,
    TrackerConfig,
)

__all__ = [
    "BuildLog",
    "BuildRecord",
    "Trackable",
    "TrackerConfig",
]
