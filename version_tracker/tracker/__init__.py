"""Recording of build environments into the build log.

Ties the pieces together: probe the configured trackables into a
BuildRecord, then merge it into the existing BuildLog for the project
version. Nothing here touches the filesystem; persisting the returned log is
left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from version_tracker.models import BuildLog, BuildRecord, TrackerConfig
from version_tracker.tracker.builder import (
    PlatformProvider,
    VersionEntryBuilder,
    build_record,
    current_platform,
)
from version_tracker.tracker.merger import contains_record, merge
from version_tracker.utils.logging import get_logger

logger = get_logger("tracker")


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of recording one build."""

    log: BuildLog
    record: BuildRecord
    added: bool


def update_build_log(
    config: TrackerConfig,
    project_version: str,
    log: Optional[BuildLog] = None,
    builder: Optional[VersionEntryBuilder] = None,
) -> UpdateResult:
    """
    Probe the current environment and file it under project_version.

    Args:
        config: Validated trackables to probe
        project_version: Version of the project that was just built
        log: Previously stored history (empty if None)
        builder: Record builder, defaults to probing the live machine

    Returns:
        UpdateResult with the new log, the probed record and whether it was new
    """
    log = log if log is not None else BuildLog()
    builder = builder or VersionEntryBuilder()

    record = builder.build(config.trackables)
    added = not contains_record(log, project_version, record)
    updated = merge(log, project_version, record)

    logger.info(
        "build_recorded" if added else "build_already_recorded",
        version=project_version,
        versions=len(updated),
    )
    return UpdateResult(log=updated, record=record, added=added)


__all__ = [
    "PlatformProvider",
    "UpdateResult",
    "VersionEntryBuilder",
    "build_record",
    "contains_record",
    "current_platform",
    "merge",
    "update_build_log",
]
