"""Merging build records into the build log."""

from __future__ import annotations

from version_tracker.models import BuildLog, BuildRecord
from version_tracker.utils.logging import get_logger

logger = get_logger("tracker.merger")


def contains_record(log: BuildLog, project_version: str, record: BuildRecord) -> bool:
    """Check whether a structurally identical record is already logged for a version."""
    canonical = record.canonical()
    return any(
        existing.canonical() == canonical
        for existing in log.bucket(project_version)
    )


def merge(log: BuildLog, project_version: str, record: BuildRecord) -> BuildLog:
    """
    Return a new log with record filed under project_version.

    A record already present in the version's bucket is not added again.
    Either way the version becomes the first key of the result, so the most
    recently built version always leads. Merging the same record twice gives
    the same log as merging it once. The input log is left untouched.

    Args:
        log: Existing build history
        project_version: Version the record belongs to
        record: Freshly built record

    Returns:
        Updated copy of the log
    """
    updated = log.copy()

    if contains_record(log, project_version, record):
        logger.debug("record_duplicate", version=project_version)
        if project_version in updated:
            updated.move_to_front(project_version)
        return updated

    updated.set_bucket(project_version, [record, *log.bucket(project_version)])
    updated.move_to_front(project_version)

    logger.debug(
        "record_merged",
        version=project_version,
        bucket_size=len(updated.bucket(project_version)),
    )
    return updated
