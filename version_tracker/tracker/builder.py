"""Assembly of build records from probed executables."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, Optional

from version_tracker.models import BuildRecord, Trackable
from version_tracker.probe import ProbeResult, ProbeRunner
from version_tracker.utils.logging import get_logger

logger = get_logger("tracker.builder")

PlatformProvider = Callable[[], str]


def current_platform() -> str:
    """Platform identifier of the running interpreter (linux, darwin, win32)."""
    return sys.platform


def build_record(
    platform_id: str,
    trackables: Iterable[Trackable],
    runner: ProbeRunner,
) -> BuildRecord:
    """Probe every trackable in order and return the resulting record."""
    executables: dict[str, Optional[str]] = {}
    for trackable in trackables:
        executables[trackable.name] = runner.probe(trackable)
    return BuildRecord(platform=platform_id, executables=executables)


class VersionEntryBuilder:
    """Builds a BuildRecord for the machine the tracker is running on."""

    def __init__(
        self,
        runner: Optional[ProbeRunner] = None,
        platform_provider: PlatformProvider = current_platform,
    ) -> None:
        self.runner = runner or ProbeRunner()
        self.platform_provider = platform_provider

    def build(self, trackables: Iterable[Trackable]) -> BuildRecord:
        record, _ = self.inspect(trackables)
        return record

    def inspect(self, trackables: Iterable[Trackable]) -> tuple[BuildRecord, list[ProbeResult]]:
        """Build the record and also return every attempt made per trackable."""
        results = [self.runner.run(trackable) for trackable in trackables]
        record = BuildRecord(
            platform=self.platform_provider(),
            executables={result.name: result.version for result in results},
        )

        found = sum(1 for version in record.executables.values() if version is not None)
        logger.info(
            "record_built",
            platform=record.platform,
            trackables=len(results),
            found=found,
        )
        return record, results
