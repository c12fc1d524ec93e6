"""Data models for trackables, build records and the build log."""

from __future__ import annotations

import json
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from version_tracker.utils.result import ConfigError, ConfigMalformed


@dataclass(frozen=True)
class Trackable:
    """
    An executable and its fallback version-probe commands.

    Attributes:
        name: Key under which the probed version is recorded
        commands: Candidate argument vectors, tried in order
    """

    name: str
    commands: tuple[tuple[str, ...], ...]

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigMalformed(ConfigError(
                field="name",
                message="Trackable name must be a non-empty string",
            ))
        field_name = f"{self.name}.versionCommands"
        if isinstance(self.commands, (str, bytes)) or not self.commands:
            raise ConfigMalformed(ConfigError(
                field=field_name,
                message="At least one version command is required",
            ))

        commands = []
        for command in self.commands:
            # A bare string would otherwise be split into characters
            if isinstance(command, (str, bytes)):
                raise ConfigMalformed(ConfigError(
                    field=field_name,
                    message=f"Command {command!r} must be a list of arguments",
                ))
            command = tuple(command)
            if not command:
                raise ConfigMalformed(ConfigError(
                    field=field_name,
                    message="Version commands must not be empty",
                ))
            if not all(isinstance(arg, str) for arg in command):
                raise ConfigMalformed(ConfigError(
                    field=field_name,
                    message=f"Arguments of {list(command)!r} must be strings",
                ))
            commands.append(command)

        object.__setattr__(self, "commands", tuple(commands))


@dataclass(frozen=True)
class TrackerConfig:
    """Validated, read-only list of trackables."""

    trackables: tuple[Trackable, ...] = ()

    def names(self) -> list[str]:
        return [trackable.name for trackable in self.trackables]


@dataclass(frozen=True)
class BuildRecord:
    """
    One snapshot of the platform and the probed executable versions.

    A missing executable is recorded as None rather than omitted so that
    records produced from the same configuration always have the same keys.
    """

    platform: str
    executables: dict[str, Optional[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "executables", dict(self.executables))

    def canonical(self) -> str:
        """Canonical serialization used for structural equality."""
        return json.dumps(
            self.to_dict(),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "executables": dict(self.executables),
        }

    @classmethod
    def from_dict(cls, data: dict) -> BuildRecord:
        if not isinstance(data, dict):
            raise ValueError(f"Build record must be an object, got {type(data).__name__}")
        platform = data.get("platform")
        if not isinstance(platform, str):
            raise ValueError("Build record is missing a string 'platform'")
        executables = data.get("executables", {})
        if not isinstance(executables, dict):
            raise ValueError("Build record 'executables' must be an object")
        for name, version in executables.items():
            if version is not None and not isinstance(version, str):
                raise ValueError(f"Version of '{name}' must be a string or null")
        return cls(platform=platform, executables=executables)


class BuildLog:
    """
    Build history grouped by project version.

    Versions are kept most-recently-merged first. The order is maintained
    explicitly with move_to_front(), never by sorting version strings.
    Each bucket lists its records newest first.
    """

    def __init__(self, entries: Optional[Any] = None) -> None:
        self._entries: OrderedDict[str, list[BuildRecord]] = OrderedDict()
        if entries:
            for version, records in dict(entries).items():
                self._entries[version] = list(records)

    def __contains__(self, version: object) -> bool:
        return version in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BuildLog):
            return NotImplemented
        return list(self.items()) == list(other.items())

    def __repr__(self) -> str:
        return f"BuildLog({list(self._entries)!r})"

    def versions(self) -> list[str]:
        """Project versions, most recently touched first."""
        return list(self._entries)

    def items(self) -> Iterator[tuple[str, tuple[BuildRecord, ...]]]:
        for version, records in self._entries.items():
            yield version, tuple(records)

    def bucket(self, version: str) -> tuple[BuildRecord, ...]:
        """Records for a version, newest first; empty if the version is unknown."""
        return tuple(self._entries.get(version, ()))

    def set_bucket(self, version: str, records: list[BuildRecord]) -> None:
        self._entries[version] = list(records)

    def move_to_front(self, version: str) -> None:
        """Make version the first key, keeping the relative order of the others."""
        self._entries.move_to_end(version, last=False)

    def copy(self) -> BuildLog:
        return BuildLog(self._entries)

    def record_count(self) -> int:
        return sum(len(records) for records in self._entries.values())

    def to_dict(self) -> dict[str, list[dict]]:
        return {
            version: [record.to_dict() for record in records]
            for version, records in self._entries.items()
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> BuildLog:
        """
        Build a log from its serialized form, preserving key order.

        Raises:
            ValueError: If the data does not have the build log shape
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Build log must be an object, got {type(data).__name__}")

        log = cls()
        for version, records in data.items():
            if not isinstance(records, list):
                raise ValueError(f"Builds for version '{version}' must be a list")
            log.set_bucket(str(version), [BuildRecord.from_dict(r) for r in records])
        return log
