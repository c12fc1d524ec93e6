"""Tracker configuration: trackable validation and runtime settings.

The raw ``versionTracker`` section of a project document is validated once
here and turned into typed objects. Nothing downstream re-checks its shape.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from typing import Any, Optional

from version_tracker.models import Trackable, TrackerConfig
from version_tracker.utils.logging import LEVEL_MAP, get_logger
from version_tracker.utils.result import (
    ConfigError,
    ConfigMalformed,
    Err,
    Ok,
    Result,
    first_err,
)

logger = get_logger("config.settings")

DEFAULT_PROJECT_VERSION = "0.0.0"
DEFAULT_INDENT = 2
DEFAULT_TIMEOUT = 10.0
LOG_FORMATS = ("json", "text")


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "text"


@dataclass
class TrackerSettings:
    """
    Runtime settings read from ``versionTracker.settings``.

    Command line flags override these values.
    """

    probe_timeout: Optional[float] = DEFAULT_TIMEOUT
    indent: int = DEFAULT_INDENT
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Result["TrackerSettings", ConfigError]:
        """
        Create settings from a dictionary.

        Args:
            data: The ``settings`` object, or None for defaults

        Returns:
            Result with validated settings or error
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return Err(ConfigError(
                field="settings",
                message=f"Must be an object, got {type(data).__name__}",
            ))

        logging_data = data.get("logging") or {}
        if not isinstance(logging_data, dict):
            return Err(ConfigError(
                field="settings.logging",
                message=f"Must be an object, got {type(logging_data).__name__}",
            ))

        timeout = data.get("probeTimeout", DEFAULT_TIMEOUT)
        indent = data.get("indent", DEFAULT_INDENT)

        try:
            settings = cls(
                probe_timeout=float(timeout) if timeout is not None else None,
                indent=int(indent),
                logging=LoggingConfig(
                    level=str(logging_data.get("level", "info")),
                    format=str(logging_data.get("format", "text")),
                ),
            )
        except (TypeError, ValueError) as e:
            return Err(ConfigError(
                field="settings",
                message=f"Failed to parse settings: {e}",
            ))

        return settings.validate().map(lambda _: settings)

    def validate(self) -> Result[None, ConfigError]:
        """
        Validate settings values.

        Returns:
            Result indicating success or validation error
        """
        if self.probe_timeout is not None and self.probe_timeout <= 0:
            return Err(ConfigError(
                field="settings.probeTimeout",
                message=f"Must be positive or null, got {self.probe_timeout}",
            ))

        if not 0 <= self.indent <= 8:
            return Err(ConfigError(
                field="settings.indent",
                message=f"Must be between 0 and 8, got {self.indent}",
            ))

        if self.logging.level.lower() not in LEVEL_MAP:
            return Err(ConfigError(
                field="settings.logging.level",
                message=f"Unknown level '{self.logging.level}'",
            ))

        if self.logging.format not in LOG_FORMATS:
            return Err(ConfigError(
                field="settings.logging.format",
                message=f"Must be one of {', '.join(LOG_FORMATS)}, got '{self.logging.format}'",
            ))

        return Ok(None)

    def to_dict(self) -> dict:
        return {
            "probeTimeout": self.probe_timeout,
            "indent": self.indent,
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
        }


def _parse_commands(raw: dict, field_prefix: str) -> Result[list[tuple[str, ...]], ConfigError]:
    """Collect candidate commands from versionCommands and the legacy versionCommand."""
    commands: list[tuple[str, ...]] = []

    version_commands = raw.get("versionCommands")
    if version_commands is not None:
        if not isinstance(version_commands, list):
            return Err(ConfigError(
                field=f"{field_prefix}.versionCommands",
                message="Must be a list of argument lists",
            ))
        for position, command in enumerate(version_commands):
            if not isinstance(command, list) or not command:
                return Err(ConfigError(
                    field=f"{field_prefix}.versionCommands[{position}]",
                    message="Must be a non-empty list of arguments",
                ))
            if not all(isinstance(arg, str) for arg in command):
                return Err(ConfigError(
                    field=f"{field_prefix}.versionCommands[{position}]",
                    message="Arguments must be strings",
                ))
            commands.append(tuple(command))

    version_command = raw.get("versionCommand")
    if version_command is not None:
        if not isinstance(version_command, str):
            return Err(ConfigError(
                field=f"{field_prefix}.versionCommand",
                message="Must be a command line string",
            ))
        try:
            args = shlex.split(version_command)
        except ValueError as e:
            return Err(ConfigError(
                field=f"{field_prefix}.versionCommand",
                message=f"Cannot split command line: {e}",
            ))
        if not args:
            return Err(ConfigError(
                field=f"{field_prefix}.versionCommand",
                message="Must not be empty",
            ))
        commands.append(tuple(args))

    if not commands:
        return Err(ConfigError(
            field=f"{field_prefix}.versionCommands",
            message="At least one version command is required",
        ))

    return Ok(commands)


def parse_trackable(raw: Any, position: int) -> Result[Trackable, ConfigError]:
    """
    Validate one raw trackable entry.

    Args:
        raw: Entry from the ``track`` list
        position: Index in the list, used in error fields

    Returns:
        Result with the Trackable or the first problem found
    """
    field_prefix = f"track[{position}]"

    if not isinstance(raw, dict):
        return Err(ConfigError(
            field=field_prefix,
            message=f"Must be an object, got {type(raw).__name__}",
        ))

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return Err(ConfigError(
            field=f"{field_prefix}.name",
            message="Must be a non-empty string",
        ))

    commands = _parse_commands(raw, field_prefix)
    if commands.is_err():
        return commands

    try:
        return Ok(Trackable(name=name, commands=tuple(commands.unwrap())))
    except ConfigMalformed as e:
        return Err(e.error)


def validate_tracker_config(raw: Any) -> Result[TrackerConfig, ConfigError]:
    """
    Validate the raw ``track`` list into a TrackerConfig.

    A missing list (None) is an empty configuration. Anything else that is
    not a list of well-formed trackables with unique names is an error.
    """
    if raw is None:
        return Ok(TrackerConfig())

    if not isinstance(raw, list):
        return Err(ConfigError(
            field="track",
            message=f"Must be a list, got {type(raw).__name__}",
        ))

    parsed = first_err([parse_trackable(entry, i) for i, entry in enumerate(raw)])
    if parsed.is_err():
        return parsed

    trackables = parsed.unwrap()
    seen: set[str] = set()
    for position, trackable in enumerate(trackables):
        if trackable.name in seen:
            return Err(ConfigError(
                field=f"track[{position}].name",
                message=f"Duplicate trackable name '{trackable.name}'",
            ))
        seen.add(trackable.name)

    return Ok(TrackerConfig(trackables=tuple(trackables)))


def load_tracker_config(raw: Any) -> TrackerConfig:
    """
    Validate the raw ``track`` list, raising on malformed input.

    Raises:
        ConfigMalformed: If any trackable is malformed
    """
    result = validate_tracker_config(raw)
    if result.is_err():
        raise ConfigMalformed(result.unwrap_err())
    return result.unwrap()


def project_version_of(document: dict[str, Any]) -> str:
    """
    The document's ``version``, defaulting to 0.0.0 when absent or unusable.

    YAML reads an unquoted ``version: 1.2`` as a float. Such values are not
    coerced, since the text may already be lost (``1.10`` loads as 1.1), so
    they fall back to the default with a warning.
    """
    version = document.get("version")
    if isinstance(version, str) and version:
        return version
    if version is not None:
        logger.warning(
            "project_version_invalid",
            value=repr(version),
            type=type(version).__name__,
            default=DEFAULT_PROJECT_VERSION,
        )
    return DEFAULT_PROJECT_VERSION
