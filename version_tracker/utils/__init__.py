"""Utility modules for version-tracker."""

from version_tracker.utils.ansi import strip_ansi
from version_tracker.utils.atomic import (
    AtomicWriteError,
    atomic_write_text,
)
from version_tracker.utils.logging import (
    configure_logging,
    get_logger,
    set_command,
    set_project_version,
)
from version_tracker.utils.result import (
    ConfigError,
    ConfigMalformed,
    Err,
    ExitCode,
    Ok,
    Result,
    StorageError,
)

__all__ = [
    # ANSI
    "strip_ansi",
    # Atomic writes
    "AtomicWriteError",
    "atomic_write_text",
    # Logging
    "configure_logging",
    "get_logger",
    "set_command",
    "set_project_version",
    # Results
    "ConfigError",
    "ConfigMalformed",
    "Err",
    "ExitCode",
    "Ok",
    "Result",
    "StorageError",
]
