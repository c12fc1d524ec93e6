"""Project documents: discovery, bootstrap and build log persistence.

The tracker section lives in a project document::

    {
      "version": "1.2.0",
      "versionTracker": {
        "track": [{"name": "git", "versionCommands": [["git", "--version"]]}],
        "logFile": "build_versions.json",
        "successfulBuilds": {}
      }
    }

With ``logFile`` set, the build log is kept in that file (relative to the
document) and the document itself is never rewritten. Without it, the log is
stored inline under ``successfulBuilds``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from version_tracker.config.settings import DEFAULT_PROJECT_VERSION, project_version_of
from version_tracker.models import BuildLog
from version_tracker.storage.documents import load_document, save_document
from version_tracker.utils.logging import get_logger
from version_tracker.utils.result import Err, Ok, Result, StorageError

logger = get_logger("storage.project")

SECTION_KEY = "versionTracker"
BUILDS_KEY = "successfulBuilds"
LOG_FILE_KEY = "logFile"

# Searched for in this order in every directory while walking up
PROJECT_FILE_NAMES = (
    "version_tracker.json",
    "version_tracker.yaml",
    "version_tracker.yml",
    "package.json",
)
DEFAULT_PROJECT_FILE = "version_tracker.json"

SKELETON_TRACKABLES = [
    {
        "name": "python",
        "versionCommands": [
            ["python3", "--version"],
            ["python", "--version"],
            ["py", "--version"],
        ],
    },
    {
        "name": "pip",
        "versionCommands": [
            ["pip3", "--version"],
            ["pip", "--version"],
            ["python3", "-m", "pip", "--version"],
        ],
    },
]


def skeleton_document() -> dict[str, Any]:
    """A minimal project document tracking the Python toolchain."""
    return {
        "name": "",
        "version": DEFAULT_PROJECT_VERSION,
        "description": "",
        SECTION_KEY: {
            BUILDS_KEY: {},
            "track": copy.deepcopy(SKELETON_TRACKABLES),
        },
    }


def walk_up(start: Path) -> list[Path]:
    """start and each of its ancestors, nearest first."""
    start = Path(start).resolve()
    return [start, *start.parents]


def find_project_file(start: Path) -> Optional[Path]:
    """Nearest project document at or above start, if any."""
    for folder in walk_up(start):
        for name in PROJECT_FILE_NAMES:
            candidate = folder / name
            if candidate.is_file():
                return candidate
    return None


def bootstrap_project(path: Path, indent: int = 2) -> Path:
    """
    Write a skeleton project document so tracking can start.

    Raises:
        AtomicWriteError: If the document cannot be written
    """
    path = Path(path)
    save_document(path, skeleton_document(), indent)
    logger.warning("project_file_created", path=str(path))
    return path


def locate_project(
    explicit: Optional[Path],
    cwd: Path,
    create: bool = False,
    indent: int = 2,
) -> Result[Path, StorageError]:
    """
    Resolve the project document to use.

    An explicit path is used as given. Otherwise the directory tree is
    searched upwards from cwd. When nothing is found and create is set, a
    skeleton document is written into cwd (or at the explicit path).
    """
    if explicit is not None:
        explicit = Path(explicit)
        if explicit.is_file():
            return Ok(explicit)
        if create:
            return Ok(bootstrap_project(explicit, indent))
        return Err(StorageError(
            operation="locate",
            path=str(explicit),
            message="Project document does not exist",
        ))

    found = find_project_file(cwd)
    if found is not None:
        logger.debug("project_file_found", path=str(found))
        return Ok(found)

    if create:
        return Ok(bootstrap_project(Path(cwd) / DEFAULT_PROJECT_FILE, indent))

    return Err(StorageError(
        operation="locate",
        path=str(cwd),
        message=f"No project document ({', '.join(PROJECT_FILE_NAMES)}) found",
    ))


@dataclass
class ProjectDocument:
    """A loaded project document and where its build log lives."""

    path: Path
    data: dict[str, Any]
    log_override: Optional[Path] = None

    @classmethod
    def load(cls, path: Path, log_override: Optional[Path] = None) -> Result["ProjectDocument", StorageError]:
        return load_document(path).map(
            lambda data: cls(path=Path(path), data=data, log_override=log_override)
        )

    @property
    def section(self) -> dict[str, Any]:
        section = self.data.get(SECTION_KEY)
        return section if isinstance(section, dict) else {}

    @property
    def project_version(self) -> str:
        return project_version_of(self.data)

    @property
    def raw_track(self) -> Any:
        return self.section.get("track")

    @property
    def raw_settings(self) -> Any:
        return self.section.get("settings")

    @property
    def log_path(self) -> Optional[Path]:
        """Separate log file, or None when the log is stored inline."""
        if self.log_override is not None:
            return Path(self.log_override)
        log_file = self.section.get(LOG_FILE_KEY)
        if isinstance(log_file, str) and log_file:
            return self.path.parent / log_file
        return None

    def load_build_log(self) -> Result[BuildLog, StorageError]:
        """Read the stored build log; a missing separate log file is an empty log."""
        log_path = self.log_path

        if log_path is None:
            source, raw = self.path, self.section.get(BUILDS_KEY)
        elif not log_path.exists():
            logger.info("log_file_missing", path=str(log_path))
            return Ok(BuildLog())
        else:
            loaded = load_document(log_path)
            if loaded.is_err():
                return loaded
            source, raw = log_path, loaded.unwrap()

        try:
            return Ok(BuildLog.from_dict(raw))
        except ValueError as e:
            return Err(StorageError(
                operation="parse",
                path=str(source),
                message="Stored build log is malformed",
                cause=e,
            ))

    def save_build_log(self, log: BuildLog, indent: int = 2) -> Path:
        """
        Persist the build log and return the file written.

        Raises:
            AtomicWriteError: If the file cannot be written
        """
        log_path = self.log_path
        if log_path is not None:
            save_document(log_path, log.to_dict(), indent)
            return log_path

        data = dict(self.data)
        section = dict(self.section)
        section[BUILDS_KEY] = log.to_dict()
        data[SECTION_KEY] = section
        save_document(self.path, data, indent)
        self.data = data
        return self.path
