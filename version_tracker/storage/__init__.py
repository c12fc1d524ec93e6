"""Persistence of project documents and build logs."""

from version_tracker.storage.documents import (
    dump_document,
    load_document,
    parse_document,
    save_document,
)
from version_tracker.storage.project import (
    DEFAULT_PROJECT_FILE,
    PROJECT_FILE_NAMES,
    ProjectDocument,
    bootstrap_project,
    find_project_file,
    locate_project,
    skeleton_document,
)

__all__ = [
    "DEFAULT_PROJECT_FILE",
    "PROJECT_FILE_NAMES",
    "ProjectDocument",
    "bootstrap_project",
    "dump_document",
    "find_project_file",
    "load_document",
    "locate_project",
    "parse_document",
    "save_document",
    "skeleton_document",
]
