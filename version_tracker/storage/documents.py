"""Reading and writing project documents as JSON or YAML."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from version_tracker.utils.atomic import atomic_write_text
from version_tracker.utils.logging import get_logger
from version_tracker.utils.result import Err, Ok, Result, StorageError

logger = get_logger("storage.documents")

YAML_SUFFIXES = (".yaml", ".yml")


def is_yaml(path: Path) -> bool:
    return Path(path).suffix.lower() in YAML_SUFFIXES


def parse_document(text: str, path: Path) -> Result[dict[str, Any], StorageError]:
    """Parse document text, picking the format from the file suffix."""
    try:
        if is_yaml(path):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        return Err(StorageError(
            operation="parse",
            path=str(path),
            message="Document is not well-formed",
            cause=e,
        ))

    if data is None:
        data = {}
    if not isinstance(data, dict):
        return Err(StorageError(
            operation="parse",
            path=str(path),
            message=f"Top level must be an object, got {type(data).__name__}",
        ))
    return Ok(data)


def load_document(path: Path) -> Result[dict[str, Any], StorageError]:
    """
    Load a JSON or YAML document.

    Args:
        path: Document path

    Returns:
        Result with the top-level mapping or error
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(StorageError(
            operation="read",
            path=str(path),
            message="Cannot read document",
            cause=e,
        ))

    result = parse_document(text, path)
    if result.is_ok():
        logger.debug("document_loaded", path=str(path))
    return result


def dump_document(data: dict[str, Any], path: Path, indent: int = 2) -> str:
    """Serialize a document in the format matching the path suffix, keeping key order."""
    if is_yaml(path):
        return yaml.safe_dump(
            data,
            sort_keys=False,
            allow_unicode=True,
            indent=max(indent, 2),
            default_flow_style=False,
        )
    return json.dumps(data, indent=indent or None, ensure_ascii=False) + "\n"


def save_document(path: Path, data: dict[str, Any], indent: int = 2) -> None:
    """
    Atomically write a document.

    Raises:
        AtomicWriteError: If the document cannot be written
    """
    path = Path(path)
    atomic_write_text(path, dump_document(data, path, indent))
    logger.info("document_written", path=str(path))
