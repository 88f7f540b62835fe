"""Read extractor output and write the navigation and search documents."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from apidoc_common.errors import InputLoadError, PageWriteError
from apidoc_common.logging import get_logger
from apidoc_common.serialization import write_json
from apidoc_data.documents import (
    NAVIGATION_SCHEMA,
    SEARCH_INDEX_SCHEMA,
    dump_document,
    navigation_document_from_nodes,
    search_index_document_from_records,
    validate_document,
)

if TYPE_CHECKING:
    from apidoc_data.models import ApiData

__all__ = [
    "NAVIGATION_FILENAME",
    "SEARCH_FILENAME",
    "ArtifactPaths",
    "load_records",
    "write_artifacts",
]

LOGGER = get_logger(__name__)

NAVIGATION_FILENAME: Final[str] = "navigation.json"
SEARCH_FILENAME: Final[str] = "search-keywords.json"


@dataclass(frozen=True, slots=True)
class ArtifactPaths:
    """Files written by :func:`write_artifacts`."""

    navigation: Path
    search_keywords: Path


def load_records(path: Path) -> list[dict[str, Any]]:
    """Read a JSON array of extractor records from ``path``.

    Parameters
    ----------
    path : Path
        documentation.js style JSON output.

    Returns
    -------
    list[dict[str, Any]]
        Raw records in file order.

    Raises
    ------
    InputLoadError
        If the file cannot be read, is not JSON, or is not an array of objects.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read input file {path}"
        raise InputLoadError(msg, status=400, cause=exc, context={"path": str(path)}) from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Input file {path} is not valid JSON: {exc.msg} (line {exc.lineno})"
        raise InputLoadError(msg, status=400, cause=exc, context={"path": str(path)}) from exc
    if not isinstance(data, list):
        msg = f"Input file {path} must contain a JSON array, got {type(data).__name__}"
        raise InputLoadError(msg, status=400, context={"path": str(path)})
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            msg = f"Input entry {index} must be an object, got {type(entry).__name__}"
            raise InputLoadError(msg, status=400, context={"path": str(path), "index": index})
    LOGGER.debug(
        "Loaded extractor records",
        extra={"operation": "load", "path": str(path), "records": len(data)},
    )
    return data


def _write_document(destination: Path, payload: dict[str, Any]) -> None:
    try:
        size = write_json(destination, payload)
    except OSError as exc:
        msg = f"Failed to write {destination}"
        raise PageWriteError(msg, cause=exc, context={"path": str(destination)}) from exc
    LOGGER.debug(
        "Wrote artifact",
        extra={"operation": "write_artifact", "path": str(destination), "size_bytes": size},
    )


def write_artifacts(result: ApiData, out_dir: Path, *, validate: bool = True) -> ArtifactPaths:
    """Write ``navigation.json`` and ``search-keywords.json`` under ``out_dir``.

    Parameters
    ----------
    result : ApiData
        Output of :func:`apidoc_data.factory.create_data`.
    out_dir : Path
        Destination directory, created if missing.
    validate : bool, optional
        Validate both payloads against the bundled schemas first. Defaults to True.

    Returns
    -------
    ArtifactPaths
        Paths of the written files.

    Raises
    ------
    SchemaValidationError
        If validation is enabled and a payload does not conform.
    PageWriteError
        If a file cannot be written.
    """
    navigation = dump_document(navigation_document_from_nodes(result.navigation))
    search = dump_document(search_index_document_from_records(result.search_keywords))
    if validate:
        validate_document(navigation, NAVIGATION_SCHEMA)
        validate_document(search, SEARCH_INDEX_SCHEMA)

    paths = ArtifactPaths(
        navigation=out_dir / NAVIGATION_FILENAME,
        search_keywords=out_dir / SEARCH_FILENAME,
    )
    _write_document(paths.navigation, navigation)
    _write_document(paths.search_keywords, search)
    return paths
