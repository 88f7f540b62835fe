"""JSON Schema validation and JSON persistence helpers."""

from __future__ import annotations

import json
from functools import lru_cache
from typing import TYPE_CHECKING

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from apidoc_common.errors import SchemaValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

__all__ = ["load_schema", "validate_payload", "write_json"]


@lru_cache(maxsize=32)
def load_schema(schema_path: Path) -> Draft202012Validator:
    """Load and cache a Draft 2020-12 validator for ``schema_path``.

    Parameters
    ----------
    schema_path : Path
        Path to a JSON Schema document.

    Returns
    -------
    Draft202012Validator
        Validator for the schema.

    Raises
    ------
    FileNotFoundError
        If the schema file does not exist.
    SchemaValidationError
        If the schema document itself is invalid.
    """
    if not schema_path.exists():
        msg = f"Schema file not found: {schema_path}"
        raise FileNotFoundError(msg)
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as exc:
        msg = f"Invalid schema {schema_path.name}: {exc.message}"
        raise SchemaValidationError(msg, cause=exc) from exc
    return Draft202012Validator(schema)


def validate_payload(payload: Mapping[str, object], schema_path: Path) -> None:
    """Validate ``payload`` against the schema at ``schema_path``.

    Parameters
    ----------
    payload : Mapping[str, object]
        JSON-compatible payload.
    schema_path : Path
        Path to a JSON Schema document.

    Raises
    ------
    SchemaValidationError
        If the payload does not conform.
    """
    validator = load_schema(schema_path)
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.absolute_path))
    if errors:
        first = errors[0]
        location = "/".join(str(part) for part in first.absolute_path) or "<root>"
        msg = f"Schema validation failed at {location}: {first.message}"
        raise SchemaValidationError(
            msg,
            context={"schema": schema_path.name, "error_count": len(errors)},
        )


def write_json(destination: Path, payload: Mapping[str, object]) -> int:
    """Write ``payload`` as pretty-printed UTF-8 JSON and return the byte count."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    data = text.encode("utf-8")
    destination.write_bytes(data)
    return len(data)
