"""RFC 9457 Problem Details helpers.

Command-line failures are reported as Problem Details payloads so that the
build output stays machine readable. Payloads are validated against the
bundled ``schema/problem_details.json`` before they are returned.

Examples
--------
>>> problem = build_problem_details(
...     problem_type="https://apidoc.dev/problems/page-write-failed",
...     title="PageWriteError",
...     status=500,
...     detail="Permission denied",
...     instance="urn:apidoc:page:Widget",
... )
>>> problem["status"]
500
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cache
from pathlib import Path
from typing import TYPE_CHECKING, TypedDict, cast

from jsonschema import Draft202012Validator

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "JsonValue",
    "ProblemDetails",
    "ProblemDetailsParams",
    "ProblemDetailsValidationError",
    "build_problem_details",
    "render_problem",
    "validate_problem_details",
]

type JsonValue = (
    str | int | float | bool | None | list[JsonValue] | dict[str, JsonValue]
)

PROBLEM_DETAILS_SCHEMA_PATH = Path(__file__).resolve().parent / "schema" / "problem_details.json"


class ProblemDetails(TypedDict, total=False):
    """TypedDict for RFC 9457 Problem Details payloads."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str
    extensions: dict[str, JsonValue]


@dataclass(slots=True, frozen=True)
class ProblemDetailsParams:
    """Parameters used to construct a Problem Details payload."""

    problem_type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str | None = None
    extensions: Mapping[str, JsonValue] | None = None


class ProblemDetailsValidationError(ValueError):
    """Raised when a Problem Details payload does not match the schema."""


@cache
def _validator() -> Draft202012Validator:
    with PROBLEM_DETAILS_SCHEMA_PATH.open(encoding="utf-8") as handle:
        schema = json.load(handle)
    return Draft202012Validator(schema)


def validate_problem_details(payload: Mapping[str, object]) -> None:
    """Validate ``payload`` against the Problem Details schema.

    Parameters
    ----------
    payload : Mapping[str, object]
        Candidate payload.

    Raises
    ------
    ProblemDetailsValidationError
        If the payload violates the schema.
    """
    errors = sorted(_validator().iter_errors(payload), key=lambda err: list(err.path))
    if errors:
        detail = "; ".join(err.message for err in errors)
        msg = f"Invalid Problem Details payload: {detail}"
        raise ProblemDetailsValidationError(msg)


def build_problem_details(
    params: ProblemDetailsParams | None = None,
    /,
    **fields: object,
) -> ProblemDetails:
    """Build a validated Problem Details payload.

    Accepts either a :class:`ProblemDetailsParams` instance or the same fields
    as keyword arguments.

    Parameters
    ----------
    params : ProblemDetailsParams | None, optional
        Prepared parameters.
    **fields : object
        Keyword form of :class:`ProblemDetailsParams`.

    Returns
    -------
    ProblemDetails
        Payload conforming to RFC 9457.
    """
    resolved = params if params is not None else ProblemDetailsParams(**fields)  # type: ignore[arg-type]
    payload: dict[str, object] = {
        "type": resolved.problem_type,
        "title": resolved.title,
        "status": resolved.status,
        "detail": resolved.detail,
        "instance": resolved.instance,
    }
    if resolved.code is not None:
        payload["code"] = resolved.code
    if resolved.extensions:
        payload["extensions"] = dict(resolved.extensions)
    validate_problem_details(payload)
    return cast("ProblemDetails", payload)


def render_problem(problem: ProblemDetails | Mapping[str, object]) -> str:
    """Render ``problem`` as a compact JSON string."""
    return json.dumps(problem, ensure_ascii=False, default=str)
