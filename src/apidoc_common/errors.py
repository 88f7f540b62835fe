"""Typed exception hierarchy with Problem Details support.

All apidoc exceptions inherit from :class:`ApiDocError`, which carries a
stable :class:`ErrorCode` and converts to an RFC 9457 Problem Details payload.

Examples
--------
>>> from apidoc_common.errors import ErrorCode, PageWriteError
>>> try:
...     raise PageWriteError("Failed to write page", cause=OSError("disk full"))
... except PageWriteError as e:
...     assert e.code == ErrorCode.PAGE_WRITE_FAILED
...     details = e.to_problem_details(instance="urn:apidoc:page:Widget")
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Final, cast

from apidoc_common.problem_details import build_problem_details

if TYPE_CHECKING:
    from collections.abc import Mapping

    from apidoc_common.problem_details import JsonValue, ProblemDetails

__all__ = [
    "BASE_TYPE_URI",
    "ApiDocError",
    "DuplicateContainerError",
    "ErrorCode",
    "InputLoadError",
    "PageWriteError",
    "SchemaValidationError",
    "SettingsError",
    "get_type_uri",
]

BASE_TYPE_URI: Final[str] = "https://apidoc.dev/problems"


class ErrorCode(StrEnum):
    """Stable error codes used in Problem Details payloads."""

    RUNTIME_ERROR = "runtime-error"
    INVALID_INPUT = "invalid-input"
    DUPLICATE_CONTAINER = "duplicate-container"
    PAGE_WRITE_FAILED = "page-write-failed"
    SCHEMA_VALIDATION_FAILED = "schema-validation-failed"
    CONFIGURATION_ERROR = "configuration-error"


def get_type_uri(code: ErrorCode) -> str:
    """Return the Problem Details ``type`` URI for ``code``."""
    return f"{BASE_TYPE_URI}/{code.value}"


class ApiDocError(Exception):
    """Base exception for apidoc failures.

    Parameters
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode, optional
        Stable error code, by default ``ErrorCode.RUNTIME_ERROR``.
    status : int, optional
        Status reported in Problem Details, by default 500.
    log_level : int, optional
        Level the CLI uses when logging the error, by default ``logging.ERROR``.
    cause : Exception | None, optional
        Underlying exception, chained as ``__cause__``.
    context : Mapping[str, object] | None, optional
        Extra fields surfaced as Problem Details extensions.
    """

    default_code: ErrorCode = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        status: int = 500,
        log_level: int = logging.ERROR,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.status = status
        self.log_level = log_level
        self.context: dict[str, object] = dict(context) if context else {}
        if cause is not None:
            self.__cause__ = cause

    def to_problem_details(
        self,
        instance: str | None = None,
        title: str | None = None,
    ) -> ProblemDetails:
        """Convert the error to an RFC 9457 Problem Details payload.

        Parameters
        ----------
        instance : str | None, optional
            URI identifying this occurrence, by default ``urn:apidoc:error``.
        title : str | None, optional
            Short summary, by default the exception class name.

        Returns
        -------
        ProblemDetails
            Validated Problem Details payload.
        """
        return build_problem_details(
            problem_type=get_type_uri(self.code),
            title=title or self.__class__.__name__,
            status=self.status,
            detail=self.message,
            instance=instance or "urn:apidoc:error",
            code=self.code.value,
            extensions=cast("Mapping[str, JsonValue] | None", self.context or None),
        )

    def __str__(self) -> str:
        base = f"{self.__class__.__name__}[{self.code.value}]: {self.message}"
        if self.__cause__:
            base += f" (caused by: {type(self.__cause__).__name__})"
        return base


class InputLoadError(ApiDocError):
    """Raised when the extractor output cannot be read as a list of records."""

    default_code = ErrorCode.INVALID_INPUT


class DuplicateContainerError(ApiDocError):
    """Raised when two container records derive the same id under the strict policy."""

    default_code = ErrorCode.DUPLICATE_CONTAINER


class PageWriteError(ApiDocError):
    """Raised when a content page cannot be persisted."""

    default_code = ErrorCode.PAGE_WRITE_FAILED


class SchemaValidationError(ApiDocError):
    """Raised when an output document fails JSON Schema validation."""

    default_code = ErrorCode.SCHEMA_VALIDATION_FAILED


class SettingsError(ApiDocError):
    """Raised when environment settings fail validation."""

    default_code = ErrorCode.CONFIGURATION_ERROR
