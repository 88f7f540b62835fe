"""Shared logging, error and serialization helpers for the apidoc tooling."""

from __future__ import annotations

from apidoc_common.errors import (
    ApiDocError,
    DuplicateContainerError,
    ErrorCode,
    InputLoadError,
    PageWriteError,
    SchemaValidationError,
    SettingsError,
)
from apidoc_common.logging import get_logger, setup_logging, with_fields

__all__ = [
    "ApiDocError",
    "DuplicateContainerError",
    "ErrorCode",
    "InputLoadError",
    "PageWriteError",
    "SchemaValidationError",
    "SettingsError",
    "get_logger",
    "setup_logging",
    "with_fields",
]
