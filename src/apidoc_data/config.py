"""Configuration models for apidoc builds.

:class:`BuildOptions` is the immutable per-call configuration of
:func:`apidoc_data.factory.create_data`. :class:`ApiDocSettings` reads the
command-line defaults from ``APIDOC_*`` environment variables.

Examples
--------
>>> from apidoc_data.config import BuildOptions, DuplicatePolicy
>>> options = BuildOptions(duplicate_policy=DuplicatePolicy.ERROR)
>>> options.validate_documents
True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from apidoc_common.settings import load_settings

__all__ = [
    "ApiDocSettings",
    "BuildOptions",
    "DuplicatePolicy",
    "get_settings",
]


class DuplicatePolicy(StrEnum):
    """How to treat two container records that derive the same id."""

    OVERWRITE = "overwrite"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Options for one build.

    Attributes
    ----------
    duplicate_policy : DuplicatePolicy, optional
        ``OVERWRITE`` keeps the last container registered under an id;
        ``ERROR`` raises :class:`~apidoc_common.errors.DuplicateContainerError`.
        Defaults to ``OVERWRITE``.
    validate_documents : bool, optional
        Validate written documents against the bundled JSON schemas.
        Defaults to True.
    metrics_enabled : bool, optional
        Record Prometheus metrics for the build. Defaults to True.
    """

    duplicate_policy: DuplicatePolicy = DuplicatePolicy.OVERWRITE
    validate_documents: bool = True
    metrics_enabled: bool = True


class ApiDocSettings(BaseSettings):
    """Environment-driven defaults for the command line."""

    model_config = SettingsConfigDict(env_prefix="APIDOC_", case_sensitive=False, extra="ignore")

    output_dir: Path = Field(
        default=Path("site/_build/apidoc"),
        description="Directory receiving navigation.json, search-keywords.json and pages/",
    )
    pages_dir_name: str = Field(default="pages", min_length=1)
    strict_duplicates: bool = False
    validate_documents: bool = True
    metrics_enabled: bool = True
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: object) -> str:
        level = str(value).strip().upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {value!r}"
            raise ValueError(msg)
        return level

    @field_validator("pages_dir_name")
    @classmethod
    def _plain_directory_name(cls, value: str) -> str:
        if Path(value).name != value or value in {".", ".."}:
            msg = "pages_dir_name must be a single directory name"
            raise ValueError(msg)
        return value

    def build_options(self) -> BuildOptions:
        """Return the :class:`BuildOptions` these settings describe."""
        return BuildOptions(
            duplicate_policy=(
                DuplicatePolicy.ERROR if self.strict_duplicates else DuplicatePolicy.OVERWRITE
            ),
            validate_documents=self.validate_documents,
            metrics_enabled=self.metrics_enabled,
        )


def get_settings() -> ApiDocSettings:
    """Load :class:`ApiDocSettings` from the environment.

    Raises
    ------
    SettingsError
        If an ``APIDOC_*`` variable holds an invalid value.
    """
    return load_settings(ApiDocSettings)
