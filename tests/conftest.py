"""Shared pytest fixtures for the apidoc test-suite."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pytest
from prometheus_client import CollectorRegistry

from apidoc_common.logging import JsonFormatter
from apidoc_data.config import BuildOptions
from apidoc_data.content import MemoryPageWriter
from apidoc_data.context import BuildContext
from apidoc_data.models import EntityRecord
from apidoc_data.observability import ApiDataMetrics

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def make_record() -> Callable[..., EntityRecord]:
    """Return a factory building :class:`EntityRecord` from keyword fields."""

    def _make(name: str, kind: str, **fields: Any) -> EntityRecord:
        return EntityRecord.model_validate({"name": name, "kind": kind, **fields})

    return _make


@pytest.fixture
def build_context() -> BuildContext:
    """Return an empty build context with default options."""
    return BuildContext()


@pytest.fixture
def page_writer() -> MemoryPageWriter:
    """Return an in-memory page writer."""
    return MemoryPageWriter()


@pytest.fixture
def metrics_registry() -> CollectorRegistry:
    """Return a registry isolated from the process-wide default."""
    return CollectorRegistry()


@pytest.fixture
def metrics(metrics_registry: CollectorRegistry) -> ApiDataMetrics:
    """Return metrics bound to an isolated registry."""
    return ApiDataMetrics(registry=metrics_registry)


@pytest.fixture
def quiet_options() -> BuildOptions:
    """Return build options with metrics disabled."""
    return BuildOptions(metrics_enabled=False)


@pytest.fixture(autouse=True)
def _drop_json_handlers() -> Iterator[None]:
    """Remove root handlers installed by ``setup_logging`` during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            root.removeHandler(handler)
