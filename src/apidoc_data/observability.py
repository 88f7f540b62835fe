"""Prometheus metrics and structured logging for apidoc builds.

Metrics follow the ``apidoc_<operation>_total`` and
``apidoc_<operation>_duration_seconds`` naming pattern. Tests pass their own
``CollectorRegistry`` to :class:`ApiDataMetrics`; everything else shares the
instance returned by :func:`get_metrics_registry`.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from apidoc_common.logging import CorrelationContext, get_logger, with_fields

__all__ = [
    "ApiDataMetrics",
    "OperationRecord",
    "get_correlation_id",
    "get_metrics_registry",
    "record_operation_metrics",
]

_LOGGER = get_logger(__name__)


class ApiDataMetrics:
    """Metrics emitted by the build pipeline.

    Attributes
    ----------
    build_runs_total : Counter
        Builds by final status.
    build_duration_seconds : Histogram
        Build duration by final status.
    records_total : Counter
        Input records by final outcome (``container`` or a resolution kind).
        Each record is counted once.
    pages_written_total : Counter
        Content pages handed to a page writer.

    Parameters
    ----------
    registry : CollectorRegistry | None, optional
        Registry to register with, by default the process-wide registry.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else REGISTRY
        self.build_runs_total = Counter(
            "apidoc_build_runs_total",
            "Total number of apidoc build operations",
            ["status"],
            registry=self.registry,
        )
        self.build_duration_seconds = Histogram(
            "apidoc_build_duration_seconds",
            "Duration of apidoc build operations in seconds",
            ["status"],
            registry=self.registry,
        )
        self.records_total = Counter(
            "apidoc_records_total",
            "Input records by final outcome",
            ["outcome"],
            registry=self.registry,
        )
        self.pages_written_total = Counter(
            "apidoc_pages_written_total",
            "Content pages handed to a page writer",
            registry=self.registry,
        )

    def observe_outcomes(self, outcomes: Mapping[str, int]) -> None:
        """Add per-outcome record counts to :attr:`records_total`.

        Counts must be final outcomes, one per input record.
        """
        for outcome, count in outcomes.items():
            if count:
                self.records_total.labels(outcome=outcome).inc(count)


@dataclass(slots=True)
class _MetricsCache:
    metrics: ApiDataMetrics | None = None


_METRICS_CACHE = _MetricsCache()


def get_metrics_registry() -> ApiDataMetrics:
    """Return the process-wide :class:`ApiDataMetrics`, creating it once."""
    if _METRICS_CACHE.metrics is None:
        _METRICS_CACHE.metrics = ApiDataMetrics()
    return _METRICS_CACHE.metrics


def get_correlation_id() -> str:
    """Return a new correlation ID (``urn:apidoc:correlation:<uuid>``)."""
    return f"urn:apidoc:correlation:{uuid.uuid4().hex}"


@dataclass(slots=True)
class OperationRecord:
    """Mutable handle yielded by :func:`record_operation_metrics`."""

    operation: str
    correlation_id: str
    status: str = "success"
    duration_seconds: float = 0.0


@contextmanager
def record_operation_metrics(
    operation: str,
    *,
    metrics: ApiDataMetrics | None = None,
    correlation_id: str | None = None,
) -> Iterator[OperationRecord]:
    """Record the duration and final status of an operation.

    The status flips to ``"error"`` when the block raises; the exception is
    re-raised unchanged. Without ``metrics`` only the completion log record is
    emitted.

    Parameters
    ----------
    operation : str
        Operation name, e.g. ``"build"``.
    metrics : ApiDataMetrics | None, optional
        Metrics to update, by default None.
    correlation_id : str | None, optional
        Correlation ID bound for the block, generated when omitted.

    Yields
    ------
    OperationRecord
        Handle carrying the correlation ID and, after the block, the status
        and duration.

    Examples
    --------
    >>> with record_operation_metrics("build") as op:
    ...     pass
    >>> op.status
    'success'
    """
    record = OperationRecord(
        operation=operation,
        correlation_id=correlation_id or get_correlation_id(),
    )
    log_adapter = with_fields(_LOGGER, operation=operation)
    start = time.monotonic()
    with CorrelationContext(record.correlation_id):
        try:
            yield record
        except Exception:
            record.status = "error"
            raise
        finally:
            record.duration_seconds = time.monotonic() - start
            if metrics is not None:
                metrics.build_runs_total.labels(status=record.status).inc()
                metrics.build_duration_seconds.labels(status=record.status).observe(
                    record.duration_seconds
                )
            log_adapter.info(
                "apidoc operation completed",
                extra={
                    "status": record.status,
                    "duration_ms": record.duration_seconds * 1000,
                },
            )
