"""Structured logging helpers with correlation IDs.

This module provides a LoggerAdapter that injects structured fields
(correlation_id, operation, status) into every record, a JSON formatter for
application entry points, and module-level loggers with NullHandler so library
code never configures handlers on its own.

Examples
--------
>>> from apidoc_common.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Build started", extra={"operation": "build", "status": "started"})
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping
    from types import TracebackType

__all__ = [
    "CorrelationContext",
    "JsonFormatter",
    "LoggerAdapter",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
    "setup_logging",
    "with_fields",
]

type LogValue = Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "apidoc_correlation_id", default=None
)

_STRUCTURED_FIELDS: tuple[str, ...] = ("correlation_id", "operation", "status", "duration_ms")

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects.

    The payload always carries ``ts``, ``level``, ``name`` and ``message``.
    Structured fields and any JSON-friendly ``extra`` values are appended.
    The correlation ID falls back to the value bound in the current context.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record`` as JSON.

        Parameters
        ----------
        record : logging.LogRecord
            Record to format.

        Returns
        -------
        str
            JSON-encoded log entry.
        """
        data: dict[str, LogValue] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + "Z",
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for field in _STRUCTURED_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value
        if "correlation_id" not in data:
            ctx_correlation_id = _correlation_id.get()
            if ctx_correlation_id is not None:
                data["correlation_id"] = ctx_correlation_id

        for key, value in record.__dict__.items():
            if (
                key in _RESERVED_ATTRS
                or key in data
                or key.startswith("_")
                or value is None
                or not isinstance(value, (str, int, float, bool, list, dict))
            ):
                continue
            data[key] = value

        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that merges bound fields into each record's ``extra``.

    Fields passed per call win over fields bound on the adapter. ``operation``
    defaults to ``"unknown"`` and ``status`` is inferred from the level when a
    caller does not supply one.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        """Inject bound fields and the context correlation ID into ``kwargs``.

        Parameters
        ----------
        msg : Any
            Log message.
        kwargs : MutableMapping[str, Any]
            Keyword arguments of the logging call.

        Returns
        -------
        tuple[Any, MutableMapping[str, Any]]
            Message and updated keyword arguments.
        """
        extra = dict(kwargs.get("extra") or {})
        if self.extra:
            for key, value in self.extra.items():
                extra.setdefault(key, value)
        if "correlation_id" not in extra:
            ctx_correlation_id = _correlation_id.get()
            if ctx_correlation_id is not None:
                extra["correlation_id"] = ctx_correlation_id
        extra.setdefault("operation", "unknown")
        kwargs["extra"] = extra
        return msg, kwargs

    def log(self, level: int, msg: object, *args: object, **kwargs: Any) -> None:
        """Log ``msg`` at ``level`` with a status inferred from the level."""
        if self.isEnabledFor(level):
            extra = dict(kwargs.get("extra") or {})
            extra.setdefault("status", _status_for_level(level))
            kwargs["extra"] = extra
            msg, kwargs = self.process(msg, kwargs)
            self.logger.log(level, msg, *args, **kwargs)

    def log_success(
        self,
        message: str,
        *,
        operation: str | None = None,
        duration_ms: float | None = None,
        **fields: LogValue,
    ) -> None:
        """Log a successful operation with structured fields.

        Parameters
        ----------
        message : str
            Success message.
        operation : str | None, optional
            Operation name. Defaults to ``None``.
        duration_ms : float | None, optional
            Operation duration in milliseconds. Defaults to ``None``.
        **fields : LogValue
            Additional structured fields.
        """
        extra: dict[str, LogValue] = {"status": "success"}
        if operation is not None:
            extra["operation"] = operation
        if duration_ms is not None:
            extra["duration_ms"] = duration_ms
        extra.update(fields)
        self.info(message, extra=extra)


def _status_for_level(level: int) -> str:
    if level >= logging.ERROR:
        return "error"
    if level >= logging.WARNING:
        return "warning"
    return "success"


def get_logger(name: str) -> LoggerAdapter:
    """Return a structured logger adapter for ``name``.

    A ``NullHandler`` is attached when the underlying logger has no handlers
    so library modules stay silent until an application calls
    :func:`setup_logging`.

    Parameters
    ----------
    name : str
        Logger name (typically ``__name__``).

    Returns
    -------
    LoggerAdapter
        Adapter with structured context injection.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return LoggerAdapter(logger, {})


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure the root logger to emit JSON lines on stderr.

    Parameters
    ----------
    level : int | str, optional
        Threshold level, by default ``logging.INFO``.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)


def set_correlation_id(correlation_id: str | None) -> None:
    """Bind ``correlation_id`` to the current context."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str | None:
    """Return the correlation ID bound to the current context, if any."""
    return _correlation_id.get()


class CorrelationContext(AbstractContextManager["CorrelationContext"]):
    """Bind a correlation ID for the duration of a ``with`` block.

    Examples
    --------
    >>> with CorrelationContext("urn:apidoc:correlation:abc"):
    ...     assert get_correlation_id() == "urn:apidoc:correlation:abc"
    """

    def __init__(self, correlation_id: str | None) -> None:
        self.correlation_id = correlation_id
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> CorrelationContext:
        self._token = _correlation_id.set(self.correlation_id)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _correlation_id.reset(self._token)
            self._token = None


def with_fields(logger: logging.Logger | LoggerAdapter, **fields: LogValue) -> LoggerAdapter:
    """Return an adapter bound to ``fields``.

    Parameters
    ----------
    logger : logging.Logger | LoggerAdapter
        Base logger, possibly already wrapped.
    **fields : LogValue
        Structured fields injected into all log entries.

    Returns
    -------
    LoggerAdapter
        Adapter carrying the merged fields.

    Examples
    --------
    >>> adapter = with_fields(get_logger(__name__), operation="build")
    >>> adapter.info("Processing", extra={"records": 10})
    """
    if isinstance(logger, LoggerAdapter):
        bound: Mapping[str, object] = dict(logger.extra or {})
        return LoggerAdapter(logger.logger, {**bound, **fields})
    return LoggerAdapter(logger, dict(fields))
