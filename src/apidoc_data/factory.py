"""Build navigation, content pages and search index from extractor records.

:func:`create_data` is the single entry point. Each call owns a fresh
:class:`~apidoc_data.context.BuildContext`, so consecutive or concurrent calls
never observe each other's nodes or pages.

Examples
--------
>>> from apidoc_data.config import BuildOptions
>>> result = create_data(
...     [{"name": '"Widget"', "kind": "class"}],
...     options=BuildOptions(metrics_enabled=False),
... )
>>> [(record.id, record.parent_id) for record in result.search_keywords]
[('Widget', None)]
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from apidoc_common.errors import InputLoadError
from apidoc_common.logging import get_logger, with_fields
from apidoc_data.classifier import CONTAINER_OUTCOME, classify_records
from apidoc_data.config import BuildOptions
from apidoc_data.content import write_pages
from apidoc_data.context import BuildContext
from apidoc_data.models import ApiData, EntityRecord
from apidoc_data.navigation import finalize_navigation
from apidoc_data.observability import get_metrics_registry, record_operation_metrics
from apidoc_data.resolver import resolve_deferred
from apidoc_data.search import build_search_index

if TYPE_CHECKING:
    from apidoc_data.content import PageWriter
    from apidoc_data.observability import ApiDataMetrics

__all__ = ["coerce_records", "create_data"]

LOGGER = get_logger(__name__)

type RecordInput = EntityRecord | Mapping[str, Any]


def coerce_records(records: Iterable[RecordInput]) -> list[EntityRecord]:
    """Validate raw mappings into :class:`EntityRecord` instances.

    Classified fields of the wrong type are read as absent rather than
    rejected; such records are dropped later by the resolver.

    Parameters
    ----------
    records : Iterable[EntityRecord | Mapping[str, Any]]
        Records or raw extractor mappings, in input order.

    Returns
    -------
    list[EntityRecord]
        Records in input order.

    Raises
    ------
    InputLoadError
        If an entry is neither a record nor a mapping, or a mapping that
        cannot be read as a record at all.
    """
    coerced: list[EntityRecord] = []
    for index, record in enumerate(records):
        if isinstance(record, EntityRecord):
            coerced.append(record)
            continue
        if not isinstance(record, Mapping):
            msg = f"Record {index} is a {type(record).__name__}, expected an object"
            raise InputLoadError(msg, status=400, context={"index": index})
        try:
            coerced.append(EntityRecord.model_validate(record))
        except ValidationError as exc:
            msg = f"Record {index} has invalid fields: {exc.error_count()} error(s)"
            raise InputLoadError(
                msg,
                status=400,
                cause=exc,
                context={"index": index},
            ) from exc
    return coerced


def _member_count(ctx: BuildContext) -> int:
    return sum(len(children) for children in ctx.nav_map.values())


def create_data(
    records: Iterable[RecordInput],
    *,
    writer: PageWriter | None = None,
    options: BuildOptions | None = None,
    metrics: ApiDataMetrics | None = None,
) -> ApiData:
    """Classify ``records`` and assemble navigation, pages and search index.

    Stages run in a fixed order: classification, member resolution,
    navigation finalization, search indexing and finally page writing.

    Parameters
    ----------
    records : Iterable[EntityRecord | Mapping[str, Any]]
        Extractor records in input order.
    writer : PageWriter | None, optional
        Receives every content page once the tree is final. Pages are only
        returned in :attr:`ApiData.pages` when omitted.
    options : BuildOptions | None, optional
        Build options, by default :class:`BuildOptions` defaults.
    metrics : ApiDataMetrics | None, optional
        Metrics to update; the process-wide instance is used when omitted and
        ``options.metrics_enabled`` is set.

    Returns
    -------
    ApiData
        Navigation tree, search index, pages and dropped records.

    Raises
    ------
    InputLoadError
        If an entry is not a record or a mapping.
    DuplicateContainerError
        If two containers share an id under ``DuplicatePolicy.ERROR``.
    PageWriteError
        If the writer fails; the build is aborted.
    """
    options = options if options is not None else BuildOptions()
    if options.metrics_enabled and metrics is None:
        metrics = get_metrics_registry()
    elif not options.metrics_enabled:
        metrics = None

    with record_operation_metrics("build", metrics=metrics) as operation:
        start = time.monotonic()
        entity_records = coerce_records(records)
        ctx = BuildContext(options=options)

        classify_records(ctx, entity_records)
        resolve_deferred(ctx)
        navigation = finalize_navigation(ctx)
        search_keywords = build_search_index(navigation)

        written = 0
        if writer is not None:
            written = write_pages(ctx.content_map.values(), writer)

        if metrics is not None:
            metrics.observe_outcomes(ctx.outcomes)
            metrics.pages_written_total.inc(written)

        build_logger = with_fields(LOGGER, correlation_id=operation.correlation_id)
        build_logger.log_success(
            "apidoc data built",
            operation="build",
            duration_ms=(time.monotonic() - start) * 1000,
            records=len(entity_records),
            containers=ctx.outcomes[CONTAINER_OUTCOME],
            members=_member_count(ctx),
            dropped=len(ctx.dropped),
            pages=len(ctx.content_map),
        )

    return ApiData(
        navigation=navigation,
        search_keywords=search_keywords,
        pages=dict(ctx.content_map),
        dropped=tuple(ctx.dropped),
    )
