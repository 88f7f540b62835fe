"""Content pages: construction, member merging and persistence.

Pages are kept in the build context in creation order and handed to a
:class:`PageWriter` once the build is complete. :class:`JsonPageWriter`
writes one JSON file per page; :class:`MemoryPageWriter` only collects them.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from apidoc_common.errors import PageWriteError
from apidoc_common.logging import get_logger
from apidoc_common.serialization import write_json
from apidoc_data.documents import (
    CONTENT_PAGE_SCHEMA,
    dump_document,
    page_document_from_page,
    validate_document,
)
from apidoc_data.helpers import strip_quotes
from apidoc_data.identity import make_name
from apidoc_data.models import GLOBAL_ID, GLOBAL_TITLE, ContentPage, MemberRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

    from apidoc_data.context import BuildContext
    from apidoc_data.models import EntityRecord

__all__ = [
    "JsonPageWriter",
    "MemoryPageWriter",
    "PageWriter",
    "add_member_entry",
    "build_content_member_entry",
    "build_content_page",
    "build_synthetic_root_page",
    "register_content_page",
    "write_pages",
]

LOGGER = get_logger(__name__)


def build_content_member_entry(record: EntityRecord, name: str | None = None) -> MemberRecord:
    """Return the page entry for ``record``.

    Parameters
    ----------
    record : EntityRecord
        Member record.
    name : str | None, optional
        Display name resolved for the member; defaults to the record name.

    Returns
    -------
    MemberRecord
        Entry rendered inside the owning page.
    """
    return MemberRecord(
        name=name if name is not None else strip_quotes(record.name),
        kind=record.kind,
        scope=record.scope,
        memberof=record.memberof,
        attributes=record.attributes,
    )


def build_content_page(page_id: str, kind: str, record: EntityRecord) -> ContentPage:
    """Return the page of a container record, including its embedded members."""
    return ContentPage(
        id=page_id,
        kind=kind,
        title=make_name(record.name, kind),
        items=[build_content_member_entry(member) for _, member in record.iter_members()],
        attributes=record.attributes,
    )


def build_synthetic_root_page() -> ContentPage:
    """Return the empty page hosting members without an owner."""
    return ContentPage(id=GLOBAL_ID, parent_id=GLOBAL_ID, title=GLOBAL_TITLE)


def register_content_page(ctx: BuildContext, page: ContentPage) -> None:
    """Store ``page`` under its id, replacing any earlier page."""
    ctx.content_map[page.id] = page


def add_member_entry(ctx: BuildContext, parent_id: str, entry: MemberRecord) -> ContentPage:
    """Append ``entry`` to the page of ``parent_id``, creating the page if needed.

    Pages created here only carry an id, except the synthetic root page which
    gets its fixed title and parent id.
    """
    page = ctx.content_map.get(parent_id)
    if page is None:
        page = build_synthetic_root_page() if parent_id == GLOBAL_ID else ContentPage(id=parent_id)
        ctx.content_map[parent_id] = page
    page.items.append(entry)
    return page


@runtime_checkable
class PageWriter(Protocol):
    """Persists one finished content page."""

    def write(self, page: ContentPage) -> None:
        """Persist ``page``."""
        ...


class MemoryPageWriter:
    """Page writer that keeps pages in memory."""

    def __init__(self) -> None:
        self.pages: list[ContentPage] = []

    def write(self, page: ContentPage) -> None:
        """Collect ``page``."""
        self.pages.append(page)


class JsonPageWriter:
    """Write each page to ``<directory>/<id>.json``.

    Parameters
    ----------
    directory : Path
        Destination directory, created on first write.
    validate : bool, optional
        Validate each payload against ``content_page.json``. Defaults to True.
    """

    def __init__(self, directory: Path, *, validate: bool = True) -> None:
        self.directory = Path(directory)
        self.validate = validate
        self.written: list[Path] = []

    def path_for(self, page: ContentPage) -> Path:
        """Return the file ``page`` is written to.

        Raises
        ------
        PageWriteError
            If the page id cannot be used as a file name.
        """
        filename = f"{page.id}.json"
        if not page.id or page.id in {".", ".."} or Path(filename).name != filename:
            msg = f"Page id {page.id!r} cannot be used as a file name"
            raise PageWriteError(msg, context={"page_id": page.id})
        return self.directory / filename

    def write(self, page: ContentPage) -> None:
        """Serialize and write ``page``.

        Raises
        ------
        PageWriteError
            If the file cannot be written.
        SchemaValidationError
            If validation is enabled and the payload does not conform.
        """
        destination = self.path_for(page)
        payload = dump_document(page_document_from_page(page))
        if self.validate:
            validate_document(payload, CONTENT_PAGE_SCHEMA)
        try:
            size = write_json(destination, payload)
        except OSError as exc:
            msg = f"Failed to write page {page.id!r} to {destination}"
            raise PageWriteError(msg, cause=exc, context={"page_id": page.id}) from exc
        self.written.append(destination)
        LOGGER.debug(
            "Wrote content page",
            extra={"operation": "write_page", "page_id": page.id, "size_bytes": size},
        )


def write_pages(pages: Iterable[ContentPage], writer: PageWriter) -> int:
    """Hand every page to ``writer`` in order and return the page count.

    The first failing write aborts the loop and propagates.
    """
    start = time.monotonic()
    count = 0
    for page in pages:
        writer.write(page)
        count += 1
    LOGGER.log_success(
        "Content pages written",
        operation="write_pages",
        duration_ms=(time.monotonic() - start) * 1000,
        pages=count,
    )
    return count
