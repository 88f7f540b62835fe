"""Serialized documents aligned with the schemas under ``apidoc_data/schema``."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from pydantic import BaseModel, ConfigDict, Field

from apidoc_common.serialization import validate_payload

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from apidoc_data.models import ContentPage, MemberRecord, NavNode, SearchRecord

SCHEMA_ROOT: Final[Path] = Path(__file__).resolve().parent / "schema"

NAVIGATION_SCHEMA: Final[str] = "navigation_document.json"
SEARCH_INDEX_SCHEMA: Final[str] = "search_index_document.json"
CONTENT_PAGE_SCHEMA: Final[str] = "content_page.json"

NAVIGATION_SCHEMA_ID: Final[str] = "https://apidoc.dev/schema/navigation-document.json"
SEARCH_INDEX_SCHEMA_ID: Final[str] = "https://apidoc.dev/schema/search-index-document.json"
SCHEMA_VERSION: Final[str] = "1.0.0"

__all__ = [
    "CONTENT_PAGE_SCHEMA",
    "NAVIGATION_SCHEMA",
    "SEARCH_INDEX_SCHEMA",
    "ContentPageDocument",
    "MemberDocument",
    "NavNodeDocument",
    "NavigationDocument",
    "SearchIndexDocument",
    "SearchRecordDocument",
    "dump_document",
    "navigation_document_from_nodes",
    "page_document_from_page",
    "search_index_document_from_records",
    "validate_document",
]


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="seconds")


class MemberDocument(BaseModel):
    """Member entry of a content page."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    kind: str
    scope: str | None = None
    memberof: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)


class ContentPageDocument(BaseModel):
    """One page file handed to the site renderer."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    kind: str | None = None
    title: str | None = None
    parent_id: str | None = Field(None, alias="parentId")
    items: list[MemberDocument] = Field(default_factory=list)
    attributes: dict[str, Any] = Field(default_factory=dict)


class NavNodeDocument(BaseModel):
    """Serialized navigation node."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    kind: str
    parent_id: str | None = Field(None, alias="parentId")
    scope: str | None = None
    child_nodes: list[NavNodeDocument] | None = Field(None, alias="childNodes")
    opened: bool = False
    type: str = "api"


class SearchRecordDocument(BaseModel):
    """Serialized search index entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    parent_id: str | None = Field(None, alias="parentId")


class NavigationDocument(BaseModel):
    """Top-level navigation document written to ``navigation.json``."""

    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field(SCHEMA_VERSION, alias="schemaVersion")
    schema_id: str = Field(NAVIGATION_SCHEMA_ID, alias="schemaId")
    generated_at: str = Field(default_factory=_utc_iso_now, alias="generatedAt")
    navigation: list[NavNodeDocument] = Field(default_factory=list)


class SearchIndexDocument(BaseModel):
    """Top-level search document written to ``search-keywords.json``."""

    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field(SCHEMA_VERSION, alias="schemaVersion")
    schema_id: str = Field(SEARCH_INDEX_SCHEMA_ID, alias="schemaId")
    generated_at: str = Field(default_factory=_utc_iso_now, alias="generatedAt")
    search_keywords: list[SearchRecordDocument] = Field(
        default_factory=list, alias="searchKeywords"
    )


def _member_document(member: MemberRecord) -> MemberDocument:
    return MemberDocument(
        name=member.name,
        kind=member.kind,
        scope=member.scope,
        memberof=member.memberof,
        attributes=dict(member.attributes),
    )


def _nav_node_document(node: NavNode) -> NavNodeDocument:
    children = (
        [_nav_node_document(child) for child in node.child_nodes]
        if node.child_nodes is not None
        else None
    )
    return NavNodeDocument(
        id=node.id,
        name=node.name,
        kind=node.kind,
        parent_id=node.parent_id,
        scope=node.scope,
        child_nodes=children,
        opened=node.opened,
        type=node.type,
    )


def page_document_from_page(page: ContentPage) -> ContentPageDocument:
    """Build a :class:`ContentPageDocument` from a :class:`ContentPage`."""
    return ContentPageDocument(
        id=page.id,
        kind=page.kind,
        title=page.title,
        parent_id=page.parent_id,
        items=[_member_document(item) for item in page.items],
        attributes=dict(page.attributes),
    )


def navigation_document_from_nodes(nodes: Iterable[NavNode]) -> NavigationDocument:
    """Build a :class:`NavigationDocument` from top-level navigation nodes."""
    return NavigationDocument(navigation=[_nav_node_document(node) for node in nodes])


def search_index_document_from_records(records: Iterable[SearchRecord]) -> SearchIndexDocument:
    """Build a :class:`SearchIndexDocument` from search records."""
    return SearchIndexDocument(
        search_keywords=[
            SearchRecordDocument(id=record.id, name=record.name, parent_id=record.parent_id)
            for record in records
        ]
    )


def dump_document(document: BaseModel) -> dict[str, Any]:
    """Return the JSON payload of ``document`` using schema aliases."""
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_document(payload: Mapping[str, object], schema_name: str) -> None:
    """Validate ``payload`` against a bundled schema.

    Raises
    ------
    SchemaValidationError
        If the payload does not conform.
    """
    validate_payload(payload, SCHEMA_ROOT / schema_name)
