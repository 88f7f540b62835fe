"""Typed models for entity records, navigation nodes, pages and search records.

Input records are validated into :class:`EntityRecord` (a frozen pydantic
model that keeps unknown fields). Everything the pipeline derives from them is
a plain dataclass; serialized shapes live in :mod:`apidoc_data.documents`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from collections.abc import Iterator

__all__ = [
    "CONTAINER_KINDS",
    "EXTERNAL_MARKER",
    "GLOBAL_ID",
    "GLOBAL_TITLE",
    "MEMBER_BUCKETS",
    "MEMBER_SEPARATOR",
    "MODULE_MARKER",
    "NAV_NODE_TYPE",
    "ApiData",
    "BaseIdentity",
    "ContentPage",
    "EntityRecord",
    "MemberRecord",
    "NavNode",
    "SearchRecord",
]

CONTAINER_KINDS: Final[frozenset[str]] = frozenset(
    {"module", "external", "class", "namespace", "mixin", "global", "typedef"}
)
MODULE_MARKER: Final[str] = "module:"
EXTERNAL_MARKER: Final[str] = "external:"
MEMBER_SEPARATOR: Final[str] = "#"

GLOBAL_ID: Final[str] = "global"
GLOBAL_TITLE: Final[str] = "Global"
NAV_NODE_TYPE: Final[str] = "api"

# documentation.js member buckets, in the order the extractor emits them.
MEMBER_BUCKETS: Final[tuple[str, ...]] = ("global", "inner", "instance", "events", "static")


class EntityRecord(BaseModel):
    """One documentation entity emitted by the extractor.

    Only ``name``, ``kind``, ``memberof``, ``scope`` and ``members`` drive
    classification. Values of the wrong type are read as absent, so a
    malformed record is dropped during resolution rather than rejected. Any
    other field is kept as-is and exposed through :attr:`attributes`.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = ""
    kind: str = ""
    memberof: str | None = None
    scope: str | None = None
    members: dict[str, list[EntityRecord]] | None = None

    @field_validator("name", "kind", mode="before")
    @classmethod
    def _text_or_empty(cls, value: object) -> object:
        return value if isinstance(value, str) else ""

    @field_validator("memberof", "scope", mode="before")
    @classmethod
    def _text_or_none(cls, value: object) -> object:
        return value if isinstance(value, str) else None

    @field_validator("members", mode="before")
    @classmethod
    def _well_formed_members(cls, value: object) -> object:
        # Malformed buckets and entries count as no members.
        if not isinstance(value, Mapping):
            return None
        return {
            bucket: [entry for entry in entries if isinstance(entry, (Mapping, EntityRecord))]
            for bucket, entries in value.items()
            if isinstance(bucket, str) and isinstance(entries, list)
        }

    @property
    def attributes(self) -> dict[str, Any]:
        """Fields the extractor emitted beyond the classified ones."""
        return dict(self.model_extra or {})

    def iter_members(self) -> Iterator[tuple[str, EntityRecord]]:
        """Yield ``(bucket, record)`` for every embedded member.

        Known buckets come first in extractor order; unknown buckets follow in
        the order they appear.
        """
        if not self.members:
            return
        ordered = [bucket for bucket in MEMBER_BUCKETS if bucket in self.members]
        ordered.extend(bucket for bucket in self.members if bucket not in MEMBER_BUCKETS)
        for bucket in ordered:
            for member in self.members[bucket]:
                yield bucket, member

    def has_members(self) -> bool:
        """Return ``True`` when at least one member is embedded."""
        return any(True for _ in self.iter_members())


@dataclass(slots=True, frozen=True)
class BaseIdentity:
    """Display name and persistent id of a container record."""

    id: str
    kind: str
    name: str


@dataclass(slots=True)
class NavNode:
    """Node of the navigation tree.

    ``child_nodes`` stays ``None`` for nodes without children so that the
    serialized tree omits the key.
    """

    id: str
    name: str
    kind: str
    parent_id: str | None = None
    scope: str | None = None
    child_nodes: list[NavNode] | None = None
    opened: bool = False
    type: str = NAV_NODE_TYPE


@dataclass(slots=True, frozen=True)
class MemberRecord:
    """Member entry rendered inside a content page."""

    name: str
    kind: str
    scope: str | None = None
    memberof: str | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ContentPage:
    """Content of one page, keyed by container id."""

    id: str
    kind: str | None = None
    title: str | None = None
    parent_id: str | None = None
    items: list[MemberRecord] = field(default_factory=list)
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class SearchRecord:
    """Flat search index entry for one navigation node."""

    id: str
    name: str
    parent_id: str | None = None


@dataclass(slots=True, frozen=True)
class ApiData:
    """Result of one build.

    Attributes
    ----------
    navigation : list[NavNode]
        Sorted top-level containers, followed by the synthetic root if any.
    search_keywords : list[SearchRecord]
        Preorder search index over ``navigation``.
    pages : Mapping[str, ContentPage]
        Content pages in insertion order.
    dropped : tuple[EntityRecord, ...]
        Deferred records that no resolution rule matched.
    """

    navigation: list[NavNode]
    search_keywords: list[SearchRecord]
    pages: Mapping[str, ContentPage] = field(default_factory=dict)
    dropped: tuple[EntityRecord, ...] = ()
