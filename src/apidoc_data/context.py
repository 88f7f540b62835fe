"""Per-build accumulator state.

A :class:`BuildContext` is created for every call to
:func:`apidoc_data.factory.create_data` and passed explicitly to each stage.
Nothing in it outlives the call.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from apidoc_data.config import BuildOptions

if TYPE_CHECKING:
    from apidoc_data.models import ContentPage, EntityRecord, NavNode

__all__ = ["BuildContext"]


@dataclass(slots=True)
class BuildContext:
    """Accumulators shared by the stages of one build.

    Attributes
    ----------
    options : BuildOptions
        Options of the build.
    container_nodes : dict[str, NavNode]
        Container navigation nodes keyed by id, in registration order.
    nav_map : dict[str, list[NavNode]]
        Child navigation nodes keyed by parent id.
    content_map : dict[str, ContentPage]
        Content pages keyed by id, in creation order.
    deferred : list[EntityRecord]
        Non-container records awaiting resolution, in input order.
    dropped : list[EntityRecord]
        Deferred records no rule resolved.
    outcomes : Counter[str]
        Per-outcome record counts (``container`` or a resolution kind).
    """

    options: BuildOptions = field(default_factory=BuildOptions)
    container_nodes: dict[str, NavNode] = field(default_factory=dict)
    nav_map: dict[str, list[NavNode]] = field(default_factory=dict)
    content_map: dict[str, ContentPage] = field(default_factory=dict)
    deferred: list[EntityRecord] = field(default_factory=list)
    dropped: list[EntityRecord] = field(default_factory=list)
    outcomes: Counter[str] = field(default_factory=Counter)

    def children_of(self, parent_id: str) -> list[NavNode]:
        """Return the mutable child list for ``parent_id``, creating it if absent."""
        return self.nav_map.setdefault(parent_id, [])
