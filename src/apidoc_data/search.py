"""Flat search index over the finalized navigation tree."""

from __future__ import annotations

from typing import TYPE_CHECKING

from apidoc_data.models import SearchRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from apidoc_data.models import NavNode

__all__ = ["build_search_index", "iter_preorder"]


def iter_preorder(nodes: Iterable[NavNode]) -> Iterator[NavNode]:
    """Yield every node of the forest ``nodes`` in preorder.

    Uses an explicit stack, so deep trees do not hit the recursion limit. The
    tree is not modified.
    """
    stack: list[NavNode] = list(reversed(list(nodes)))
    while stack:
        node = stack.pop()
        yield node
        if node.child_nodes:
            stack.extend(reversed(node.child_nodes))


def build_search_index(nodes: Iterable[NavNode]) -> list[SearchRecord]:
    """Return one :class:`SearchRecord` per node, in preorder.

    Examples
    --------
    >>> from apidoc_data.models import NavNode
    >>> root = NavNode(id="Grid", name="Grid", kind="class")
    >>> root.child_nodes = [NavNode(id="Grid#render", name="render", kind="function", parent_id="Grid")]
    >>> [record.id for record in build_search_index([root])]
    ['Grid', 'Grid#render']
    """
    return [
        SearchRecord(id=node.id, name=node.name, parent_id=node.parent_id)
        for node in iter_preorder(nodes)
    ]
