"""Default id derivation and sibling ordering.

Both container ids and member parent references are computed through
:func:`sanitize_reference`, so a member always lands under the id its owner
was registered with.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from apidoc_data.models import EXTERNAL_MARKER

if TYPE_CHECKING:
    from collections.abc import Iterable

    from apidoc_data.models import NavNode

__all__ = ["derive_id", "order_siblings", "sanitize_reference", "strip_quotes"]

_PATH_SEPARATOR = "/"
_ID_JOINER = "_"


def strip_quotes(name: str) -> str:
    """Remove every literal double quote from ``name``."""
    return name.replace('"', "")


def derive_id(name: str) -> str:
    """Return the persistent id for a display name.

    A leading ``external:`` marker is dropped and every path separator is
    replaced with an underscore. The function is idempotent on its output.

    Parameters
    ----------
    name : str
        Sanitized display name.

    Returns
    -------
    str
        Persistent id.

    Examples
    --------
    >>> derive_id("ui/grid")
    'ui_grid'
    >>> derive_id("external:jQuery")
    'jQuery'
    """
    return name.removeprefix(EXTERNAL_MARKER).replace(_PATH_SEPARATOR, _ID_JOINER)


def sanitize_reference(reference: str) -> str:
    """Return the persistent id a parent reference points at."""
    return derive_id(strip_quotes(reference))


def _sort_key(node: NavNode) -> tuple[str, str, str]:
    return (node.name.casefold(), node.name, node.id)


def order_siblings(nodes: Iterable[NavNode]) -> list[NavNode]:
    """Return ``nodes`` in display order (case-insensitive name, then id)."""
    return sorted(nodes, key=_sort_key)
