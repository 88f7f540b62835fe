"""Display names and persistent ids for container records."""

from __future__ import annotations

from apidoc_data.helpers import derive_id, strip_quotes
from apidoc_data.models import MODULE_MARKER, BaseIdentity

__all__ = ["make_base_identity", "make_name"]


def make_name(name: str, kind: str) -> str:
    """Return the display name of a record.

    Quotes are stripped; module records also lose their ``module:`` marker.

    Parameters
    ----------
    name : str
        Name as emitted by the extractor.
    kind : str
        Record kind.

    Returns
    -------
    str
        Display name.

    Examples
    --------
    >>> make_name('"Widget"', "class")
    'Widget'
    >>> make_name("module:ui/grid", "module")
    'ui/grid'
    """
    replaced = strip_quotes(name)
    if kind == "module":
        replaced = replaced.replace(MODULE_MARKER, "", 1)
    return replaced


def make_base_identity(name: str, kind: str) -> BaseIdentity:
    """Return the :class:`BaseIdentity` for ``(name, kind)``.

    The result only depends on its arguments, so the same pair always maps to
    the same id.
    """
    display_name = make_name(name, kind)
    return BaseIdentity(id=derive_id(display_name), kind=kind, name=display_name)
