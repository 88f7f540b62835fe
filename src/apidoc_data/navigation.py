"""Navigation node construction and tree finalization."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from apidoc_common.errors import DuplicateContainerError
from apidoc_common.logging import get_logger
from apidoc_data.config import DuplicatePolicy
from apidoc_data.helpers import order_siblings, strip_quotes
from apidoc_data.models import GLOBAL_ID, MEMBER_SEPARATOR, NavNode

if TYPE_CHECKING:
    from apidoc_data.context import BuildContext
    from apidoc_data.models import BaseIdentity, EntityRecord

__all__ = [
    "add_member_node",
    "build_nav_children",
    "build_nav_container_node",
    "build_nav_member_node",
    "build_synthetic_root",
    "finalize_navigation",
    "member_node_id",
    "register_container_node",
]

LOGGER = get_logger(__name__)

_SCOPE_SEPARATORS: Final[dict[str, str]] = {"static": ".", "inner": "~"}
_BUCKET_SCOPES: Final[dict[str, str]] = {"events": "instance"}


def member_node_id(parent_id: str, name: str, scope: str | None) -> str:
    """Return the id of a member node.

    Static members join with ``.``, inner members with ``~`` and everything
    else with ``#``.

    Examples
    --------
    >>> member_node_id("Grid", "create", "static")
    'Grid.create'
    >>> member_node_id("Grid", "render", "instance")
    'Grid#render'
    """
    separator = _SCOPE_SEPARATORS.get(scope or "", MEMBER_SEPARATOR)
    return f"{parent_id}{separator}{name}"


def build_nav_container_node(identity: BaseIdentity) -> NavNode:
    """Return the top-level navigation node for a container."""
    return NavNode(id=identity.id, name=identity.name, kind=identity.kind)


def build_nav_member_node(
    *,
    name: str,
    parent_id: str,
    kind: str,
    scope: str | None,
) -> NavNode:
    """Return the navigation node of a member attached under ``parent_id``."""
    return NavNode(
        id=member_node_id(parent_id, name, scope),
        name=name,
        kind=kind,
        parent_id=parent_id,
        scope=scope,
    )


def build_nav_children(record: EntityRecord, parent: BaseIdentity) -> list[NavNode]:
    """Return member nodes for the members embedded in a container record.

    The member's own ``scope`` wins; otherwise the bucket it was listed under
    is used (``events`` members count as instance members).
    """
    children: list[NavNode] = []
    for bucket, member in record.iter_members():
        scope = member.scope or _BUCKET_SCOPES.get(bucket, bucket)
        children.append(
            build_nav_member_node(
                name=strip_quotes(member.name),
                parent_id=parent.id,
                kind=member.kind,
                scope=scope,
            )
        )
    return children


def register_container_node(
    ctx: BuildContext,
    identity: BaseIdentity,
    record: EntityRecord,
) -> NavNode:
    """Register the navigation node and embedded children of a container.

    Under :attr:`DuplicatePolicy.OVERWRITE` a container that reuses an id
    replaces the earlier node and its embedded children.

    Raises
    ------
    DuplicateContainerError
        If the id is already registered and the policy is ``ERROR``.
    """
    existing = ctx.container_nodes.get(identity.id)
    if existing is not None:
        if ctx.options.duplicate_policy is DuplicatePolicy.ERROR:
            msg = f"Containers {existing.name!r} and {identity.name!r} share the id {identity.id!r}"
            raise DuplicateContainerError(
                msg,
                context={"id": identity.id, "kinds": [existing.kind, identity.kind]},
            )
        LOGGER.debug(
            "Container id registered twice; keeping the later record",
            extra={"operation": "classify", "container_id": identity.id},
        )
    node = build_nav_container_node(identity)
    ctx.container_nodes[identity.id] = node
    ctx.nav_map[identity.id] = build_nav_children(record, identity)
    return node


def add_member_node(ctx: BuildContext, node: NavNode) -> None:
    """Append a resolved member node under its parent id."""
    if node.parent_id is None:
        msg = f"Member node {node.id!r} has no parent id"
        raise ValueError(msg)
    ctx.children_of(node.parent_id).append(node)


def build_synthetic_root(children: list[NavNode]) -> NavNode:
    """Return the node hosting members with no identifiable owner."""
    return NavNode(
        id=GLOBAL_ID,
        name=GLOBAL_ID,
        kind=GLOBAL_ID,
        parent_id=GLOBAL_ID,
        child_nodes=order_siblings(children),
        opened=False,
    )


def finalize_navigation(ctx: BuildContext) -> list[NavNode]:
    """Attach sorted children, sort containers and append the synthetic root.

    The synthetic root is only appended when members resolved to the global
    id and no container already owns that id; it always comes last.

    Parameters
    ----------
    ctx : BuildContext
        Context after classification and resolution.

    Returns
    -------
    list[NavNode]
        Top-level navigation nodes.
    """
    for node_id, node in ctx.container_nodes.items():
        children = ctx.nav_map.get(node_id)
        if children:
            node.child_nodes = order_siblings(children)

    navigation = order_siblings(ctx.container_nodes.values())

    global_children = ctx.nav_map.get(GLOBAL_ID)
    if global_children and GLOBAL_ID not in ctx.container_nodes:
        navigation.append(build_synthetic_root(global_children))
    return navigation
