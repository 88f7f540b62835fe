"""Resolve the owning page of deferred member records.

Each rule inspects one naming convention and either returns a
:class:`Resolution` or ``None``. :data:`RESOLUTION_RULES` lists the rules in
priority order; the first match wins and records no rule matches are dropped.

Examples
--------
>>> from apidoc_data.models import EntityRecord
>>> resolution = resolve_record(EntityRecord(name="X#ready", kind="event"), {})
>>> resolution.kind, resolution.parent_id, resolution.name
(<ResolutionKind.EVENT_MEMBER: 'event-member'>, 'X', 'ready')
"""

from __future__ import annotations

from collections.abc import Callable, Container
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from apidoc_common.logging import get_logger
from apidoc_data.content import add_member_entry, build_content_member_entry
from apidoc_data.helpers import sanitize_reference
from apidoc_data.models import EXTERNAL_MARKER, GLOBAL_ID, MEMBER_SEPARATOR, MODULE_MARKER
from apidoc_data.navigation import add_member_node, build_nav_member_node

if TYPE_CHECKING:
    from apidoc_data.context import BuildContext
    from apidoc_data.models import EntityRecord

__all__ = [
    "RESOLUTION_RULES",
    "Resolution",
    "ResolutionKind",
    "ResolutionRule",
    "attach_member",
    "resolve_deferred",
    "resolve_record",
]

LOGGER = get_logger(__name__)


class ResolutionKind(StrEnum):
    """Outcome of resolving one deferred record."""

    MODULE_MEMBER = "module-member"
    EXTERNAL_MEMBER = "external-member"
    EVENT_MEMBER = "event-member"
    ORPHAN_TYPEDEF = "orphan-typedef"
    IMPLICIT_MEMBER = "implicit-member"
    UNRESOLVED = "unresolved"


@dataclass(slots=True, frozen=True)
class Resolution:
    """Parent id and display name computed for a deferred record."""

    kind: ResolutionKind
    parent_id: str | None = None
    name: str | None = None

    @property
    def resolved(self) -> bool:
        """Return ``True`` unless the record matched no rule."""
        return self.kind is not ResolutionKind.UNRESOLVED


UNRESOLVED = Resolution(ResolutionKind.UNRESOLVED)

type RuleFunction = Callable[[EntityRecord, Container[str]], Resolution | None]


@dataclass(slots=True, frozen=True)
class ResolutionRule:
    """A named rule in the resolution table."""

    kind: ResolutionKind
    apply: RuleFunction


def _module_member(record: EntityRecord, pages: Container[str]) -> Resolution | None:  # noqa: ARG001
    memberof = record.memberof
    if not memberof or MODULE_MARKER not in memberof:
        return None
    parent_id = sanitize_reference(memberof.rsplit(MODULE_MARKER, 1)[-1])
    if not parent_id:
        return None
    return Resolution(
        ResolutionKind.MODULE_MEMBER,
        parent_id=parent_id,
        name=record.name,
    )


def _external_member(record: EntityRecord, pages: Container[str]) -> Resolution | None:  # noqa: ARG001
    if EXTERNAL_MARKER not in record.name:
        return None
    qualified = record.name.rsplit(EXTERNAL_MARKER, 1)[-1]
    owner, separator, member = qualified.partition(MEMBER_SEPARATOR)
    parent_id = sanitize_reference(owner)
    if not separator or not parent_id:
        return None
    return Resolution(
        ResolutionKind.EXTERNAL_MEMBER,
        parent_id=parent_id,
        name=member,
    )


def _event_member(record: EntityRecord, pages: Container[str]) -> Resolution | None:  # noqa: ARG001
    if record.kind != "event":
        return None
    owner, separator, member = record.name.partition(MEMBER_SEPARATOR)
    parent_id = sanitize_reference(owner)
    if not separator or not parent_id:
        return None
    return Resolution(
        ResolutionKind.EVENT_MEMBER,
        parent_id=parent_id,
        name=member,
    )


def _orphan_typedef(record: EntityRecord, pages: Container[str]) -> Resolution | None:  # noqa: ARG001
    if record.kind != "typedef":
        return None
    return Resolution(ResolutionKind.ORPHAN_TYPEDEF, parent_id=GLOBAL_ID, name=record.name)


def _implicit_member(record: EntityRecord, pages: Container[str]) -> Resolution | None:
    if not record.memberof:
        return None
    parent_id = sanitize_reference(record.memberof)
    if parent_id not in pages:
        return None
    return Resolution(ResolutionKind.IMPLICIT_MEMBER, parent_id=parent_id, name=record.name)


RESOLUTION_RULES: tuple[ResolutionRule, ...] = (
    ResolutionRule(ResolutionKind.MODULE_MEMBER, _module_member),
    ResolutionRule(ResolutionKind.EXTERNAL_MEMBER, _external_member),
    ResolutionRule(ResolutionKind.EVENT_MEMBER, _event_member),
    ResolutionRule(ResolutionKind.ORPHAN_TYPEDEF, _orphan_typedef),
    ResolutionRule(ResolutionKind.IMPLICIT_MEMBER, _implicit_member),
)


def resolve_record(
    record: EntityRecord,
    pages: Container[str],
    rules: tuple[ResolutionRule, ...] = RESOLUTION_RULES,
) -> Resolution:
    """Return the first matching resolution for ``record``.

    Parameters
    ----------
    record : EntityRecord
        Deferred record.
    pages : Container[str]
        Ids of the content pages that exist at this point of the build.
    rules : tuple[ResolutionRule, ...], optional
        Rule table, by default :data:`RESOLUTION_RULES`.

    Returns
    -------
    Resolution
        Matching resolution, or an ``UNRESOLVED`` one.
    """
    for rule in rules:
        resolution = rule.apply(record, pages)
        if resolution is not None:
            return resolution
    return UNRESOLVED


def attach_member(ctx: BuildContext, parent_id: str, name: str, record: EntityRecord) -> None:
    """Add the navigation node and page entry of a resolved member."""
    node = build_nav_member_node(
        name=name,
        parent_id=parent_id,
        kind=record.kind,
        scope=record.scope,
    )
    add_member_node(ctx, node)
    add_member_entry(ctx, parent_id, build_content_member_entry(record, name))


def resolve_deferred(ctx: BuildContext) -> None:
    """Resolve every deferred record in queue order.

    Pages created while resolving earlier records are visible to later
    records. Unresolved records are kept in ``ctx.dropped``.
    """
    for record in ctx.deferred:
        resolution = resolve_record(record, ctx.content_map)
        ctx.outcomes[resolution.kind.value] += 1
        if not resolution.resolved or resolution.parent_id is None or resolution.name is None:
            ctx.dropped.append(record)
            LOGGER.debug(
                "Dropped unresolvable record",
                extra={
                    "operation": "resolve",
                    "record_name": record.name,
                    "record_kind": record.kind,
                },
            )
            continue
        attach_member(ctx, resolution.parent_id, resolution.name, record)
