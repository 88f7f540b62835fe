"""Split extractor records into page-level containers and deferred members."""

from __future__ import annotations

from typing import TYPE_CHECKING

from apidoc_data.content import build_content_page, register_content_page
from apidoc_data.identity import make_base_identity
from apidoc_data.models import CONTAINER_KINDS
from apidoc_data.navigation import register_container_node

if TYPE_CHECKING:
    from collections.abc import Iterable

    from apidoc_data.context import BuildContext
    from apidoc_data.models import BaseIdentity, EntityRecord

__all__ = ["classify_records", "is_container", "register_container"]

CONTAINER_OUTCOME = "container"


def is_container(record: EntityRecord) -> bool:
    """Return ``True`` when ``record`` owns a page of its own.

    A ``typedef`` only owns a page when it embeds members; a bare typedef is
    resolved like any other member. A record whose name yields an empty id
    never owns a page.
    """
    if record.kind not in CONTAINER_KINDS:
        return False
    if not make_base_identity(record.name, record.kind).id:
        return False
    if record.kind == "typedef":
        return record.has_members()
    return True


def register_container(ctx: BuildContext, record: EntityRecord) -> BaseIdentity:
    """Register the navigation node, embedded children and page of a container."""
    identity = make_base_identity(record.name, record.kind)
    register_container_node(ctx, identity, record)
    register_content_page(ctx, build_content_page(identity.id, identity.kind, record))
    return identity


def classify_records(ctx: BuildContext, records: Iterable[EntityRecord]) -> None:
    """Register containers immediately and queue everything else in input order.

    Only containers are counted here; queued records are counted under their
    resolution kind once resolved.

    Parameters
    ----------
    ctx : BuildContext
        Context of the current build.
    records : Iterable[EntityRecord]
        Extractor records in input order.
    """
    for record in records:
        if is_container(record):
            register_container(ctx, record)
            ctx.outcomes[CONTAINER_OUTCOME] += 1
        else:
            ctx.deferred.append(record)
