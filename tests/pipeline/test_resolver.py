"""Tests for the member resolution rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from apidoc_data.resolver import (
    RESOLUTION_RULES,
    UNRESOLVED,
    Resolution,
    ResolutionKind,
    ResolutionRule,
    resolve_deferred,
    resolve_record,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from apidoc_data.context import BuildContext
    from apidoc_data.models import EntityRecord


class TestResolveRecord:
    """Tests for resolve_record."""

    def test_module_member(self, make_record: Callable[..., EntityRecord]) -> None:
        """Members of a module resolve to the module id."""
        record = make_record("doThing", "function", memberof="module:Mod")
        assert resolve_record(record, set()) == Resolution(
            ResolutionKind.MODULE_MEMBER, parent_id="Mod", name="doThing"
        )

    @pytest.mark.parametrize(
        ("memberof", "parent_id"),
        [
            ("module:ui/grid", "ui_grid"),
            ('module:"quoted"', "quoted"),
            ("module:outer.module:inner", "inner"),
        ],
    )
    def test_module_member_parent_is_sanitized(
        self, make_record: Callable[..., EntityRecord], memberof: str, parent_id: str
    ) -> None:
        """The module reference goes through the shared id sanitization."""
        resolution = resolve_record(make_record("f", "function", memberof=memberof), set())
        assert resolution.parent_id == parent_id

    def test_external_member(self, make_record: Callable[..., EntityRecord]) -> None:
        """External members split at the first member separator."""
        record = make_record("external:jQuery#fn", "function")
        assert resolve_record(record, set()) == Resolution(
            ResolutionKind.EXTERNAL_MEMBER, parent_id="jQuery", name="fn"
        )

    def test_external_without_separator_is_unresolved(
        self, make_record: Callable[..., EntityRecord]
    ) -> None:
        """An external reference without a member part matches no rule."""
        assert resolve_record(make_record("external:jQuery", "function"), set()) is UNRESOLVED

    def test_event_member(self, make_record: Callable[..., EntityRecord]) -> None:
        """Events resolve to the owner before the separator."""
        record = make_record("ui/grid#change", "event")
        assert resolve_record(record, set()) == Resolution(
            ResolutionKind.EVENT_MEMBER, parent_id="ui_grid", name="change"
        )

    def test_event_without_separator_is_unresolved(
        self, make_record: Callable[..., EntityRecord]
    ) -> None:
        """An event name without an owner is dropped."""
        assert not resolve_record(make_record("ready", "event"), set()).resolved

    @pytest.mark.parametrize(
        ("name", "kind", "fields"),
        [
            ("#ready", "event", {}),
            ('""#ready', "event", {}),
            ("external:#fn", "member", {}),
            ("doThing", "function", {"memberof": "module:"}),
        ],
    )
    def test_empty_owner_is_unresolved(
        self,
        make_record: Callable[..., EntityRecord],
        name: str,
        kind: str,
        fields: dict[str, str],
    ) -> None:
        """A reference whose owner part is empty attaches nowhere."""
        assert resolve_record(make_record(name, kind, **fields), set()) is UNRESOLVED

    def test_orphan_typedef(self, make_record: Callable[..., EntityRecord]) -> None:
        """A bare typedef goes under the synthetic root."""
        assert resolve_record(make_record("Foo", "typedef"), set()) == Resolution(
            ResolutionKind.ORPHAN_TYPEDEF, parent_id="global", name="Foo"
        )

    def test_implicit_member_requires_existing_page(
        self, make_record: Callable[..., EntityRecord]
    ) -> None:
        """A plain memberof only resolves when the page already exists."""
        record = make_record("helper", "function", memberof="Grid")
        assert resolve_record(record, {"Grid"}) == Resolution(
            ResolutionKind.IMPLICIT_MEMBER, parent_id="Grid", name="helper"
        )
        assert resolve_record(record, set()) is UNRESOLVED

    def test_module_rule_wins_over_event_rule(
        self, make_record: Callable[..., EntityRecord]
    ) -> None:
        """Rules apply in table order."""
        record = make_record("X#ready", "event", memberof="module:Mod")
        resolution = resolve_record(record, set())
        assert resolution.kind is ResolutionKind.MODULE_MEMBER
        assert resolution.parent_id == "Mod"
        assert resolution.name == "X#ready"

    def test_unknown_kind_is_unresolved(self, make_record: Callable[..., EntityRecord]) -> None:
        """Records with no matching convention are dropped."""
        assert resolve_record(make_record("Bar", "unknownKind"), set()) is UNRESOLVED

    def test_custom_rule_table(self, make_record: Callable[..., EntityRecord]) -> None:
        """Callers can pass their own rule table."""
        rules = (
            ResolutionRule(
                ResolutionKind.IMPLICIT_MEMBER,
                lambda record, _pages: Resolution(
                    ResolutionKind.IMPLICIT_MEMBER, parent_id="Everything", name=record.name
                ),
            ),
        )
        resolution = resolve_record(make_record("Bar", "unknownKind"), set(), rules)
        assert resolution.parent_id == "Everything"

    def test_rule_table_order(self) -> None:
        """The default table lists the rules by priority."""
        assert [rule.kind for rule in RESOLUTION_RULES] == [
            ResolutionKind.MODULE_MEMBER,
            ResolutionKind.EXTERNAL_MEMBER,
            ResolutionKind.EVENT_MEMBER,
            ResolutionKind.ORPHAN_TYPEDEF,
            ResolutionKind.IMPLICIT_MEMBER,
        ]


class TestResolveDeferred:
    """Tests for resolve_deferred."""

    def test_pages_created_earlier_are_visible(
        self, build_context: BuildContext, make_record: Callable[..., EntityRecord]
    ) -> None:
        """A page created by one resolution lets later records resolve implicitly."""
        build_context.deferred.extend(
            [
                make_record("X#ready", "event"),
                make_record("helper", "function", memberof="X"),
            ]
        )
        resolve_deferred(build_context)

        page = build_context.content_map["X"]
        assert page.title is None
        assert [item.name for item in page.items] == ["ready", "helper"]
        assert [node.id for node in build_context.nav_map["X"]] == ["X#ready", "X#helper"]
        assert build_context.outcomes["event-member"] == 1
        assert build_context.outcomes["implicit-member"] == 1

    def test_unresolved_records_are_dropped(
        self, build_context: BuildContext, make_record: Callable[..., EntityRecord]
    ) -> None:
        """Unresolved records leave no node or page behind."""
        record = make_record("Bar", "unknownKind")
        build_context.deferred.append(record)
        resolve_deferred(build_context)

        assert build_context.dropped == [record]
        assert build_context.nav_map == {}
        assert build_context.content_map == {}
        assert build_context.outcomes["unresolved"] == 1

    def test_orphan_typedef_creates_synthetic_page(
        self, build_context: BuildContext, make_record: Callable[..., EntityRecord]
    ) -> None:
        """The synthetic root page gets its fixed title and parent id."""
        build_context.deferred.append(make_record("Foo", "typedef"))
        resolve_deferred(build_context)

        page = build_context.content_map["global"]
        assert page.title == "Global"
        assert page.parent_id == "global"
        assert [item.name for item in page.items] == ["Foo"]
