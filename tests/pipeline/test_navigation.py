"""Tests for navigation node construction and finalization."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from apidoc_common.errors import DuplicateContainerError, ErrorCode
from apidoc_data.config import BuildOptions, DuplicatePolicy
from apidoc_data.context import BuildContext
from apidoc_data.identity import make_base_identity
from apidoc_data.models import NavNode
from apidoc_data.navigation import (
    add_member_node,
    build_nav_children,
    build_synthetic_root,
    finalize_navigation,
    member_node_id,
    register_container_node,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from apidoc_data.models import EntityRecord


class TestMemberNodeId:
    """Tests for member_node_id."""

    @pytest.mark.parametrize(
        ("scope", "expected"),
        [
            ("static", "Grid.create"),
            ("inner", "Grid~create"),
            ("instance", "Grid#create"),
            ("global", "Grid#create"),
            (None, "Grid#create"),
        ],
    )
    def test_separator_by_scope(self, scope: str | None, expected: str) -> None:
        """The separator depends on the member scope."""
        assert member_node_id("Grid", "create", scope) == expected


class TestBuildNavChildren:
    """Tests for build_nav_children."""

    def test_scope_falls_back_to_bucket(self, make_record: Callable[..., EntityRecord]) -> None:
        """Members without a scope take the bucket they are listed under."""
        record = make_record(
            "Grid",
            "class",
            members={
                "inner": [{"name": "cache", "kind": "member"}],
                "events": [{"name": "change", "kind": "event"}],
                "instance": [{"name": "size", "kind": "member", "scope": "static"}],
            },
        )
        children = build_nav_children(record, make_base_identity("Grid", "class"))

        assert [(node.id, node.scope) for node in children] == [
            ("Grid~cache", "inner"),
            ("Grid.size", "static"),
            ("Grid#change", "instance"),
        ]
        assert all(node.parent_id == "Grid" for node in children)


class TestRegisterContainerNode:
    """Tests for register_container_node."""

    def test_last_duplicate_wins(self, make_record: Callable[..., EntityRecord]) -> None:
        """Under the default policy the later container replaces the earlier one."""
        ctx = BuildContext()
        first = make_record("Widget", "class", members={"static": [{"name": "a", "kind": "function"}]})
        second = make_record("Widget", "namespace")
        register_container_node(ctx, make_base_identity(first.name, first.kind), first)
        register_container_node(ctx, make_base_identity(second.name, second.kind), second)

        assert list(ctx.container_nodes) == ["Widget"]
        assert ctx.container_nodes["Widget"].kind == "namespace"
        assert ctx.nav_map["Widget"] == []

    def test_strict_policy_raises(self, make_record: Callable[..., EntityRecord]) -> None:
        """Under the strict policy a reused id raises."""
        ctx = BuildContext(options=BuildOptions(duplicate_policy=DuplicatePolicy.ERROR))
        record = make_record("ui/grid", "class")
        clash = make_record("ui_grid", "class")
        register_container_node(ctx, make_base_identity(record.name, record.kind), record)

        with pytest.raises(DuplicateContainerError) as excinfo:
            register_container_node(ctx, make_base_identity(clash.name, clash.kind), clash)

        assert excinfo.value.code is ErrorCode.DUPLICATE_CONTAINER
        assert excinfo.value.context["id"] == "ui_grid"


class TestFinalizeNavigation:
    """Tests for finalize_navigation."""

    def test_sorts_containers_and_children(self, make_record: Callable[..., EntityRecord]) -> None:
        """Containers and their children come out in display order."""
        ctx = BuildContext()
        for name in ("beta", "Alpha"):
            record = make_record(name, "class")
            register_container_node(ctx, make_base_identity(name, "class"), record)
        add_member_node(ctx, NavNode(id="beta#z", name="z", kind="function", parent_id="beta"))
        add_member_node(ctx, NavNode(id="beta#a", name="a", kind="function", parent_id="beta"))

        navigation = finalize_navigation(ctx)

        assert [node.name for node in navigation] == ["Alpha", "beta"]
        assert navigation[0].child_nodes is None
        assert navigation[1].child_nodes is not None
        assert [child.name for child in navigation[1].child_nodes] == ["a", "z"]

    def test_synthetic_root_is_last(self, make_record: Callable[..., EntityRecord]) -> None:
        """Members of the global id get a synthetic root after all containers."""
        ctx = BuildContext()
        register_container_node(ctx, make_base_identity("zeta", "class"), make_record("zeta", "class"))
        add_member_node(ctx, NavNode(id="global#Foo", name="Foo", kind="typedef", parent_id="global"))

        navigation = finalize_navigation(ctx)

        assert [node.id for node in navigation] == ["zeta", "global"]
        root = navigation[-1]
        assert root.parent_id == "global"
        assert root.opened is False
        assert root.child_nodes is not None
        assert [child.id for child in root.child_nodes] == ["global#Foo"]

    def test_global_container_suppresses_synthetic_root(
        self, make_record: Callable[..., EntityRecord]
    ) -> None:
        """A container already owning the global id receives the members instead."""
        ctx = BuildContext()
        register_container_node(ctx, make_base_identity("global", "global"), make_record("global", "global"))
        add_member_node(ctx, NavNode(id="global#Foo", name="Foo", kind="typedef", parent_id="global"))

        navigation = finalize_navigation(ctx)

        assert [node.id for node in navigation] == ["global"]
        assert navigation[0].child_nodes is not None
        assert [child.name for child in navigation[0].child_nodes] == ["Foo"]

    def test_no_synthetic_root_without_global_members(self) -> None:
        """An empty context produces an empty tree."""
        assert finalize_navigation(BuildContext()) == []


class TestSyntheticRoot:
    """Tests for build_synthetic_root."""

    def test_fixed_shape(self) -> None:
        """The synthetic root uses the reserved id, name and kind."""
        root = build_synthetic_root([])
        assert (root.id, root.name, root.kind, root.parent_id) == (
            "global",
            "global",
            "global",
            "global",
        )
        assert root.type == "api"


class TestAddMemberNode:
    """Tests for add_member_node."""

    def test_requires_parent(self) -> None:
        """A member node without a parent id is rejected."""
        with pytest.raises(ValueError, match="no parent id"):
            add_member_node(BuildContext(), NavNode(id="x", name="x", kind="function"))
