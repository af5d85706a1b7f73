"""Tests for the upgrader registry."""

from __future__ import annotations

import pytest

from dotnet_bumper.upgrade import UpgraderRegistry
from dotnet_bumper.upgrade.upgraders import BaseUpgrader


def make_upgrader(upgrader_id: str, priority: int) -> type[BaseUpgrader]:
    return type(
        f"Upgrader_{upgrader_id.replace('-', '_')}",
        (BaseUpgrader,),
        {"upgrader_id": upgrader_id, "priority": priority},
    )


class TestUpgraderRegistry:
    def test_builtin_upgraders_in_priority_order(self) -> None:
        assert UpgraderRegistry.ids() == [
            "global-json",
            "target-framework",
            "runtime-identifier",
            "container-base-image",
            "dockerfile",
            "github-actions",
            "aws-lambda-tools",
            "aws-sam-template",
            "serverless",
            "vscode",
            "visual-studio-components",
        ]

    def test_orders_by_priority_then_id(self, isolated_registry) -> None:
        isolated_registry.register(make_upgrader("b", 2))
        isolated_registry.register(make_upgrader("c", 1))
        isolated_registry.register(make_upgrader("a", 2))
        assert isolated_registry.ids() == ["c", "a", "b"]

    def test_get_enabled_skips_disabled(self, isolated_registry) -> None:
        isolated_registry.register(make_upgrader("a", 1))
        isolated_registry.register(make_upgrader("b", 2))
        assert [u.upgrader_id for u in isolated_registry.get_enabled({"a"})] == ["b"]

    def test_get_by_id(self, isolated_registry) -> None:
        upgrader = make_upgrader("a", 1)
        isolated_registry.register(upgrader)
        assert isinstance(isolated_registry.get_by_id("a"), upgrader)
        assert isolated_registry.get_by_id("missing") is None

    def test_requires_id(self, isolated_registry) -> None:
        with pytest.raises(ValueError, match="must have an upgrader_id"):
            isolated_registry.register(make_upgrader("", 1))

    def test_rejects_duplicate_id(self, isolated_registry) -> None:
        isolated_registry.register(make_upgrader("a", 1))
        with pytest.raises(ValueError, match="already used"):
            isolated_registry.register(make_upgrader("a", 2))

    def test_registering_same_class_twice_is_allowed(self, isolated_registry) -> None:
        upgrader = make_upgrader("a", 1)
        isolated_registry.register(upgrader)
        isolated_registry.register(upgrader)
        assert isolated_registry.ids() == ["a"]
