"""Upgrader registry for the dotnet-bumper upgrade system."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Type

if TYPE_CHECKING:
    from .upgraders.base import BaseUpgrader


class UpgraderRegistry:
    """Registry of all available upgraders, ordered by priority."""

    _upgraders: Dict[str, Type["BaseUpgrader"]] = {}

    @classmethod
    def register(
        cls, upgrader_class: Type["BaseUpgrader"]
    ) -> Type["BaseUpgrader"]:
        """Decorator to register an upgrader class.

        Args:
            upgrader_class: The upgrader class to register

        Returns:
            The same upgrader class (for decorator use)

        Raises:
            ValueError: If upgrader_id is not set or already registered
        """
        if not upgrader_class.upgrader_id:
            raise ValueError(
                f"Upgrader {upgrader_class.__name__} must have an upgrader_id"
            )
        existing = cls._upgraders.get(upgrader_class.upgrader_id)
        if existing is not None and existing is not upgrader_class:
            raise ValueError(
                f"Upgrader id '{upgrader_class.upgrader_id}' is already used by {existing.__name__}"
            )
        cls._upgraders[upgrader_class.upgrader_id] = upgrader_class
        return upgrader_class

    @classmethod
    def get_all(cls) -> List["BaseUpgrader"]:
        """Get all upgraders as instances, ordered by priority then id."""
        instances = [u() for u in cls._upgraders.values()]
        return sorted(instances, key=lambda u: (u.priority, u.upgrader_id))

    @classmethod
    def get_enabled(cls, disabled: "set[str] | frozenset[str]") -> List["BaseUpgrader"]:
        """Get upgraders in priority order, skipping the ids in *disabled*."""
        return [u for u in cls.get_all() if u.upgrader_id not in disabled]

    @classmethod
    def get_by_id(cls, upgrader_id: str) -> "BaseUpgrader | None":
        """Get a specific upgrader by ID.

        Returns:
            Upgrader instance if found, None otherwise
        """
        upgrader_class = cls._upgraders.get(upgrader_id)
        return upgrader_class() if upgrader_class else None

    @classmethod
    def ids(cls) -> List[str]:
        return [u.upgrader_id for u in cls.get_all()]

    @classmethod
    def clear(cls) -> None:
        """Clear all registered upgraders (for testing)."""
        cls._upgraders.clear()
