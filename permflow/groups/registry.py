"""
Group Registry - Global permission group registry using namespace singleton pattern.

Groups are registered once, by name, and looked up by PermissionGroups when a
semantic request is made. Specs are immutable; registering a name twice keeps
the first definition.
"""

from typing import Any, Dict, List, Optional

from .resolvers import GroupSpec, KeyBuilder, Reducer


class _GroupRegistry:
    """Global group registry (singleton).

    Use the `Groups` module-level instance to interact with the registry.

    Example:
        Groups.register("camera", build_keys=fixed_keys(CAMERA), reduce=single_outcome(CAMERA))
        spec = Groups.get("camera")
        all_groups = Groups.list()
    """

    _instance: Optional["_GroupRegistry"] = None

    def __new__(cls) -> "_GroupRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._groups: Dict[str, GroupSpec] = {}
        return cls._instance

    def register(
        self,
        name: str,
        *,
        build_keys: KeyBuilder,
        reduce: Reducer,
        description: str = "",
        category: str = "general",
    ) -> GroupSpec:
        """Register a group in the global registry.

        Args:
            name: Unique group identifier
            build_keys: Keys to request for given capabilities and options
            reduce: Fold per-key outcomes into the group's result
            description: Group description
            category: Group category for listing

        Returns:
            The registered GroupSpec (the existing one if already registered)
        """
        if name in self._groups:
            # Re-registration is a no-op (idempotent)
            return self._groups[name]

        spec = GroupSpec(
            name=name,
            description=description,
            build_keys=build_keys,
            reduce=reduce,
            category=category,
        )
        self._groups[name] = spec
        return spec

    def get(self, name: str) -> Optional[GroupSpec]:
        """Get a group spec by name, or None if not registered."""
        return self._groups.get(name)

    def require(self, name: str) -> GroupSpec:
        """Get a group spec by name.

        Raises:
            ValueError: If no group is registered under `name`
        """
        spec = self._groups.get(name)
        if spec is None:
            raise ValueError(f"Unknown permission group: {name}")
        return spec

    def list(self) -> List[GroupSpec]:
        return list(self._groups.values())

    def list_names(self) -> List[str]:
        return list(self._groups.keys())

    def list_by_category(self, category: str) -> List[GroupSpec]:
        return [g for g in self._groups.values() if g.category == category]

    def is_registered(self, name: str) -> bool:
        return name in self._groups

    def describe(self) -> List[Dict[str, Any]]:
        """Name, category and description of every group, for listings."""
        return [
            {"name": g.name, "category": g.category, "description": g.description}
            for g in self._groups.values()
        ]

    def clear(self) -> None:
        """Clear all registered groups. Used for testing."""
        self._groups.clear()


# Global singleton instance
Groups = _GroupRegistry()
