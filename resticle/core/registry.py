"""
Resource Registry for resticle.

Maps resource types to their ``ResourceDefinition``. Definitions are
registered once at application startup and looked up by the
``ResourceFactory`` the first time a resource type is requested.
"""

from __future__ import annotations

import logging
from typing import Any

from .definitions import ResourceDefinition
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ResourceRegistry:
    """
    Registry of resource definitions keyed by resource type.

    Example:
        class Users(Resource):
            def transform(self, item):
                return User(**item)

        registry = ResourceRegistry()
        registry.register(Users, ResourceDefinition(
            path="/users/:id",
            params={"id": "@id"},
        ))

        factory = ResourceFactory(transport, registry=registry)
        users = factory.get(Users)
    """

    def __init__(self) -> None:
        self._definitions: dict[type, ResourceDefinition] = {}

    def register(
        self,
        resource_type: type,
        definition: ResourceDefinition | None = None,
        **fields: Any,
    ) -> ResourceDefinition:
        """
        Register a definition for a resource type.

        Args:
            resource_type: The resource class
            definition: Definition to register; if omitted one is built
                from ``fields`` (path, params, actions, defaults)

        Returns:
            The registered definition

        Note:
            Re-registering a type replaces its definition. Factories that
            already built the type keep their cached instance.
        """
        if definition is None:
            definition = ResourceDefinition(**fields)
        elif fields:
            raise ConfigurationError(
                "Pass either a ResourceDefinition or definition fields, not both"
            )

        if resource_type in self._definitions:
            logger.warning(
                f"[registry] Replacing definition for {resource_type.__name__}"
            )
        self._definitions[resource_type] = definition
        logger.info(
            f"[registry] Registered {resource_type.__name__} at {definition.path!r} "
            f"with actions={list(definition.bound_actions())}"
        )
        return definition

    def get(self, resource_type: type) -> ResourceDefinition:
        """
        Get the definition for a resource type.

        Raises:
            ConfigurationError: If the type was never registered
        """
        definition = self._definitions.get(resource_type)
        if definition is None:
            name = getattr(resource_type, "__name__", repr(resource_type))
            available = ", ".join(t.__name__ for t in self._definitions) or "(none)"
            raise ConfigurationError(
                f"{name} is not a configured resource. Registered: {available}"
            )
        return definition

    def has(self, resource_type: type) -> bool:
        """Check if a resource type is registered."""
        return resource_type in self._definitions

    @property
    def registered_types(self) -> list[type]:
        """Get list of registered resource types."""
        return list(self._definitions.keys())

    def unregister(self, resource_type: type) -> bool:
        """
        Remove a resource type's definition.

        Returns:
            True if it was removed, False if not found
        """
        if resource_type in self._definitions:
            del self._definitions[resource_type]
            logger.info(f"[registry] Unregistered {resource_type.__name__}")
            return True
        return False

    def clear(self) -> None:
        """Clear all definitions (for testing)."""
        self._definitions.clear()
        logger.debug("[registry] Cleared all resource definitions")


# Global registry instance
_registry: ResourceRegistry | None = None


def get_resource_registry() -> ResourceRegistry:
    """
    Get the global resource registry.

    Creates the registry on first access (lazy initialization).
    """
    global _registry
    if _registry is None:
        _registry = ResourceRegistry()
    return _registry


def register_resource(
    resource_type: type,
    definition: ResourceDefinition | None = None,
    **fields: Any,
) -> ResourceDefinition:
    """
    Register a resource type in the global registry.

    Example:
        register_resource(
            Users,
            path="/users/:id",
            params={"id": "@id"},
            actions={"search": ActionDefinition("GET", path="/search", is_array=True)},
        )
    """
    return get_resource_registry().register(resource_type, definition, **fields)


def reset_resource_registry() -> None:
    """
    Reset the global resource registry (for testing).

    Creates a fresh registry instance.
    """
    global _registry
    if _registry is not None:
        _registry.clear()
    _registry = None
