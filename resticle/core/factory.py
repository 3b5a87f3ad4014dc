"""
Resource Factory for resticle.

The factory turns registered resource definitions into resource instances
whose actions are callable:

    class Users(Resource):
        def transform(self, item):
            return User(**item)

    register_resource(Users, path="/users/:id", params={"id": "@id"})

    factory = ResourceFactory(HttpxTransport(), root_path="https://api.example.com")
    users = factory.get(Users)

    user = await users.get({"id": 42})
    saved = await users.create({"name": "Ada"})
    page = await users.list({"page": 2})

One instance is built per resource type and cached for the factory's
lifetime. ``root_path``, ``default_headers``, ``interceptors`` and
``transforms`` are plain attributes read each time an action is called.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from .definitions import ActionDefinition, ResourceDefinition
from .dispatcher import ActionDispatcher
from .exceptions import ConfigurationError, MethodResolutionError
from .query import encode_param, serialize_query
from .registry import ResourceRegistry, get_resource_registry
from .utils import then

if TYPE_CHECKING:
    from resticle.config.schemas import FactorySettings

logger = logging.getLogger(__name__)

R = TypeVar("R", bound="Resource")


class ActionBinder:
    """
    Binds actions onto one resource instance.

    Handed to resource constructors so a resource can declare extra actions
    at construction time:

        class Users(Resource):
            def __init__(self, transport, binder):
                super().__init__(transport, binder)
                binder.create_action("me", ActionDefinition("GET", path="/me"))
    """

    def __init__(self, factory: ResourceFactory, definition: ResourceDefinition):
        self._factory = factory
        self._definition = definition
        self._resource: Resource | None = None

    @property
    def definition(self) -> ResourceDefinition:
        return self._definition

    def attach(self, resource: Resource) -> None:
        self._resource = resource

    def create_action(self, name: str, action: ActionDefinition) -> ActionDispatcher:
        """Bind ``action`` under ``name`` and return its dispatcher."""
        if self._resource is None:
            raise ConfigurationError(
                f"Cannot create action '{name}' before the resource is attached; "
                "call super().__init__(transport, binder) first"
            )
        dispatcher = ActionDispatcher(
            self._factory, self._resource, name, self._definition, action
        )
        self._resource.actions[name] = dispatcher
        return dispatcher


class Resource:
    """
    Base class for resource types.

    Actions are stored in the ``actions`` mapping and exposed as attributes,
    so ``resource.get(...)`` and ``resource.actions["get"](...)`` are the same
    call. Subclasses may define ``transform(item)`` to convert response items.
    """

    def __init__(self, transport: Any, binder: ActionBinder):
        self.transport = transport
        self.actions: dict[str, ActionDispatcher] = {}
        binder.attach(self)

    @property
    def item_transform(self) -> Callable[[Any], Any] | None:
        """The resource's ``transform`` method, if the type defines one."""
        if callable(getattr(type(self), "transform", None)):
            return self.transform  # type: ignore[attr-defined]
        return None

    def __getattr__(self, name: str) -> ActionDispatcher:
        actions = self.__dict__.get("actions")
        if actions is not None and name in actions:
            return actions[name]
        raise AttributeError(f"{type(self).__name__} has no action or attribute '{name}'")

    def __dir__(self) -> Iterable[str]:
        return [*super().__dir__(), *self.__dict__.get("actions", {})]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(actions={list(self.actions)})"


class ResourceFactory:
    """
    Builds and caches resource instances.

    Args:
        transport: Object implementing the ResourceTransport protocol
        root_path: Prefix for every request path (a path or a base URL)
        default_headers: Headers sent with every request; call-site headers win
        interceptors: Request/response interceptors, in execution order
        transforms: Request/response transforms, in execution order
        registry: Definition registry (defaults to the global one)
    """

    def __init__(
        self,
        transport: Any,
        *,
        root_path: str = "",
        default_headers: Mapping[str, Any] | None = None,
        interceptors: Iterable[object] = (),
        transforms: Iterable[object] = (),
        registry: ResourceRegistry | None = None,
    ):
        self.transport = transport
        self.root_path = root_path
        self.default_headers: dict[str, Any] = dict(default_headers or {})
        self.interceptors: list[object] = list(interceptors)
        self.transforms: list[object] = list(transforms)
        self._registry = registry
        self._cache: dict[type, Resource] = {}

    @classmethod
    def from_settings(
        cls,
        transport: Any,
        settings: FactorySettings | None = None,
        **kwargs: Any,
    ) -> ResourceFactory:
        """Create a factory configured from ``FactorySettings`` (env by default)."""
        if settings is None:
            from resticle.config.settings import get_settings

            settings = get_settings()
        return cls(
            transport,
            root_path=settings.root_path,
            default_headers=settings.default_headers,
            **kwargs,
        )

    @property
    def registry(self) -> ResourceRegistry:
        return self._registry if self._registry is not None else get_resource_registry()

    def get(self, resource_type: type[R]) -> R:
        """
        Get the instance for a resource type, building it on first use.

        Raises:
            ConfigurationError: If the type has no registered definition
        """
        cached = self._cache.get(resource_type)
        if cached is not None:
            return cached  # type: ignore[return-value]

        definition = self.registry.get(resource_type)
        resource = self._create(resource_type, definition)
        self._cache[resource_type] = resource

        logger.info(
            f"[factory] Built {resource_type.__name__} with "
            f"actions={list(resource.actions)}"
        )
        return resource

    def build(
        self,
        definition: ResourceDefinition,
        resource_type: type[R] = Resource,  # type: ignore[assignment]
    ) -> R:
        """
        Build a resource straight from a definition, without registration.

        The instance is not cached; each call returns a new one.
        """
        return self._create(resource_type, definition)

    def _create(self, resource_type: type[R], definition: ResourceDefinition) -> R:
        if not (isinstance(resource_type, type) and issubclass(resource_type, Resource)):
            raise ConfigurationError(
                f"{resource_type!r} must be a subclass of resticle.Resource"
            )

        binder = ActionBinder(self, definition)
        resource = resource_type(self.transport, binder)
        for name, action in definition.bound_actions().items():
            binder.create_action(name, action)
        return resource

    # =========================================================================
    # Transport hooks
    # =========================================================================

    def encode_param(self, value: Any) -> str:
        """Encode a path/query value, deferring to the transport if it can."""
        custom = getattr(self.transport, "encode_param", None)
        if callable(custom):
            return custom(value)
        return encode_param(value)

    def serialize_query(self, query: Mapping[str, Any]) -> str:
        """Serialize leftover query params, deferring to the transport if it can."""
        custom = getattr(self.transport, "serialize_query", None)
        if callable(custom):
            return custom(query)
        return serialize_query(query, self.encode_param)

    def resolve_method(self, action: ActionDefinition) -> Callable[[Any], Any]:
        """
        Select the transport function for an action.

        Raises:
            MethodResolutionError: The transport has no function for the method
        """
        custom = getattr(self.transport, "resolve_method", None)
        if callable(custom):
            fn = custom(action)
        else:
            fn = getattr(self.transport, action.method.value.lower(), None)

        if not callable(fn):
            raise MethodResolutionError(action.method.value, self.transport)
        return fn

    def subscribe(self, result: Any, continuation: Callable[[Any], Any]) -> Any:
        """Attach a success continuation using the transport's convention."""
        custom = getattr(self.transport, "subscribe", None)
        if callable(custom):
            return custom(result, continuation)
        return then(result, continuation)

    def __repr__(self) -> str:
        return (
            f"ResourceFactory(transport={type(self.transport).__name__}, "
            f"root_path={self.root_path!r}, cached={len(self._cache)})"
        )
