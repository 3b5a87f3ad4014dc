"""
Resource and action definitions.

Definitions are plain, frozen configuration data. They are built once when a
resource is registered and never change afterwards: parameter values are
parsed into ``LiteralParam`` / ``BodyRef`` at construction time, so the
dispatcher never has to re-inspect ``"@..."`` strings per call.

Example:
    users = ResourceDefinition(
        path="/users/:id",
        params={"id": "@id"},
        actions={
            "get": ActionDefinition(HttpMethod.GET),
            "list": ActionDefinition(HttpMethod.GET, is_array=True),
            "save": ActionDefinition(HttpMethod.POST),
            "avatar": ActionDefinition(
                HttpMethod.PUT,
                path="/avatar/:size",
                params={"size": "large"},
            ),
        },
    )
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from .exceptions import ConfigurationError
from .utils import freeze

BODY_REF_PREFIX = "@"


class HttpMethod(str, Enum):
    """HTTP methods an action can be declared with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"

    @property
    def carries_body(self) -> bool:
        """Whether requests with this method send a payload by default."""
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class ResponseContentType(str, Enum):
    """How the transport should decode the response body."""

    JSON = "json"
    TEXT = "text"
    BYTES = "bytes"


# =============================================================================
# Parameter values
# =============================================================================


@dataclass(frozen=True, slots=True)
class LiteralParam:
    """A parameter whose value is used as given."""

    value: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", freeze(self.value))


@dataclass(frozen=True, slots=True)
class BodyRef:
    """
    A parameter resolved from the call payload.

    ``BodyRef(("account", "id", "value"))`` reads
    ``payload["account"]["id"]["value"]``.
    """

    path: tuple[str, ...]

    @classmethod
    def parse(cls, source: str) -> BodyRef:
        """Build from the ``"@a.b.c"`` notation."""
        return cls(tuple(source[len(BODY_REF_PREFIX):].split(".")))

    @property
    def source(self) -> str:
        return BODY_REF_PREFIX + ".".join(self.path)

    def __str__(self) -> str:
        return self.source


ParamValue = Union[LiteralParam, BodyRef]


def parse_param(value: Any) -> ParamValue:
    """
    Classify a raw parameter value.

    Strings of the form ``"@path.to.field"`` become ``BodyRef``; already
    parsed values are returned unchanged; everything else is a literal.
    """
    if isinstance(value, (LiteralParam, BodyRef)):
        return value
    if (
        isinstance(value, str)
        and value.startswith(BODY_REF_PREFIX)
        and len(value) > len(BODY_REF_PREFIX)
    ):
        return BodyRef.parse(value)
    return LiteralParam(value)


def parse_params(params: Mapping[str, Any] | None) -> Mapping[str, ParamValue]:
    """Parse every value of a parameter map into a read-only mapping."""
    if not params:
        return MappingProxyType({})
    return MappingProxyType({str(k): parse_param(v) for k, v in params.items()})


# =============================================================================
# Definitions
# =============================================================================


@dataclass(frozen=True, slots=True)
class ActionDefinition:
    """
    One HTTP operation declared on a resource.

    Attributes:
        method: HTTP method (string names are accepted, case-insensitive)
        path: Suffix appended to the resource path (may contain ``/:name``)
        params: Default parameters for this action
        is_array: The response must be a list; each item is transformed
        transform: Apply the resource's ``transform()`` to the response.
            Defaults to True for every method except DELETE.
        has_body: The first call argument is the request body.
            Defaults to True for POST, PUT and PATCH.
    """

    method: HttpMethod = HttpMethod.GET
    path: str = ""
    params: Mapping[str, ParamValue] = field(default_factory=dict)
    is_array: bool = False
    transform: bool | None = None
    has_body: bool | None = None

    def __post_init__(self) -> None:
        method = self.method
        if not isinstance(method, HttpMethod):
            try:
                method = HttpMethod(str(method).upper())
            except ValueError:
                raise ConfigurationError(f"Unknown HTTP method: {self.method!r}") from None
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "path", self.path or "")
        object.__setattr__(self, "params", parse_params(self.params))

        if self.transform is None:
            object.__setattr__(self, "transform", method is not HttpMethod.DELETE)
        if self.has_body is None:
            object.__setattr__(self, "has_body", method.carries_body)


DEFAULT_ACTIONS: Mapping[str, ActionDefinition] = MappingProxyType(
    {
        "create": ActionDefinition(HttpMethod.POST),
        "update": ActionDefinition(HttpMethod.PUT),
        "delete": ActionDefinition(HttpMethod.DELETE),
        "get": ActionDefinition(HttpMethod.GET),
        "list": ActionDefinition(HttpMethod.GET, is_array=True),
    }
)


@dataclass(frozen=True, slots=True)
class ResourceDefinition:
    """
    A REST resource: a base path template and its actions.

    Attributes:
        path: Path template, e.g. ``/users/:id``
        params: Default parameters shared by every action
        actions: Action name -> ActionDefinition (a mapping or name/action pairs)
        defaults: Also bind the default create/update/delete/get/list actions;
            set to False for a resource with only its declared actions
    """

    path: str
    params: Mapping[str, ParamValue] = field(default_factory=dict)
    actions: Mapping[str, ActionDefinition] = field(default_factory=dict)
    defaults: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.path, str):
            raise ConfigurationError(f"Resource path must be a string, got {self.path!r}")
        object.__setattr__(self, "params", parse_params(self.params))

        pairs: Iterable[tuple[str, Any]]
        if isinstance(self.actions, Mapping):
            pairs = self.actions.items()
        else:
            pairs = self.actions

        actions: dict[str, ActionDefinition] = {}
        for name, action in pairs:
            if not isinstance(action, ActionDefinition):
                raise ConfigurationError(
                    f"Action '{name}' must be an ActionDefinition, "
                    f"got {type(action).__name__}"
                )
            actions[name] = action
        object.__setattr__(self, "actions", MappingProxyType(actions))

    def bound_actions(self) -> dict[str, ActionDefinition]:
        """All actions the factory binds, defaults first, explicit ones winning."""
        merged: dict[str, ActionDefinition] = {}
        if self.defaults:
            merged.update(DEFAULT_ACTIONS)
        merged.update(self.actions)
        return merged
