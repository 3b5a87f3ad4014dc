"""
ResourceRequest - the resolved description of one HTTP call.

Requests are immutable. Interceptors and transforms that want to change a
request derive a new one with ``evolve()``; the request handed to the first
interceptor is never modified by later stages.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from .definitions import ActionDefinition, HttpMethod, ResponseContentType
from .utils import freeze


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """
    Call-site options for a single action invocation.

    Attributes:
        headers: Extra headers, merged over the factory's default headers
        with_credentials: Ask the transport to send cookies/credentials
        response_type: How the transport should decode the response
    """

    headers: Mapping[str, Any] = field(default_factory=dict)
    with_credentials: bool = False
    response_type: ResponseContentType = ResponseContentType.JSON

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", freeze(dict(self.headers or {})))
        object.__setattr__(
            self, "response_type", ResponseContentType(self.response_type)
        )

    @classmethod
    def coerce(cls, options: RequestOptions | Mapping[str, Any] | None) -> RequestOptions:
        """Accept an options instance, a plain dict, or None."""
        if options is None:
            return cls()
        if isinstance(options, RequestOptions):
            return options
        return cls(
            headers=options.get("headers") or {},
            with_credentials=bool(options.get("with_credentials", False)),
            response_type=options.get("response_type", ResponseContentType.JSON),
        )


@dataclass(frozen=True, kw_only=True, slots=True)
class ResourceRequest:
    """
    A fully resolved request, ready for a transport.

    Attributes:
        method: HTTP method
        url: Root-prefixed, populated path without query string
        path: ``url`` plus ``?query`` when the serialized query is non-empty
        headers: Merged headers (read-only)
        search: Query parameters left over after path substitution (read-only)
        with_credentials: Send credentials with the request
        response_type: Expected response encoding
        body: Request payload (None for body-less actions)
        action: The ActionDefinition that produced this request
        options: Frozen copy of the call-site options
        action_name: Name the action was bound under (for logging)
    """

    method: HttpMethod
    url: str
    path: str
    headers: Mapping[str, Any] = field(default_factory=dict)
    search: Mapping[str, Any] = field(default_factory=dict)
    with_credentials: bool = False
    response_type: ResponseContentType = ResponseContentType.JSON
    body: Any = None
    action: ActionDefinition | None = None
    options: RequestOptions = field(default_factory=RequestOptions)
    action_name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, "headers", freeze(dict(self.headers)))
        if not isinstance(self.search, MappingProxyType):
            object.__setattr__(self, "search", freeze(dict(self.search)))

    def evolve(self, **changes: Any) -> ResourceRequest:
        """
        Create a new request with some fields replaced.

        Example:
            signed = req.evolve(headers={**req.headers, "X-Signature": sig})
        """
        return replace(self, **changes)

    def with_headers(self, **extra: Any) -> ResourceRequest:
        """Create a new request with additional headers."""
        return self.evolve(headers={**self.headers, **extra})

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging/debugging."""
        return {
            "method": self.method.value,
            "url": self.url,
            "path": self.path,
            "headers": dict(self.headers),
            "search": dict(self.search),
            "with_credentials": self.with_credentials,
            "response_type": self.response_type.value,
            "action": self.action_name,
        }

    def __repr__(self) -> str:
        return f"ResourceRequest({self.method.value} {self.path})"
