"""
Exceptions for resticle.

Configuration problems are raised eagerly, when a resource is looked up or an
action is called. Runtime failures (transport errors, failing interceptors,
response shape mismatches) travel through the async chain and only surface
if no ``response_error`` hook recovers them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .request import ResourceRequest


class ResticleError(Exception):
    """Base exception for all resticle errors."""

    pass


class ConfigurationError(ResticleError):
    """
    Raised when a resource is used without a valid definition.

    Typical causes: calling ``ResourceFactory.get()`` with a type that was
    never registered, or loading malformed definition data.
    """

    pass


class MethodResolutionError(ResticleError):
    """Raised when an action's HTTP method has no matching transport function."""

    def __init__(self, method: str, transport: object):
        super().__init__(
            f"{method} is not a valid request method for {type(transport).__name__}"
        )
        self.method = method


class ShapeMismatchError(ResticleError):
    """Raised when an ``is_array`` action receives a non-sequence response."""

    def __init__(self, action_name: str, received: Any):
        super().__init__(
            f"Action '{action_name}' expected an array response, "
            f"got {type(received).__name__}"
        )
        self.action_name = action_name
        self.received = received


class TransportError(ResticleError):
    """
    Raised by transports when the HTTP exchange fails.

    Covers both error statuses (>= 400) and lower-level client failures
    (timeouts, refused connections), in which case ``status_code`` is None.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
        request: ResourceRequest | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.request = request

    def __str__(self) -> str:
        parts = [self.args[0]]
        if self.status_code:
            parts.append(f"(status={self.status_code})")
        return " ".join(parts)
