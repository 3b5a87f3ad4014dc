"""
Transport Protocol for resticle.

A transport performs the actual HTTP exchange for a ``ResourceRequest``.
The core never talks to an HTTP library directly; it only relies on the
methods below, which keeps the factory usable with any client (httpx, a
framework's test client, an in-memory double).

Required:
    get(req), post(req), put(req), delete(req)  -> awaitable result
    subscribe(result, continuation)             -> awaitable result

Optional (looked up with getattr, defaults used when absent):
    patch(req), head(req)
    encode_param(value) -> str
    serialize_query(mapping) -> str
    resolve_method(action) -> callable
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from resticle.core.utils import then

if TYPE_CHECKING:
    from resticle.core.request import ResourceRequest


@runtime_checkable
class ResourceTransport(Protocol):
    """
    Interface the ResourceFactory dispatches through.

    ``subscribe`` decides how a continuation is attached to a pending
    result. For asyncio transports that is "await, then call"; a transport
    built on another async primitive can return its own handle instead.
    """

    def get(self, req: ResourceRequest) -> Awaitable[Any]: ...

    def post(self, req: ResourceRequest) -> Awaitable[Any]: ...

    def put(self, req: ResourceRequest) -> Awaitable[Any]: ...

    def delete(self, req: ResourceRequest) -> Awaitable[Any]: ...

    def subscribe(
        self,
        result: Awaitable[Any],
        continuation: Callable[[Any], Any],
    ) -> Awaitable[Any]: ...


class BaseTransport(ABC):
    """
    Convenience base: every method funnels into ``request()``.

    Subclasses implement ``request`` and inherit the method fan-out and the
    asyncio ``subscribe`` convention.
    """

    @abstractmethod
    async def request(self, req: ResourceRequest) -> Any:
        """Perform the exchange and return the decoded response body."""
        ...

    def get(self, req: ResourceRequest) -> Awaitable[Any]:
        return self.request(req)

    def post(self, req: ResourceRequest) -> Awaitable[Any]:
        return self.request(req)

    def put(self, req: ResourceRequest) -> Awaitable[Any]:
        return self.request(req)

    def delete(self, req: ResourceRequest) -> Awaitable[Any]:
        return self.request(req)

    def patch(self, req: ResourceRequest) -> Awaitable[Any]:
        return self.request(req)

    def head(self, req: ResourceRequest) -> Awaitable[Any]:
        return self.request(req)

    def subscribe(
        self,
        result: Awaitable[Any],
        continuation: Callable[[Any], Any],
    ) -> Awaitable[Any]:
        return then(result, continuation)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
