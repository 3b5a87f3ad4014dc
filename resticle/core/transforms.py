"""
Payload transforms.

Transforms shape every outgoing request and every incoming response, in
registration order. Unlike interceptors they have no failure hooks; an
exception raised by a transform fails the action.

They are distinct from a resource's own ``transform(item)`` method, which
only runs for actions declared with ``transform=True``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from .utils import resolve

REQUEST = "request"
RESPONSE = "response"


@runtime_checkable
class RequestTransform(Protocol):
    def request(self, req: Any) -> Any: ...


@runtime_checkable
class ResponseTransform(Protocol):
    def response(self, data: Any) -> Any: ...


Transform = RequestTransform | ResponseTransform


async def apply_transforms(payload: Any, transforms: Iterable[object], hook: str) -> Any:
    """
    Pass ``payload`` through each transform's ``hook`` method, if it has one.

    Hooks may return plain values or awaitables.
    """
    result = payload
    for transform in transforms:
        fn = getattr(transform, hook, None)
        if callable(fn):
            result = await resolve(fn(result))
    return result
