"""
In-memory transport for tests.

``MockTransport`` records every request it receives and answers from a
queue of canned responses (or failures), falling back to a default value.
In deferred mode requests stay pending until the test resolves them with
``step()``, ``step_error()`` or ``flush()``, so answers can arrive in any
order.

Example:
    transport = MockTransport()
    transport.respond({"id": 1, "name": "Ada"})

    factory = ResourceFactory(transport, root_path="/api")
    user = await factory.get(Users).get({"id": 1})

    transport.expect_get(path="/api/users/1")
    transport.verify_no_outstanding_responses()

Deferred:
    transport = MockTransport(deferred=True)
    task = asyncio.ensure_future(factory.get(Users).get({"id": 1}))

    await transport.wait_for_pending()
    transport.step({"id": 1, "name": "Ada"})
    user = await task
"""

from __future__ import annotations

import asyncio
import copy
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from resticle.core.definitions import HttpMethod
from resticle.core.utils import freeze, resolve

from .protocol import BaseTransport

if TYPE_CHECKING:
    from resticle.core.request import ResourceRequest

_UNSET = object()


@dataclass(frozen=True, slots=True)
class _Failure:
    exc: Exception


@dataclass(slots=True)
class PendingRequest:
    """A deferred request waiting for the test to answer it."""

    request: ResourceRequest
    future: asyncio.Future = field(repr=False)


class MockTransport(BaseTransport):
    """
    Transport double with queued responses and request assertions.

    Args:
        default: Returned when the queue is empty and no handler is set
        handler: Optional ``handler(req)`` computing the response dynamically;
            consulted only when the queue is empty
        deferred: Hold every request pending until ``step()``, ``step_error()``
            or ``flush()`` answers it; the queue, handler and default are
            not consulted
    """

    def __init__(
        self,
        default: Any = None,
        *,
        handler: Callable[[ResourceRequest], Any] | None = None,
        deferred: bool = False,
    ):
        self.default = default
        self.handler = handler
        self.deferred = deferred
        self.requests: list[ResourceRequest] = []
        self.successful: list[ResourceRequest] = []
        self.rejected: list[ResourceRequest] = []
        self._queue: deque[Any] = deque()
        self._pending: deque[PendingRequest] = deque()

    # =========================================================================
    # Scripting
    # =========================================================================

    def respond(self, *values: Any) -> MockTransport:
        """Queue one or more responses, served in order."""
        self._queue.extend(values)
        return self

    def fail(self, exc: Exception) -> MockTransport:
        """Queue a failure; the matching request raises ``exc``."""
        self._queue.append(_Failure(exc))
        return self

    async def request(self, req: ResourceRequest) -> Any:
        self.requests.append(req)
        try:
            result = await self._answer(req)
        except Exception:
            self.rejected.append(req)
            raise
        self.successful.append(req)
        return result

    async def _answer(self, req: ResourceRequest) -> Any:
        if self.deferred:
            pending = PendingRequest(req, asyncio.get_running_loop().create_future())
            self._pending.append(pending)
            return await pending.future

        if self._queue:
            item = self._queue.popleft()
            if isinstance(item, _Failure):
                raise item.exc
            return copy.deepcopy(item)

        if self.handler is not None:
            return await resolve(self.handler(req))

        return copy.deepcopy(self.default)

    # =========================================================================
    # Deferred answers
    # =========================================================================

    @property
    def pending(self) -> list[ResourceRequest]:
        """Deferred requests not yet answered, oldest first."""
        return [p.request for p in self._pending]

    def step(self, value: Any = None) -> ResourceRequest:
        """Resolve the oldest pending request with ``value`` and return it."""
        pending = self._next_pending()
        pending.future.set_result(copy.deepcopy(value))
        return pending.request

    def step_error(self, exc: Exception) -> ResourceRequest:
        """Reject the oldest pending request with ``exc`` and return it."""
        pending = self._next_pending()
        pending.future.set_exception(exc)
        return pending.request

    def flush(self, value: Any = None) -> list[ResourceRequest]:
        """Resolve every pending request with ``value``."""
        flushed = []
        while any(not p.future.done() for p in self._pending):
            flushed.append(self.step(value))
        return flushed

    async def wait_for_pending(self, count: int = 1, *, max_ticks: int = 100) -> None:
        """
        Yield to the event loop until ``count`` requests are pending.

        Requests reach the transport only after the interceptor chain has
        run, which takes a few loop iterations.
        """
        for _ in range(max_ticks):
            if len(self._pending) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(
            f"Expected {count} pending requests, have {len(self._pending)}"
        )

    def _next_pending(self) -> PendingRequest:
        while self._pending:
            pending = self._pending.popleft()
            if not pending.future.done():
                return pending
        raise AssertionError("No pending requests to answer")

    # =========================================================================
    # Assertions
    # =========================================================================

    @property
    def last_request(self) -> ResourceRequest:
        if not self.requests:
            raise AssertionError("No requests were made")
        return self.requests[-1]

    def expect(
        self,
        method: HttpMethod | str,
        *,
        path: str | None = None,
        headers: Mapping[str, Any] | None = None,
        search: Mapping[str, Any] | None = None,
        with_credentials: bool | None = None,
        body: Any = _UNSET,
    ) -> ResourceRequest:
        """
        Assert a matching request was made and return it.

        ``headers`` and ``search`` match as subsets; the other fields must be
        equal. Fields left out are not checked.
        """
        method = HttpMethod(str(getattr(method, "value", method)).upper())

        for req in self.requests:
            if req.method is not method:
                continue
            if path is not None and req.path != path:
                continue
            if headers is not None and not _contains(req.headers, headers):
                continue
            if search is not None and not _contains(req.search, search):
                continue
            if with_credentials is not None and req.with_credentials != with_credentials:
                continue
            if body is not _UNSET and req.body != body:
                continue
            return req

        seen = ", ".join(repr(r) for r in self.requests) or "(none)"
        raise AssertionError(
            f"Expected {method.value} request matching path={path!r} "
            f"headers={headers!r} search={search!r}; made: {seen}"
        )

    def expect_get(self, **criteria: Any) -> ResourceRequest:
        return self.expect(HttpMethod.GET, **criteria)

    def expect_post(self, **criteria: Any) -> ResourceRequest:
        return self.expect(HttpMethod.POST, **criteria)

    def expect_put(self, **criteria: Any) -> ResourceRequest:
        return self.expect(HttpMethod.PUT, **criteria)

    def expect_delete(self, **criteria: Any) -> ResourceRequest:
        return self.expect(HttpMethod.DELETE, **criteria)

    def expect_patch(self, **criteria: Any) -> ResourceRequest:
        return self.expect(HttpMethod.PATCH, **criteria)

    def verify_no_outstanding_responses(self) -> None:
        """Fail if queued responses were never consumed."""
        if self._queue:
            raise AssertionError(
                f"Expected no outstanding responses. "
                f"Still have {len(self._queue)} queued."
            )

    def verify_no_outstanding_requests(self) -> None:
        """Fail if deferred requests were never answered."""
        if self._pending:
            raise AssertionError(
                f"Expected no outstanding requests. "
                f"Still have {len(self._pending)} requests pending."
            )

    def reset(self) -> None:
        """Forget recorded requests, queued responses and pending requests."""
        for pending in self._pending:
            pending.future.cancel()
        self.requests.clear()
        self.successful.clear()
        self.rejected.clear()
        self._queue.clear()
        self._pending.clear()


def _contains(actual: Mapping[str, Any], expected: Mapping[str, Any]) -> bool:
    return all(
        key in actual and actual[key] == freeze(value) for key, value in expected.items()
    )
