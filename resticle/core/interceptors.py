"""
Interceptor chain execution.

An interceptor is any object with some subset of four hooks:

    request(req)                   -> new request (or awaitable)
    request_error(exc)             -> recovered request (or awaitable)
    response(data, req)            -> new response data (or awaitable)
    response_error(exc, req)       -> recovered response data (or awaitable)

The chain is folded strictly in registration order. At any point it is
either *succeeded* (carrying a value) or *failed* (carrying an exception):

- success hooks only run while the chain is succeeded; raising flips it
  to failed
- failure hooks only run while the chain is failed; returning a value
  flips it back to succeeded, raising replaces the failure reason
- missing hooks are no-ops

An interceptor's failure hook runs right after its own success hook, so an
interceptor can recover from its own failure as well as from earlier ones.
A failure still in flight after the last interceptor is raised to the caller.

Example:
    class AuthInterceptor:
        def request(self, req):
            return req.with_headers(Authorization=f"Bearer {self.token}")

    class UnauthorizedFallback:
        async def response_error(self, exc, req):
            if getattr(exc, "status_code", None) == 401:
                return {"anonymous": True}
            raise exc

    data = await execute_interceptors(
        raw, [AuthInterceptor(), UnauthorizedFallback()], RESPONSE_HOOKS, req
    )
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol, TypeVar, runtime_checkable

from .utils import resolve

logger = logging.getLogger(__name__)

T = TypeVar("T")

REQUEST_HOOKS: tuple[str, str] = ("request", "request_error")
RESPONSE_HOOKS: tuple[str, str] = ("response", "response_error")


# =============================================================================
# Hook protocols (an interceptor may implement any combination)
# =============================================================================


@runtime_checkable
class RequestInterceptor(Protocol):
    def request(self, req: Any) -> Any: ...


@runtime_checkable
class RequestErrorInterceptor(Protocol):
    def request_error(self, exc: BaseException) -> Any: ...


@runtime_checkable
class ResponseInterceptor(Protocol):
    def response(self, data: Any, req: Any) -> Any: ...


@runtime_checkable
class ResponseErrorInterceptor(Protocol):
    def response_error(self, exc: BaseException, req: Any) -> Any: ...


Interceptor = (
    RequestInterceptor
    | RequestErrorInterceptor
    | ResponseInterceptor
    | ResponseErrorInterceptor
)


def _hook(interceptor: object, name: str) -> Any:
    hook = getattr(interceptor, name, None)
    return hook if callable(hook) else None


async def execute_interceptors(
    initial: T,
    interceptors: Iterable[object],
    hooks: tuple[str, str],
    *args: Any,
    failure: Exception | None = None,
) -> T:
    """
    Run ``initial`` through the interceptors' hooks.

    Args:
        initial: Starting chain value
        interceptors: Interceptors in registration order
        hooks: (success hook name, failure hook name)
        *args: Extra context passed to every hook after the value/exception
        failure: Start the chain in the failed state with this exception

    Returns:
        The final chain value

    Raises:
        Exception: The failure still in flight after the last interceptor
    """
    success_name, failure_name = hooks
    value: Any = initial
    error: Exception | None = failure

    for interceptor in interceptors:
        name = type(interceptor).__name__

        on_success = _hook(interceptor, success_name)
        if on_success is not None and error is None:
            try:
                value = await resolve(on_success(value, *args))
            except Exception as e:
                logger.debug(f"[interceptors] {name}.{success_name} failed: {e!r}")
                error = e

        on_failure = _hook(interceptor, failure_name)
        if on_failure is not None and error is not None:
            try:
                value = await resolve(on_failure(error, *args))
            except Exception as e:
                logger.debug(f"[interceptors] {name}.{failure_name} re-raised: {e!r}")
                error = e
            else:
                logger.warning(
                    f"[interceptors] {name}.{failure_name} recovered from "
                    f"{type(error).__name__}"
                )
                error = None

    if error is not None:
        raise error
    return value
