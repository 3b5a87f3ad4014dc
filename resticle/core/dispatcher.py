"""
Action dispatch.

An ``ActionDispatcher`` is the callable bound to one resource action. Calling
it builds a ``ResourceRequest`` synchronously, then returns an awaitable that
runs the request through the pipeline:

    request interceptors -> request transforms -> transport
        -> response interceptors -> response transforms -> item transform

A failure still unrecovered after the request phase skips the transport and
seeds the response phase, so ``response_error`` hooks see it too.

Argument positions depend on whether the action carries a body:

    resource.save(body, params, options)     # has_body=True  (POST/PUT/PATCH)
    resource.get(params, options)            # has_body=False (GET/DELETE/HEAD)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import ShapeMismatchError
from .interceptors import REQUEST_HOOKS, RESPONSE_HOOKS, execute_interceptors
from .paths import join_path, prefix_root, resolve_path
from .request import RequestOptions, ResourceRequest
from .transforms import REQUEST, RESPONSE, apply_transforms
from .utils import is_sequence, resolve

if TYPE_CHECKING:
    from .definitions import ActionDefinition, ResourceDefinition
    from .factory import Resource, ResourceFactory

logger = logging.getLogger(__name__)


class ActionDispatcher:
    """
    Callable implementing one declared action.

    Configuration that may change over the factory's lifetime (root path,
    default headers, interceptors, transforms) is read when the action is
    called, never cached here.
    """

    def __init__(
        self,
        factory: ResourceFactory,
        resource: Resource,
        name: str,
        definition: ResourceDefinition,
        action: ActionDefinition,
    ):
        self._factory = factory
        self._resource = resource
        self.name = name
        self.action = action
        self.template = join_path(definition.path, action.path)
        self._resource_params = definition.params

    @property
    def qualified_name(self) -> str:
        return f"{type(self._resource).__name__}.{self.name}"

    def __call__(
        self,
        first: Any = None,
        second: Any = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Dispatch the action.

        Returns whatever the transport's ``subscribe`` returns, an awaitable
        for the bundled transports.

        Raises:
            MethodResolutionError: The transport has no function for the method
        """
        if self.action.has_body:
            body, params = first, second
        else:
            body, params = None, first
            if second is not None:
                options = second

        request = self.build_request(body, params, options)
        send = self._factory.resolve_method(self.action)
        return self._factory.subscribe(self._perform(request, send), self._finalize)

    def build_request(
        self,
        body: Any,
        params: Mapping[str, Any] | None,
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> ResourceRequest:
        """Resolve parameters, path, query and headers into a request."""
        factory = self._factory
        opts = RequestOptions.coerce(options)

        merged = {**self._resource_params, **self.action.params, **dict(params or {})}
        populated, query = resolve_path(
            self.template, merged, body, factory.encode_param
        )

        url = prefix_root(factory.root_path, populated)
        query_string = factory.serialize_query(query)

        return ResourceRequest(
            method=self.action.method,
            url=url,
            path=f"{url}?{query_string}" if query_string else url,
            headers={**factory.default_headers, **opts.headers},
            search=query,
            with_credentials=opts.with_credentials,
            response_type=opts.response_type,
            body=body,
            action=self.action,
            options=opts,
            action_name=self.qualified_name,
        )

    async def _perform(
        self,
        request: ResourceRequest,
        send: Callable[[Any], Any],
    ) -> Any:
        # Later changes to the factory's lists do not affect this call
        interceptors = tuple(self._factory.interceptors)
        transforms = tuple(self._factory.transforms)

        try:
            req = await execute_interceptors(request, interceptors, REQUEST_HOOKS)
            req = await apply_transforms(req, transforms, REQUEST)
        except Exception as e:
            # The transport is skipped; response_error hooks may still recover
            logger.warning(
                f"[dispatcher:{self.qualified_name}] Request phase failed: {e!r}"
            )
            data = await execute_interceptors(
                None, interceptors, RESPONSE_HOOKS, request, failure=e
            )
            return await apply_transforms(data, transforms, RESPONSE)

        logger.info(
            f"[dispatcher:{self.qualified_name}] "
            f"{self.action.method.value} {getattr(req, 'path', req)}"
        )

        try:
            data = await resolve(send(req))
        except Exception as e:
            logger.warning(
                f"[dispatcher:{self.qualified_name}] Transport failed: {e!r}"
            )
            data = await execute_interceptors(
                None, interceptors, RESPONSE_HOOKS, req, failure=e
            )
        else:
            data = await execute_interceptors(data, interceptors, RESPONSE_HOOKS, req)

        return await apply_transforms(data, transforms, RESPONSE)

    def _finalize(self, data: Any) -> Any:
        """Enforce the array shape and apply the resource's item transform."""
        if self.action.is_array and not is_sequence(data):
            raise ShapeMismatchError(self.qualified_name, data)

        item_transform = self._resource.item_transform if self.action.transform else None
        if item_transform is None:
            return data

        if self.action.is_array:
            return [item_transform(item) for item in data]
        return item_transform(data)

    def __repr__(self) -> str:
        return (
            f"ActionDispatcher({self.qualified_name}, "
            f"{self.action.method.value} {self.template})"
        )
