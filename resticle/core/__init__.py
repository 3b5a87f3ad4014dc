"""
resticle core.

Declarative REST resources: definitions describe paths, parameters and
actions; the factory binds them into callable resources that run each call
through interceptors, transforms and a pluggable transport.
"""

from .definitions import (
    BODY_REF_PREFIX,
    DEFAULT_ACTIONS,
    ActionDefinition,
    BodyRef,
    HttpMethod,
    LiteralParam,
    ParamValue,
    ResourceDefinition,
    ResponseContentType,
    parse_param,
    parse_params,
)
from .dispatcher import ActionDispatcher
from .exceptions import (
    ConfigurationError,
    MethodResolutionError,
    ResticleError,
    ShapeMismatchError,
    TransportError,
)
from .factory import ActionBinder, Resource, ResourceFactory
from .interceptors import (
    REQUEST_HOOKS,
    RESPONSE_HOOKS,
    Interceptor,
    RequestErrorInterceptor,
    RequestInterceptor,
    ResponseErrorInterceptor,
    ResponseInterceptor,
    execute_interceptors,
)
from .paths import join_path, prefix_root, resolve_body_ref, resolve_path
from .query import encode_param, serialize_query
from .registry import (
    ResourceRegistry,
    get_resource_registry,
    register_resource,
    reset_resource_registry,
)
from .request import RequestOptions, ResourceRequest
from .transforms import (
    REQUEST,
    RESPONSE,
    RequestTransform,
    ResponseTransform,
    Transform,
    apply_transforms,
)

__all__ = [
    # Definitions
    "BODY_REF_PREFIX",
    "DEFAULT_ACTIONS",
    "ActionDefinition",
    "BodyRef",
    "HttpMethod",
    "LiteralParam",
    "ParamValue",
    "ResourceDefinition",
    "ResponseContentType",
    "parse_param",
    "parse_params",
    # Factory
    "ActionBinder",
    "ActionDispatcher",
    "Resource",
    "ResourceFactory",
    # Registry
    "ResourceRegistry",
    "get_resource_registry",
    "register_resource",
    "reset_resource_registry",
    # Requests
    "RequestOptions",
    "ResourceRequest",
    # Interceptors
    "REQUEST_HOOKS",
    "RESPONSE_HOOKS",
    "Interceptor",
    "RequestInterceptor",
    "RequestErrorInterceptor",
    "ResponseInterceptor",
    "ResponseErrorInterceptor",
    "execute_interceptors",
    # Transforms
    "REQUEST",
    "RESPONSE",
    "RequestTransform",
    "ResponseTransform",
    "Transform",
    "apply_transforms",
    # Paths & query
    "encode_param",
    "join_path",
    "prefix_root",
    "resolve_body_ref",
    "resolve_path",
    "serialize_query",
    # Errors
    "ResticleError",
    "ConfigurationError",
    "MethodResolutionError",
    "ShapeMismatchError",
    "TransportError",
]
