"""
resticle - declarative REST resource clients.

Describe an HTTP resource once (path template, parameters, actions) and get
back an object whose actions are async callables:

- **Definitions**: Path templates with ``:name`` segments, literal or
  body-referencing (``"@id"``) parameters, per-action method and shape
- **Interceptors**: Success/failure hooks around requests and responses,
  with recovery
- **Transforms**: Reshape every outgoing request and incoming response
- **Transports**: Pluggable HTTP clients (httpx built in, in-memory for tests)

Quick Start:
    >>> from resticle import Resource, ResourceFactory, register_resource
    >>> from resticle.transports import HttpxTransport
    >>>
    >>> class Users(Resource):
    ...     def transform(self, item):
    ...         return User(**item)
    >>>
    >>> register_resource(Users, path="/users/:id", params={"id": "@id"})
    >>> factory = ResourceFactory(HttpxTransport(), root_path="https://api.example.com")
    >>> user = await factory.get(Users).get({"id": 42})
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Core exports for convenient imports
from resticle.core import (
    ActionDefinition,
    ConfigurationError,
    HttpMethod,
    MethodResolutionError,
    RequestOptions,
    Resource,
    ResourceDefinition,
    ResourceFactory,
    ResourceRequest,
    ResponseContentType,
    ResticleError,
    ShapeMismatchError,
    TransportError,
    get_resource_registry,
    register_resource,
)

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Definitions
    "ActionDefinition",
    "HttpMethod",
    "ResourceDefinition",
    "ResponseContentType",
    # Factory
    "Resource",
    "ResourceFactory",
    "RequestOptions",
    "ResourceRequest",
    "get_resource_registry",
    "register_resource",
    # Errors
    "ResticleError",
    "ConfigurationError",
    "MethodResolutionError",
    "ShapeMismatchError",
    "TransportError",
]
