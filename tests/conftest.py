"""
Pytest configuration and fixtures for resticle tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from resticle.core import ...` to work without installing
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from resticle.config.settings import get_settings  # noqa: E402
from resticle.core import (  # noqa: E402
    ActionDefinition,
    HttpMethod,
    Resource,
    ResourceDefinition,
    ResourceFactory,
    register_resource,
    reset_resource_registry,
)
from resticle.transports import MockTransport  # noqa: E402


class SampleResource(Resource):
    """Resource exercising every kind of action declaration."""

    def __init__(self, transport, binder):
        super().__init__(transport, binder)
        binder.create_action("blorg", ActionDefinition(HttpMethod.GET, path="/blorg"))

    def transform(self, item):
        return {**item, "transformed": True}


SAMPLE_DEFINITION = ResourceDefinition(
    path="/test/:id",
    params={"id": "@id"},
    actions={
        "charge": ActionDefinition(HttpMethod.PUT, path="/charge"),
        "put_with_param": ActionDefinition(
            HttpMethod.PUT, path="/refund/:amount", params={"amount": 123}
        ),
        "post_with_param": ActionDefinition(
            HttpMethod.POST, path="/:name/post", params={"name": "@name"}
        ),
        "post_with_path": ActionDefinition(
            HttpMethod.POST, path="/post", params={"id": "@account.id.value"}
        ),
        "get": ActionDefinition(HttpMethod.GET),
        "list": ActionDefinition(HttpMethod.GET, is_array=True),
        "prepopulated_search": ActionDefinition(HttpMethod.GET, params={"test": True}),
        "get_without_transform": ActionDefinition(HttpMethod.GET, transform=False),
        "get_with_array_transform": ActionDefinition(
            HttpMethod.GET, path="/array", is_array=True
        ),
        "ignore_body_param_not_in_path": ActionDefinition(
            HttpMethod.POST, params={"blorg": "@blorg"}
        ),
    },
)


@pytest.fixture(autouse=True)
def clean_registry():
    """Give every test a fresh global registry and settings cache."""
    reset_resource_registry()
    get_settings.cache_clear()
    yield
    reset_resource_registry()
    get_settings.cache_clear()


@pytest.fixture
def transport():
    """In-memory transport answering {} when nothing is queued."""
    return MockTransport(default={})


@pytest.fixture
def factory(transport):
    """Factory rooted at /rest with SampleResource registered."""
    register_resource(SampleResource, SAMPLE_DEFINITION)
    return ResourceFactory(transport, root_path="/rest")


@pytest.fixture
def sample(factory):
    """The factory's SampleResource instance."""
    return factory.get(SampleResource)


@pytest.fixture
def sample_type():
    """The SampleResource class, for tests that need the type itself."""
    return SampleResource
