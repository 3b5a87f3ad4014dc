"""
Tests for ResourceFactory and Resource.
"""

from unittest.mock import MagicMock

import pytest

from resticle.config import FactorySettings
from resticle.core import (
    ActionBinder,
    ActionDefinition,
    ActionDispatcher,
    ConfigurationError,
    Resource,
    ResourceDefinition,
    ResourceFactory,
    ResourceRegistry,
    register_resource,
)
from resticle.transports import MockTransport


class Unregistered(Resource):
    pass


SAMPLE_LIKE = ResourceDefinition(path="/sample", actions={"get": ActionDefinition()})


class TestResourceFactory:
    """Tests for ResourceFactory.get and build."""

    def test_singleton_per_type(self, factory, sample_type):
        first = factory.get(sample_type)
        second = factory.get(sample_type)
        assert first is second

    def test_separate_factories_build_separate_instances(self, factory, transport, sample_type):
        other = ResourceFactory(transport)
        assert other.get(sample_type) is not factory.get(sample_type)

    def test_unregistered_type_raises(self, factory):
        with pytest.raises(ConfigurationError, match="Unregistered is not a configured resource"):
            factory.get(Unregistered)

    def test_non_resource_type_rejected(self, transport):
        class Plain:
            pass

        register_resource(Plain, path="/plain")
        with pytest.raises(ConfigurationError, match="subclass of resticle.Resource"):
            ResourceFactory(transport).get(Plain)

    def test_actions_bound(self, sample):
        assert set(sample.actions) == {
            "create",
            "update",
            "delete",
            "blorg",
            "charge",
            "put_with_param",
            "post_with_param",
            "post_with_path",
            "get",
            "list",
            "prepopulated_search",
            "get_without_transform",
            "get_with_array_transform",
            "ignore_body_param_not_in_path",
        }
        assert isinstance(sample.get, ActionDispatcher)
        assert sample.get is sample.actions["get"]

    def test_resource_receives_transport(self, sample, transport):
        assert sample.transport is transport

    def test_defaults_bound_without_actions(self, transport):
        class Users(Resource):
            pass

        register_resource(Users, path="/users/:id", params={"id": "@id"})
        users = ResourceFactory(transport).get(Users)
        assert set(users.actions) == {"create", "update", "delete", "get", "list"}

    def test_defaults_disabled(self, transport):
        class Bare(Resource):
            pass

        register_resource(Bare, path="/bare/:id", defaults=False)
        assert ResourceFactory(transport).get(Bare).actions == {}

    def test_build_is_not_cached(self, transport):
        factory = ResourceFactory(transport)
        definition = ResourceDefinition(path="/things", defaults=True)

        first = factory.build(definition)
        second = factory.build(definition)

        assert type(first) is Resource
        assert first is not second

    def test_build_with_resource_type(self, transport, sample_type):
        resource = ResourceFactory(transport).build(SAMPLE_LIKE, sample_type)
        assert isinstance(resource, sample_type)
        assert "blorg" in resource.actions

    def test_private_registry(self, transport):
        registry = ResourceRegistry()
        registry.register(Unregistered, path="/private", defaults=False)

        factory = ResourceFactory(transport, registry=registry)

        assert factory.registry is registry
        assert factory.get(Unregistered).actions == {}

    def test_from_settings(self, transport):
        settings = FactorySettings(root_path="/api", default_headers={"X-Key": "k"})
        factory = ResourceFactory.from_settings(transport, settings)
        assert factory.root_path == "/api"
        assert factory.default_headers == {"X-Key": "k"}

    def test_from_environment(self, transport, monkeypatch):
        monkeypatch.setenv("RESTICLE_ROOT_PATH", "https://env.test")
        factory = ResourceFactory.from_settings(transport)
        assert factory.root_path == "https://env.test"


class TestTransportHooks:
    def test_encode_param_defers_to_transport(self):
        transport = MockTransport()
        transport.encode_param = lambda value: f"<{value}>"
        assert ResourceFactory(transport).encode_param("x") == "<x>"

    def test_serialize_query_defers_to_transport(self):
        transport = MockTransport()
        transport.serialize_query = MagicMock(return_value="custom=1")
        assert ResourceFactory(transport).serialize_query({"a": 1}) == "custom=1"
        transport.serialize_query.assert_called_once_with({"a": 1})

    def test_default_serialize_uses_transport_encoder(self):
        transport = MockTransport()
        transport.encode_param = lambda value: str(value).upper()
        assert ResourceFactory(transport).serialize_query({"a": "b"}) == "A=B"

    @pytest.mark.asyncio
    async def test_custom_encoder_used_in_paths(self):
        transport = MockTransport()
        transport.encode_param = lambda value: str(value).replace(" ", "+")
        resource = ResourceFactory(transport).build(
            ResourceDefinition(path="/q/:term", defaults=True)
        )
        await resource.get({"term": "a b"})
        transport.expect_get(path="/q/a+b")


class TestResource:
    def test_unknown_attribute(self, sample):
        with pytest.raises(AttributeError, match="has no action or attribute 'missing'"):
            sample.missing

    def test_dir_lists_actions(self, sample):
        assert "charge" in dir(sample)

    def test_item_transform(self, sample, transport):
        assert sample.item_transform({"a": 1}) == {"a": 1, "transformed": True}
        assert ResourceFactory(transport).build(SAMPLE_LIKE).item_transform is None

    def test_binder_requires_attached_resource(self, factory):
        binder = ActionBinder(factory, SAMPLE_LIKE)
        with pytest.raises(ConfigurationError, match="before the resource is attached"):
            binder.create_action("x", ActionDefinition())

    def test_repr(self, sample):
        assert repr(sample).startswith("SampleResource(actions=[")
