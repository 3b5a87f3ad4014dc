"""
Tests for path template resolution.
"""

from types import SimpleNamespace

from resticle.core import BodyRef, join_path, prefix_root, resolve_body_ref, resolve_path

# =============================================================================
# resolve_path Tests
# =============================================================================


class TestResolvePath:
    """Tests for resolve_path."""

    def test_literal_substituted(self):
        path, query = resolve_path("/test/:id", {"id": 123})
        assert path == "/test/123"
        assert query == {}

    def test_unmatched_params_become_query(self):
        path, query = resolve_path("/test/:id", {"id": 1, "q": "x", "page": 2})
        assert path == "/test/1"
        assert query == {"q": "x", "page": 2}

    def test_query_keeps_insertion_order(self):
        _, query = resolve_path("/test", {"b": 1, "a": 2, "c": 3})
        assert list(query) == ["b", "a", "c"]

    def test_value_is_percent_encoded(self):
        path, _ = resolve_path("/files/:name", {"name": "a b/c"})
        assert path == "/files/a%20b%2Fc"

    def test_whole_name_match(self):
        path, query = resolve_path("/x/:identifier/:id", {"id": 5})
        assert path == "/x/5"
        assert query == {}

    def test_missing_literal_drops_segment(self):
        path, _ = resolve_path("/test/:id/post", {"id": None})
        assert path == "/test/post"

    def test_empty_string_drops_segment(self):
        path, _ = resolve_path("/test/:id/post", {"id": ""})
        assert path == "/test/post"

    def test_zero_and_false_are_substituted(self):
        assert resolve_path("/n/:n", {"n": 0})[0] == "/n/0"
        assert resolve_path("/b/:b", {"b": False})[0] == "/b/false"

    def test_unsupplied_placeholders_removed(self):
        path, _ = resolve_path("/a/:x/b/:y", {})
        assert path == "/a/b"

    def test_no_placeholders_left(self):
        path, _ = resolve_path("/a/:x/:y/:z", {"x": 1, "y": "@missing"}, {})
        assert ":" not in path
        assert path == "/a/1"


class TestBodyReferences:
    """Tests for @-references resolved from the payload."""

    def test_resolved_from_payload(self):
        path, query = resolve_path("/test/:name/post", {"name": "@name"}, {"name": "Steven"})
        assert path == "/test/Steven/post"
        assert query == {}

    def test_nested_path(self):
        payload = {"account": {"id": {"value": 7}}}
        path, _ = resolve_path("/acct/:id", {"id": "@account.id.value"}, payload)
        assert path == "/acct/7"

    def test_unresolved_drops_segment(self):
        path, query = resolve_path("/test/:name/post", {"name": "@name"}, {})
        assert path == "/test/post"
        assert query == {}

    def test_none_payload(self):
        path, _ = resolve_path("/test/:id", {"id": "@id"}, None)
        assert path == "/test"

    def test_never_leaks_into_query(self):
        _, query = resolve_path("/test", {"blorg": "@blorg"}, {"blorg": 1})
        assert query == {}

    def test_zero_from_payload_is_substituted(self):
        path, _ = resolve_path("/test/:id", {"id": "@id"}, {"id": 0})
        assert path == "/test/0"

    def test_resolve_from_attributes(self):
        payload = SimpleNamespace(owner=SimpleNamespace(name="ada"))
        assert resolve_body_ref(payload, BodyRef.parse("@owner.name")) == "ada"

    def test_resolve_list_index(self):
        payload = {"items": [{"id": "a"}, {"id": "b"}]}
        assert resolve_body_ref(payload, BodyRef.parse("@items.1.id")) == "b"
        assert resolve_body_ref(payload, BodyRef.parse("@items.5.id")) is None

    def test_resolve_stops_at_none(self):
        assert resolve_body_ref({"a": None}, BodyRef.parse("@a.b.c")) is None


class TestCustomEncoder:
    def test_encoder_is_used_for_path_values(self):
        path, _ = resolve_path("/u/:id", {"id": "abc"}, encode=lambda v: str(v).upper())
        assert path == "/u/ABC"


# =============================================================================
# join_path / prefix_root Tests
# =============================================================================


class TestJoinPath:
    def test_single_slash_between(self):
        assert join_path("/test/", "/charge") == "/test/charge"
        assert join_path("/test", "charge") == "/test/charge"

    def test_empty_suffix(self):
        assert join_path("/test/:id", "") == "/test/:id"

    def test_empty_base(self):
        assert join_path("", "charge") == "/charge"


class TestPrefixRoot:
    def test_path_root(self):
        assert prefix_root("/rest", "/test/1") == "/rest/test/1"

    def test_url_root(self):
        assert prefix_root("https://api.test/v1/", "/users") == "https://api.test/v1/users"

    def test_empty_values(self):
        assert prefix_root("", "/users") == "/users"
        assert prefix_root("/rest", "") == "/rest"
