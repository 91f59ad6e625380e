"""Tests for volley.templating.engine - placeholder substitution."""

from datetime import datetime

import pytest

from volley.execution.store import ResultStore
from volley.models import ExecutionResult, HTTPResponse, RequestSpec
from volley.templating import MISSING, TemplateEngine, find_placeholders


def _stored(name: str, body_json=None, request_body=None, with_response: bool = True):
    return ExecutionResult(
        name=name,
        passed=True,
        request=RequestSpec(method="POST", body=request_body),
        response=HTTPResponse(status_code=200, body_json=body_json) if with_response else None,
        executed_at=datetime(2024, 1, 1),
    )


@pytest.fixture
def engine() -> TemplateEngine:
    store = ResultStore()
    store.put(
        _stored(
            "create",
            body_json={
                "data": {"id": "123", "count": 5.0, "ratio": 0.5, "ok": True, "tags": ["a", "b"]},
                "items": [{"sku": "X1"}],
            },
            request_body={"username": "alice", "profile": {"age": 30}},
        )
    )
    store.put(_stored("noresp", with_response=False, request_body={"k": "v"}))
    store.put(_stored("listresp", body_json=[{"id": 1}, {"id": 2}]))
    return TemplateEngine(store.reader())


class TestFindPlaceholders:
    """Tests for find_placeholders."""

    def test_extracts_inner_expressions(self):
        """All {{...}} expressions are returned without braces."""
        assert find_placeholders("/u/{{a.id}}/p/{{$random.uuid}}") == ["a.id", "$random.uuid"]

    def test_empty_braces_not_a_placeholder(self):
        """{{}} does not match."""
        assert find_placeholders("{{}}") == []


class TestResolve:
    """Tests for TemplateEngine.resolve."""

    def test_default_scope_is_response(self, engine):
        """Without a scope the parsed response body is used."""
        assert engine.resolve("create.data.id") == "123"

    def test_explicit_response_scope(self, engine):
        """response. reads the parsed response body."""
        assert engine.resolve("create.response.items[0].sku") == "X1"

    def test_request_scope(self, engine):
        """request. reads the stored request body."""
        assert engine.resolve("create.request.profile.age") == 30

    def test_empty_path_returns_whole_payload(self, engine):
        """A bare test name yields the whole response body."""
        assert engine.resolve("listresp") == [{"id": 1}, {"id": 2}]

    def test_unknown_test_is_missing(self, engine):
        """A test with no stored result resolves to MISSING."""
        assert engine.resolve("missing.response.x") is MISSING

    def test_absent_response_is_missing(self, engine):
        """A stored result without a response resolves to MISSING."""
        assert engine.resolve("noresp.response.x") is MISSING
        assert engine.resolve("noresp.request.k") == "v"

    def test_unresolvable_path_is_missing(self, engine):
        """A path that cannot be followed resolves to MISSING."""
        assert engine.resolve("create.data.nope") is MISSING

    def test_unknown_random_kind_is_missing(self, engine):
        """An unknown $random kind resolves to MISSING."""
        assert engine.resolve("$random.bogus") is MISSING


class TestSubstituteString:
    """Tests for TemplateEngine.substitute_string."""

    def test_mixed_text(self, engine):
        """Placeholders embedded in text are replaced by their string forms."""
        assert engine.substitute_string("/users/{{create.data.id}}/x") == "/users/123/x"

    def test_string_forms(self, engine):
        """Booleans, whole floats, and containers use the default forms."""
        text = "{{create.data.ok}} {{create.data.count}} {{create.data.ratio}} {{create.data.tags}}"
        assert engine.substitute_string(text) == 'true 5 0.5 ["a","b"]'

    def test_unresolved_kept_literally(self, engine):
        """An unresolved placeholder stays as literal text."""
        assert engine.substitute_string("{{missing.response.x}}") == "{{missing.response.x}}"

    def test_random_values_inserted(self, engine):
        """$random placeholders are generated."""
        value = engine.substitute_string("id-{{$random.number.4}}")
        assert value.startswith("id-")
        assert len(value) == 7


class TestSubstituteValue:
    """Tests for TemplateEngine.substitute_value."""

    def test_whole_placeholder_keeps_native_type(self, engine):
        """A string that is exactly one placeholder takes the native value."""
        assert engine.substitute_value("{{create.data.ok}}") is True
        assert engine.substitute_value("{{create.data.tags}}") == ["a", "b"]
        assert engine.substitute_value("  {{create.data.ratio}} ") == 0.5

    def test_whole_float_becomes_int(self, engine):
        """A whole-number float becomes an int."""
        value = engine.substitute_value("{{create.data.count}}")
        assert value == 5
        assert isinstance(value, int)

    def test_mixed_text_builds_string(self, engine):
        """A placeholder inside other text uses the string rule."""
        assert engine.substitute_value("n={{create.data.count}}") == "n=5"

    def test_recurses_into_containers(self, engine):
        """Mappings and lists are walked depth-first."""
        body = {"user": {"id": "{{create.data.id}}"}, "tags": ["{{create.data.tags}}", 1]}
        assert engine.substitute_value(body) == {
            "user": {"id": "123"},
            "tags": [["a", "b"], 1],
        }

    def test_unresolved_whole_placeholder_kept(self, engine):
        """An unresolved placeholder is sent unchanged."""
        assert engine.substitute_value("{{missing.response.x}}") == "{{missing.response.x}}"

    def test_resolved_containers_are_copies(self, engine):
        """Mutating a substituted container does not touch the stored result."""
        tags = engine.substitute_value("{{create.data.tags}}")
        tags.append("c")
        assert engine.resolve("create.data.tags") == ["a", "b"]


class TestRenderRequest:
    """Tests for TemplateEngine.render_request."""

    def test_all_parts_substituted(self, engine):
        """Path, headers, query, and body are all rendered."""
        request = RequestSpec(
            method="PUT",
            path="/users/{{create.data.id}}",
            headers={"X-Flag": "{{create.data.ok}}"},
            query={"page": "{{create.data.count}}"},
            body={"id": "{{create.data.id}}", "n": "{{create.data.count}}"},
        )
        rendered = engine.render_request(request)
        assert rendered.path == "/users/123"
        assert rendered.headers == {"X-Flag": "true"}
        assert rendered.query == {"page": 5}
        assert rendered.body == {"id": "123", "n": 5}
        assert rendered.method == "PUT"

    def test_original_not_modified(self, engine):
        """The template request is left untouched."""
        request = RequestSpec(path="/u/{{create.data.id}}", body={"id": "{{create.data.id}}"})
        engine.render_request(request)
        assert request.path == "/u/{{create.data.id}}"
        assert request.body == {"id": "{{create.data.id}}"}
