"""Tests for the suite YAML parser with key positions."""

import pytest

from volley.loader.yaml_parser import YAMLParseError, parse_yaml_file, parse_yaml_with_lines


class TestParseYamlWithLines:
    """Tests for parse_yaml_with_lines."""

    def test_returns_data_and_positions(self):
        """Valid YAML returns the mapping and a position map."""
        data, positions = parse_yaml_with_lines("base_url: http://h\nversion: v1\n")
        assert data == {"base_url": "http://h", "version": "v1"}
        assert positions["base_url"] == (1, 1)
        assert positions["version"] == (2, 1)

    def test_nested_keys_use_dotted_paths(self):
        """Keys inside test list items are recorded with their index."""
        source = (
            "apis:\n"
            "  - name: ping\n"
            "    request:\n"
            "      method: GET\n"
            "  - name: pong\n"
        )
        data, positions = parse_yaml_with_lines(source)
        assert data["apis"][1]["name"] == "pong"
        assert positions["apis"] == (1, 1)
        assert positions["apis.0.name"] == (2, 5)
        assert positions["apis.0.request.method"] == (4, 7)
        assert positions["apis.1.name"][0] == 5

    def test_scalars_in_sequences(self):
        """Scalar list items parse normally."""
        data, _ = parse_yaml_with_lines("versions:\n  - v1\n  - 2\n")
        assert data == {"versions": ["v1", 2]}

    def test_syntax_error_raises_with_position(self):
        """Syntax errors raise YAMLParseError with line and column."""
        with pytest.raises(YAMLParseError) as exc_info:
            parse_yaml_with_lines("base_url: x\napis: [oops\n", filename="s.yaml")
        err = exc_info.value
        assert err.line is not None
        assert err.column is not None
        assert err.filename == "s.yaml"

    @pytest.mark.parametrize("source", ["", "# only a comment\n", "- a\n- b\n", "just text\n"])
    def test_non_mapping_documents(self, source):
        """Empty, comment-only, and non-mapping documents yield (None, {})."""
        assert parse_yaml_with_lines(source) == (None, {})

    def test_anchors_and_merge_keys(self):
        """Merge keys are flattened into the mapping."""
        source = (
            "defaults: &d\n"
            "  method: POST\n"
            "request:\n"
            "  <<: *d\n"
            "  path: /x\n"
        )
        data, _ = parse_yaml_with_lines(source)
        assert data["request"] == {"method": "POST", "path": "/x"}


class TestInclude:
    """Tests for the !include tag."""

    def test_include_relative_to_suite(self, tmp_path):
        """!include loads a file next to the suite."""
        (tmp_path / "headers.yaml").write_text("Authorization: Bearer t\n")
        suite = tmp_path / "suite.yaml"
        suite.write_text("base_url: http://h\nheaders: !include headers.yaml\n")
        data, _ = parse_yaml_file(suite)
        assert data["headers"] == {"Authorization": "Bearer t"}

    def test_missing_include_is_parse_error(self, tmp_path):
        """A missing include target raises YAMLParseError."""
        suite = tmp_path / "suite.yaml"
        suite.write_text("headers: !include nope.yaml\n")
        with pytest.raises(YAMLParseError, match="cannot include"):
            parse_yaml_file(suite)
