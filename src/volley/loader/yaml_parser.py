"""YAML parsing for suite files, with key positions for error reporting.

The loader records where every mapping key appears in the source as a
dotted path (``apis.0.request.method``), so that a pydantic error
location can be pointed back at a line and column.
"""

from __future__ import annotations

from collections.abc import Hashable
from pathlib import Path
from typing import Any

import yaml

Position = tuple[int, int]


class YAMLParseError(Exception):
    """Raised when a suite file is not valid YAML.

    Attributes:
        message: Description of the syntax problem.
        line: 1-indexed line, when PyYAML reports one.
        column: 1-indexed column, when PyYAML reports one.
        filename: The file being parsed, or ``<string>``.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        filename: str = "<string>",
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        super().__init__(message)


class SuiteLoader(yaml.SafeLoader):
    """SafeLoader that fills ``positions`` with the location of each key."""

    def __init__(self, stream: str, base_dir: Path | None = None) -> None:
        super().__init__(stream)
        self.positions: dict[str, Position] = {}
        self.base_dir = base_dir
        self._path: list[str] = []

    def _record(self, key: str, node: yaml.Node) -> None:
        dotted = ".".join([*self._path, key])
        self.positions[dotted] = (node.start_mark.line + 1, node.start_mark.column + 1)

    def _construct_child(self, segment: str, node: yaml.Node) -> Any:
        if not isinstance(node, (yaml.MappingNode, yaml.SequenceNode)):
            return self.construct_object(node, deep=True)
        self._path.append(segment)
        try:
            return self.construct_object(node, deep=True)
        finally:
            self._path.pop()

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        self.flatten_mapping(node)
        mapping: dict[Any, Any] = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=True)
            if not isinstance(key, Hashable):
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    "found unhashable key", key_node.start_mark,
                )
            segment = str(key)
            self._record(segment, key_node)
            mapping[key] = self._construct_child(segment, value_node)
        return mapping

    def construct_sequence(self, node: yaml.SequenceNode, deep: bool = False) -> list[Any]:
        return [self._construct_child(str(i), child) for i, child in enumerate(node.value)]

    def _yaml_map(self, node: yaml.MappingNode) -> Any:
        yield self.construct_mapping(node, deep=True)

    def _yaml_seq(self, node: yaml.SequenceNode) -> Any:
        yield self.construct_sequence(node, deep=True)

    def _include(self, node: yaml.ScalarNode) -> Any:
        target = Path(self.construct_scalar(node))
        if self.base_dir is not None and not target.is_absolute():
            target = self.base_dir / target
        try:
            with open(target, encoding="utf-8") as f:
                return yaml.safe_load(f)
        except OSError as exc:
            raise yaml.constructor.ConstructorError(
                None, None, f"cannot include '{target}': {exc.strerror}", node.start_mark
            ) from exc


SuiteLoader.add_constructor("tag:yaml.org,2002:map", SuiteLoader._yaml_map)
SuiteLoader.add_constructor("tag:yaml.org,2002:seq", SuiteLoader._yaml_seq)
SuiteLoader.add_constructor("!include", SuiteLoader._include)


def parse_yaml_with_lines(
    source: str,
    filename: str = "<string>",
    base_dir: Path | None = None,
) -> tuple[dict[str, Any] | None, dict[str, Position]]:
    """Parse YAML text into ``(data, positions)``.

    Returns ``(None, {})`` when the document is empty or its top level is
    not a mapping.

    Raises:
        YAMLParseError: On a syntax error or a failed ``!include``.
    """
    loader = SuiteLoader(source, base_dir=base_dir)
    try:
        data = loader.get_single_data()
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        raise YAMLParseError(
            message=str(exc),
            line=mark.line + 1 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
            filename=filename,
        ) from exc
    finally:
        loader.dispose()

    if not isinstance(data, dict):
        return None, {}
    return data, loader.positions


def parse_yaml_file(filepath: Path) -> tuple[dict[str, Any] | None, dict[str, Position]]:
    """Read and parse a suite file; ``!include`` resolves next to it."""
    source = filepath.read_text(encoding="utf-8")
    return parse_yaml_with_lines(source, filename=str(filepath), base_dir=filepath.parent)
