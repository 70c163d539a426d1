"""
Loading of configuration data from YAML and JSON text.

Both loaders reject duplicate keys, a repeated key is almost always a mistake in the file.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml
from yaml.constructor import ConstructorError
from yaml.nodes import MappingNode

from .errors import DataParsingError


def _json_object(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    obj: Dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise DataParsingError(f"duplicate key '{key}' in JSON object")
        obj[key] = value
    return obj


class _StrictLoader(yaml.SafeLoader):
    """'yaml.SafeLoader' that fails on duplicate mapping keys."""

    def construct_mapping(self, node: MappingNode, deep: bool = False) -> Dict[Any, Any]:
        if not isinstance(node, MappingNode):
            raise ConstructorError(None, None, f"expected a mapping node, but found {node.id}", node.start_mark)

        seen: Dict[Any, Any] = {}
        for key_node, _value_node in node.value:
            key = self.construct_object(key_node, deep=deep)  # type: ignore[no-untyped-call]
            try:
                duplicate = key in seen
            except TypeError as e:
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark, f"found unhashable key ({e})", key_node.start_mark
                ) from e
            if duplicate:
                raise DataParsingError(f"duplicate key '{key}' {key_node.start_mark}")
            seen[key] = key_node
        return super().construct_mapping(node, deep=deep)


def parse_yaml(data: str) -> Any:
    return yaml.load(data, Loader=_StrictLoader)  # noqa: S506


def parse_json(data: str) -> Any:
    return json.loads(data, object_pairs_hook=_json_object)


def try_to_parse(data: str) -> Any:
    """Parse the data as JSON, or as YAML when it is not JSON."""

    try:
        return parse_json(data)
    except json.JSONDecodeError as je:
        try:
            return parse_yaml(data)
        except yaml.YAMLError as ye:
            raise DataParsingError(f"failed to parse data, JSON: {je}, YAML: {ye}") from ye


def parse_file(path: Path) -> Any:
    try:
        data = path.read_text(encoding="utf8")
    except OSError as e:
        raise DataParsingError(f"failed to read file '{path}': {e}") from e
    return try_to_parse(data)
