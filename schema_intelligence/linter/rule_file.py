# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Rule override files (YAML or JSON)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import jsonschema
import yaml

from ..exceptions import RuleConfigError
from ..models.issues import to_pointer
from ..utils.format_version import check_format_version
from .rule_set import RuleSet, merge_overrides

logger = logging.getLogger(__name__)

SourceMap = Dict[str, Dict[str, int]]

_SCHEMA_PATH = Path(__file__).parent.parent / "schema" / "rule_overrides.schema.json"


@dataclass(frozen=True)
class RuleFile:
    """Content of a rule override file."""

    overrides: Dict[str, Any] = field(default_factory=dict)
    version: Optional[str] = None
    strict: Optional[bool] = None
    path: Optional[Path] = None


@lru_cache(maxsize=None)
def load_overrides_schema() -> dict:
    """Load the bundled JSON Schema for rule files."""
    with open(_SCHEMA_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


def build_source_map(content: str) -> SourceMap:
    """Map JSON-pointer paths of a YAML document to 1-based line/column.

    Uses PyYAML's node tree (yaml.compose) so the parsed data shape is unchanged.
    JSON documents are valid YAML, so this covers both file types.
    """
    source_map: SourceMap = {}
    try:
        root = yaml.compose(content, Loader=yaml.SafeLoader)
    except yaml.YAMLError:
        return source_map
    if root is None:
        return source_map

    def _walk(node, path: Tuple) -> None:
        mark = getattr(node, "start_mark", None)
        if mark is not None:
            source_map[to_pointer(path)] = {"line": mark.line + 1, "column": mark.column + 1}
        if isinstance(node, yaml.nodes.MappingNode):
            for key_node, value_node in node.value:
                key = getattr(key_node, "value", None)
                if key is not None:
                    _walk(value_node, path + (str(key),))
        elif isinstance(node, yaml.nodes.SequenceNode):
            for idx, item_node in enumerate(node.value):
                _walk(item_node, path + (idx,))

    _walk(root, ())
    return source_map


def _location(source_map: SourceMap, pointer: str, origin: str) -> str:
    # Fall back to the closest enclosing node that has a position
    while True:
        if pointer in source_map:
            return f"{origin}:{source_map[pointer]['line']}"
        if not pointer:
            return origin
        pointer = pointer.rsplit("/", 1)[0]


def parse_rule_text(content: str, origin: str = "<string>") -> RuleFile:
    """Parse and validate rule-file content.

    Raises:
        RuleConfigError: On syntax errors, schema violations or an incompatible version
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise RuleConfigError(f"Failed to parse rule file {origin}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RuleConfigError(f"{origin}: rule file root must be a mapping")

    source_map = build_source_map(content)
    validator = jsonschema.Draft7Validator(load_overrides_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        pointer = to_pointer(tuple(first.absolute_path))
        location = _location(source_map, pointer, origin)
        raise RuleConfigError(f"{location}: invalid rule file at '{pointer or '/'}': {first.message}")

    version_check = check_format_version(data.get("version"))
    if not version_check.compatible:
        raise RuleConfigError(f"{_location(source_map, '/version', origin)}: {version_check.message}")
    if version_check.minor_newer:
        logger.warning(f"{origin}: {version_check.message}")

    version = data.get("version")
    return RuleFile(
        overrides=dict(data.get("rules") or {}),
        version=str(version) if version is not None else None,
        strict=data.get("strict"),
    )


def load_rule_file(file_path: Union[str, Path]) -> RuleFile:
    """Read and validate a rule override file.

    Raises:
        RuleConfigError: If the file is missing, unreadable or invalid
    """
    path = Path(file_path)
    if not path.exists():
        raise RuleConfigError(f"Rule file not found: {path}")
    if not path.is_file():
        raise RuleConfigError(f"Path is not a file: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RuleConfigError(f"Failed to read rule file {path}: {exc}") from exc

    logger.debug(f"Loading rule file: {path}")
    rule_file = parse_rule_text(content, origin=str(path))
    return RuleFile(
        overrides=rule_file.overrides,
        version=rule_file.version,
        strict=rule_file.strict,
        path=path,
    )


def load_rule_set(file_path: Union[str, Path, None] = None, base: Optional[RuleSet] = None) -> RuleSet:
    """Build the effective rule set: defaults (or *base*) plus the file's overrides."""
    base = base if base is not None else RuleSet.defaults()
    if file_path is None:
        return base
    return merge_overrides(base, load_rule_file(file_path).overrides)
