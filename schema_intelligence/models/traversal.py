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

"""Tree primitives shared by the linter and the diff evaluator."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

from .issues import PathElement, SchemaPath
from .schema_model import Field, SchemaKind, SchemaModel


NESTING_KINDS = (SchemaKind.RECORD, SchemaKind.MESSAGE)


@dataclass(frozen=True)
class NodeVisit:
    """One node reached by :func:`walk`."""

    path: SchemaPath
    node: SchemaModel
    depth: int
    field: Optional[Field] = None


def child_nodes(node: SchemaModel) -> Iterator[Tuple[Optional[PathElement], SchemaModel, Optional[Field]]]:
    """Yield ``(path_element, child, owning_field)`` for the direct children of *node*.

    Array items and map values do not add a path element, union members add
    their index, fields add their name.
    """
    if node.kind in SchemaKind.container_kinds():
        for f in node.fields:
            yield f.name, f.type, f
    elif node.kind == SchemaKind.UNION:
        for idx, member in enumerate(node.members):
            yield idx, member, None
    elif node.kind == SchemaKind.ARRAY and node.items is not None:
        yield None, node.items, None
    elif node.kind == SchemaKind.MAP and node.values is not None:
        yield None, node.values, None


def walk(model: SchemaModel) -> Iterator[NodeVisit]:
    """Pre-order traversal of *model*.

    ``depth`` counts the record/message nodes on the path, the visited node included.
    """

    def _walk(node: SchemaModel, path: SchemaPath, depth: int, owner: Optional[Field]) -> Iterator[NodeVisit]:
        if node.kind in NESTING_KINDS:
            depth += 1
        yield NodeVisit(path=path, node=node, depth=depth, field=owner)
        for element, child, f in child_nodes(node):
            child_path = path if element is None else path + (element,)
            # Array/map wrappers keep the owning field for their element type
            yield from _walk(child, child_path, depth, f if f is not None else owner)

    yield from _walk(model, (), 0, None)


def field_index(node: SchemaModel) -> Dict[str, Field]:
    """Return the fields of *node* keyed by name, in declaration order."""
    return {f.name: f for f in node.fields}


def unwrap_named(model: SchemaModel) -> Optional[SchemaModel]:
    """Find the record/message/enum a field type stands for.

    Optional unions (``["null", X]``), arrays and maps are looked through;
    unions with several non-null members are ambiguous and return ``None``.
    """
    if model.kind in (SchemaKind.RECORD, SchemaKind.MESSAGE, SchemaKind.ENUM):
        return model
    if model.kind == SchemaKind.UNION:
        non_null = [m for m in model.members if not is_null(m)]
        if len(non_null) == 1:
            return unwrap_named(non_null[0])
        return None
    if model.kind == SchemaKind.ARRAY and model.items is not None:
        return unwrap_named(model.items)
    if model.kind == SchemaKind.MAP and model.values is not None:
        return unwrap_named(model.values)
    return None


def is_null(model: SchemaModel) -> bool:
    return model.kind == SchemaKind.PRIMITIVE and model.type_name == "null"


def type_signature(model: SchemaModel, by_name: bool = True) -> str:
    """Compact, comparable description of a type.

    Named types are identified by their qualified name only; their bodies are
    compared field by field instead. With ``by_name=False`` (JSON Schema, where
    ``title`` is only a label) records and enums are identified by kind.
    """
    kind = model.kind
    if kind == SchemaKind.PRIMITIVE:
        if model.type_name == "fixed":
            return f"fixed:{model.qualified_name}[{model.size}]"
        base = model.type_name or "unknown"
        if model.logical_type:
            return f"{base}({model.logical_type})"
        return base
    if kind == SchemaKind.REFERENCE:
        return model.type_name or "unknown"
    if kind == SchemaKind.ARRAY:
        return f"array<{type_signature(model.items, by_name) if model.items else '?'}>"
    if kind == SchemaKind.MAP:
        return f"map<{type_signature(model.values, by_name) if model.values else '?'}>"
    if kind == SchemaKind.UNION:
        return "union[" + ",".join(type_signature(m, by_name) for m in model.members) + "]"
    if by_name and model.qualified_name:
        return model.qualified_name
    return kind.value


def named_signature(model: SchemaModel, by_name: bool = True) -> str:
    """Signature where named types and references to them compare equal."""
    if by_name and model.kind in (SchemaKind.RECORD, SchemaKind.ENUM, SchemaKind.MESSAGE) and model.qualified_name:
        return model.qualified_name
    return type_signature(model, by_name)


def _canonical(model: SchemaModel) -> Dict[str, Any]:
    data: Dict[str, Any] = {"kind": model.kind.value}
    for attr in ("name", "namespace", "documentation", "type_name", "logical_type", "size", "additional_properties"):
        value = getattr(model, attr)
        if value is not None:
            data[attr] = value
    if model.symbols:
        data["symbols"] = list(model.symbols)
    if model.symbol_values:
        data["symbol_values"] = list(model.symbol_values)
    if model.items is not None:
        data["items"] = _canonical(model.items)
    if model.values is not None:
        data["values"] = _canonical(model.values)
    if model.members:
        data["members"] = [_canonical(m) for m in model.members]
    if model.fields:
        data["fields"] = [
            {
                "name": f.name,
                "type": _canonical(f.type),
                "doc": f.documentation,
                "has_default": f.has_default,
                "default": f.default_value,
                "tag": f.tag,
                "label": f.label,
            }
            for f in model.fields
        ]
    return data


def fingerprint(model: SchemaModel) -> str:
    """Stable short hash of the structure of *model* (source formatting ignored)."""
    payload = json.dumps(
        _canonical(model),
        separators=(",", ":"),
        ensure_ascii=False,
        sort_keys=True,
        default=str,
    ).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()[:16]
