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

"""Avro (JSON) schema parser."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import ParseError
from ..models.issues import SchemaPath
from ..models.schema_model import Field, SchemaDocument, SchemaFormat, SchemaKind, SchemaModel
from .base import BaseSchemaParser

logger = logging.getLogger(__name__)


AVRO_PRIMITIVES = frozenset(
    ["null", "boolean", "int", "long", "float", "double", "bytes", "string"]
)


def split_name(name: str, enclosing_namespace: Optional[str]) -> Tuple[str, Optional[str]]:
    """Split an Avro name into (name, namespace).

    A dotted name carries its own namespace; otherwise the enclosing one applies.
    """
    if "." in name:
        namespace, _, short = name.rpartition(".")
        return short, namespace or None
    return name, enclosing_namespace


class AvroParser(BaseSchemaParser):
    """Parser for Avro schemas written as JSON."""

    FORMAT = SchemaFormat.AVRO

    def parse(self, raw_text: str) -> SchemaDocument:
        data = self.load_json(raw_text)
        root = self.parse_node(data)
        return SchemaDocument(format=SchemaFormat.AVRO, root=root)

    def parse_node(self, data: Any) -> SchemaModel:
        """Parse an already-decoded Avro schema node."""
        return _AvroTreeBuilder().build(data, (), None)


class _AvroTreeBuilder:
    """Builds one model tree; tracks named types defined so far."""

    def __init__(self):
        self._defined: Dict[str, SchemaPath] = {}

    def build(self, node: Any, path: SchemaPath, namespace: Optional[str]) -> SchemaModel:
        if isinstance(node, str):
            return self._from_type_name(node, namespace)

        if isinstance(node, list):
            if not node:
                raise ParseError("Union must contain at least one type", path=path)
            members = tuple(
                self.build(member, path + (idx,), namespace) for idx, member in enumerate(node)
            )
            return SchemaModel(kind=SchemaKind.UNION, members=members)

        if not isinstance(node, dict):
            raise ParseError(
                f"Schema node must be a string, array or object, got {type(node).__name__}",
                path=path,
            )

        if "type" not in node:
            raise ParseError("Schema is missing required key 'type'", path=path)

        type_value = node["type"]
        if isinstance(type_value, (dict, list)):
            # {"type": {"type": "array", ...}} style wrapping
            return self.build(type_value, path, namespace)
        if not isinstance(type_value, str):
            raise ParseError(f"Key 'type' must be a string, got {type(type_value).__name__}", path=path)

        if type_value in ("record", "error"):
            return self._record(node, path, namespace)
        if type_value == "enum":
            return self._enum(node, path, namespace)
        if type_value == "array":
            if "items" not in node:
                raise ParseError("Array schema is missing required key 'items'", path=path)
            return SchemaModel(
                kind=SchemaKind.ARRAY,
                items=self.build(node["items"], path, namespace),
                documentation=node.get("doc"),
            )
        if type_value == "map":
            if "values" not in node:
                raise ParseError("Map schema is missing required key 'values'", path=path)
            return SchemaModel(
                kind=SchemaKind.MAP,
                values=self.build(node["values"], path, namespace),
                documentation=node.get("doc"),
            )
        if type_value == "fixed":
            return self._fixed(node, path, namespace)
        if type_value in AVRO_PRIMITIVES:
            return SchemaModel(
                kind=SchemaKind.PRIMITIVE,
                type_name=type_value,
                logical_type=node.get("logicalType"),
                documentation=node.get("doc"),
            )
        return self._from_type_name(type_value, namespace)

    def _from_type_name(self, type_name: str, namespace: Optional[str]) -> SchemaModel:
        if type_name in AVRO_PRIMITIVES:
            return SchemaModel(kind=SchemaKind.PRIMITIVE, type_name=type_name)
        short, ns = split_name(type_name, namespace)
        full_name = f"{ns}.{short}" if ns else short
        if full_name not in self._defined and type_name in self._defined:
            full_name = type_name
        if full_name not in self._defined:
            logger.debug(f"Reference to a type not defined in this document: {type_name}")
        return SchemaModel(kind=SchemaKind.REFERENCE, type_name=full_name)

    def _register(self, model: SchemaModel, path: SchemaPath) -> None:
        full_name = model.qualified_name
        if full_name in self._defined:
            raise ParseError(f"Named type '{full_name}' is defined more than once", path=path)
        self._defined[full_name] = path

    def _named(self, node: Dict[str, Any], path: SchemaPath, namespace: Optional[str], label: str):
        raw_name = node.get("name")
        if not raw_name or not isinstance(raw_name, str):
            raise ParseError(f"{label} schema is missing required key 'name'", path=path)
        explicit_ns = node.get("namespace")
        if explicit_ns is not None and not isinstance(explicit_ns, str):
            raise ParseError(f"{label} '{raw_name}' has a non-string 'namespace'", path=path)
        enclosing = explicit_ns if explicit_ns else namespace
        return split_name(raw_name, enclosing)

    def _record(self, node: Dict[str, Any], path: SchemaPath, namespace: Optional[str]) -> SchemaModel:
        name, ns = self._named(node, path, namespace, "Record")
        if "fields" not in node:
            raise ParseError(f"Record '{name}' is missing required key 'fields'", path=path)
        raw_fields = node["fields"]
        if not isinstance(raw_fields, list):
            raise ParseError(f"Record '{name}' key 'fields' must be an array", path=path)

        # Register before the fields so recursive references resolve
        self._register(SchemaModel(kind=SchemaKind.RECORD, name=name, namespace=ns), path)

        fields: List[Field] = []
        seen = set()
        for idx, raw_field in enumerate(raw_fields):
            if not isinstance(raw_field, dict):
                raise ParseError(f"Field at index {idx} of record '{name}' must be an object", path=path)
            field_name = raw_field.get("name")
            if not field_name or not isinstance(field_name, str):
                raise ParseError(
                    f"Field at index {idx} of record '{name}' is missing required key 'name'",
                    path=path,
                )
            field_path = path + (field_name,)
            if "type" not in raw_field:
                raise ParseError(f"Field '{field_name}' is missing required key 'type'", path=field_path)
            if field_name in seen:
                raise ParseError(f"Duplicate field '{field_name}' in record '{name}'", path=field_path)
            seen.add(field_name)

            has_default = "default" in raw_field
            fields.append(
                Field(
                    name=field_name,
                    type=self.build(raw_field["type"], field_path, ns),
                    documentation=raw_field.get("doc"),
                    has_default=has_default,
                    default_value=raw_field.get("default") if has_default else None,
                )
            )

        return SchemaModel(
            kind=SchemaKind.RECORD,
            name=name,
            namespace=ns,
            documentation=node.get("doc"),
            fields=tuple(fields),
        )

    def _enum(self, node: Dict[str, Any], path: SchemaPath, namespace: Optional[str]) -> SchemaModel:
        name, ns = self._named(node, path, namespace, "Enum")
        symbols = node.get("symbols")
        if not isinstance(symbols, list):
            raise ParseError(f"Enum '{name}' is missing required key 'symbols'", path=path)
        if not all(isinstance(s, str) for s in symbols):
            raise ParseError(f"Enum '{name}' symbols must be strings", path=path)
        if len(set(symbols)) != len(symbols):
            raise ParseError(f"Enum '{name}' declares duplicate symbols", path=path)
        model = SchemaModel(
            kind=SchemaKind.ENUM,
            name=name,
            namespace=ns,
            documentation=node.get("doc"),
            symbols=tuple(symbols),
        )
        self._register(model, path)
        return model

    def _fixed(self, node: Dict[str, Any], path: SchemaPath, namespace: Optional[str]) -> SchemaModel:
        name, ns = self._named(node, path, namespace, "Fixed")
        size = node.get("size")
        if not isinstance(size, int) or isinstance(size, bool):
            raise ParseError(f"Fixed '{name}' is missing required integer key 'size'", path=path)
        model = SchemaModel(
            kind=SchemaKind.PRIMITIVE,
            type_name="fixed",
            name=name,
            namespace=ns,
            size=size,
            logical_type=node.get("logicalType"),
            documentation=node.get("doc"),
        )
        self._register(model, path)
        return model
