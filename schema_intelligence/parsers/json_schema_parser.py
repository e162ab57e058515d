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

"""JSON Schema parser."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from ..exceptions import ParseError
from ..models.issues import SchemaPath
from ..models.schema_model import Field, SchemaDocument, SchemaFormat, SchemaKind, SchemaModel
from .base import BaseSchemaParser


JSON_PRIMITIVES = frozenset(["string", "integer", "number", "boolean", "null"])


def _symbol(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, sort_keys=True)


class JsonSchemaParser(BaseSchemaParser):
    """Maps a JSON Schema document onto the normalized model.

    Objects become records (one field per property, a property is optional
    when it is not listed in ``required``), ``enum`` becomes an enum,
    ``type`` lists / ``anyOf`` / ``oneOf`` become unions and ``$ref`` becomes
    a reference.
    """

    FORMAT = SchemaFormat.JSON_SCHEMA

    def parse(self, raw_text: str) -> SchemaDocument:
        data = self.load_json(raw_text)
        if not isinstance(data, dict):
            raise ParseError("JSON Schema document must be an object")
        schema_uri = data.get("$schema")
        if schema_uri is not None and not isinstance(schema_uri, str):
            raise ParseError("'$schema' must be a string", path=("$schema",))
        return SchemaDocument(
            format=SchemaFormat.JSON_SCHEMA,
            root=self.parse_node(data, ()),
            schema_uri=schema_uri,
        )

    def parse_node(self, node: Any, path: SchemaPath) -> SchemaModel:
        if isinstance(node, bool):
            return SchemaModel(kind=SchemaKind.PRIMITIVE, type_name="any" if node else "never")
        if not isinstance(node, dict):
            raise ParseError(f"Schema must be an object or boolean, got {type(node).__name__}", path=path)

        name = node.get("title")
        doc = node.get("description")

        if "$ref" in node:
            return SchemaModel(kind=SchemaKind.REFERENCE, type_name=str(node["$ref"]), name=name, documentation=doc)

        if "enum" in node:
            values = node["enum"]
            if not isinstance(values, list):
                raise ParseError("'enum' must be an array", path=path)
            return SchemaModel(
                kind=SchemaKind.ENUM,
                name=name,
                documentation=doc,
                symbols=tuple(_symbol(v) for v in values),
            )

        for keyword in ("anyOf", "oneOf"):
            if keyword in node:
                options = node[keyword]
                if not isinstance(options, list) or not options:
                    raise ParseError(f"'{keyword}' must be a non-empty array", path=path)
                return SchemaModel(
                    kind=SchemaKind.UNION,
                    name=name,
                    documentation=doc,
                    members=tuple(self.parse_node(o, path + (idx,)) for idx, o in enumerate(options)),
                )

        type_value = node.get("type")
        if isinstance(type_value, list):
            for idx, t in enumerate(type_value):
                if not isinstance(t, str):
                    raise ParseError(f"'type' entries must be strings, got {type(t).__name__}", path=path + (idx,))
            if not type_value:
                raise ParseError("'type' must not be an empty array", path=path)
            return SchemaModel(
                kind=SchemaKind.UNION,
                name=name,
                documentation=doc,
                members=tuple(self.parse_node({"type": t}, path + (idx,)) for idx, t in enumerate(type_value)),
            )
        if type_value is not None and not isinstance(type_value, str):
            raise ParseError(f"'type' must be a string or an array, got {type(type_value).__name__}", path=path)

        if type_value == "object" or (type_value is None and "properties" in node):
            return self._object(node, path)

        if type_value == "array":
            items = node.get("items", True)
            return SchemaModel(
                kind=SchemaKind.ARRAY,
                name=name,
                documentation=doc,
                items=self.parse_node(items, path),
            )

        if type_value is None:
            return SchemaModel(kind=SchemaKind.PRIMITIVE, type_name="any", name=name, documentation=doc)

        if type_value not in JSON_PRIMITIVES:
            raise ParseError(f"Unknown JSON Schema type '{type_value}'", path=path)
        return SchemaModel(
            kind=SchemaKind.PRIMITIVE,
            type_name=type_value,
            logical_type=node.get("format"),
            name=name,
            documentation=doc,
        )

    def _object(self, node: Dict[str, Any], path: SchemaPath) -> SchemaModel:
        name = node.get("title")
        doc = node.get("description")
        properties = node.get("properties", {})
        additional = node.get("additionalProperties")

        if not isinstance(properties, dict):
            raise ParseError("'properties' must be an object", path=path)

        # {"type": "object", "additionalProperties": {...}} without properties is a map
        if not properties and isinstance(additional, dict):
            return SchemaModel(
                kind=SchemaKind.MAP,
                name=name,
                documentation=doc,
                values=self.parse_node(additional, path),
            )

        required = node.get("required", [])
        if not isinstance(required, list) or not all(isinstance(r, str) for r in required):
            raise ParseError("'required' must be an array of strings", path=path)

        fields: List[Field] = []
        for prop_name, prop_schema in properties.items():
            field_path = path + (prop_name,)
            field_type = self.parse_node(prop_schema, field_path)
            has_default = prop_name not in required
            default_value = prop_schema.get("default") if has_default and isinstance(prop_schema, dict) else None
            fields.append(
                Field(
                    name=prop_name,
                    type=field_type,
                    documentation=field_type.documentation,
                    has_default=has_default,
                    default_value=default_value,
                )
            )

        if isinstance(additional, dict):
            additional = True
        elif additional is not None and not isinstance(additional, bool):
            raise ParseError("'additionalProperties' must be a boolean or a schema", path=path)

        return SchemaModel(
            kind=SchemaKind.RECORD,
            name=name,
            documentation=doc,
            fields=tuple(fields),
            additional_properties=additional,
        )
