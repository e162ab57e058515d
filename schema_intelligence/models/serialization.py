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

"""Model to JSON serialization (Avro and JSON Schema flavours)."""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from .schema_model import SchemaDocument, SchemaKind, SchemaModel


def to_avro(model: SchemaModel) -> Any:
    """Serialize *model* as an Avro schema (a JSON-compatible value)."""
    kind = model.kind
    if kind == SchemaKind.PRIMITIVE:
        if model.type_name == "fixed":
            data: Dict[str, Any] = {"type": "fixed", "name": model.name}
            if model.namespace:
                data["namespace"] = model.namespace
            data["size"] = model.size
            _add_optional(data, "logicalType", model.logical_type)
            _add_optional(data, "doc", model.documentation)
            return data
        if model.logical_type or model.documentation:
            data = {"type": model.type_name}
            _add_optional(data, "logicalType", model.logical_type)
            _add_optional(data, "doc", model.documentation)
            return data
        return model.type_name
    if kind == SchemaKind.REFERENCE:
        return model.type_name
    if kind == SchemaKind.UNION:
        return [to_avro(m) for m in model.members]
    if kind == SchemaKind.ARRAY:
        data = {"type": "array", "items": to_avro(model.items)}
        _add_optional(data, "doc", model.documentation)
        return data
    if kind == SchemaKind.MAP:
        data = {"type": "map", "values": to_avro(model.values)}
        _add_optional(data, "doc", model.documentation)
        return data
    if kind == SchemaKind.ENUM:
        data = {"type": "enum", "name": model.name}
        _add_optional(data, "namespace", model.namespace)
        _add_optional(data, "doc", model.documentation)
        data["symbols"] = list(model.symbols)
        return data
    if kind == SchemaKind.RECORD:
        data = {"type": "record", "name": model.name}
        _add_optional(data, "namespace", model.namespace)
        _add_optional(data, "doc", model.documentation)
        fields = []
        for f in model.fields:
            entry: Dict[str, Any] = {"name": f.name, "type": to_avro(f.type)}
            _add_optional(entry, "doc", f.documentation)
            if f.has_default:
                entry["default"] = f.default_value
            fields.append(entry)
        data["fields"] = fields
        return data
    raise ValueError(f"Schema kind '{kind.value}' has no Avro representation")


def to_json_schema(source: Union[SchemaDocument, SchemaModel], schema_uri: Optional[str] = None) -> Dict[str, Any]:
    """Serialize a JSON Schema document (or bare model) back to a JSON Schema dict."""
    if isinstance(source, SchemaDocument):
        model = source.root
        schema_uri = schema_uri or source.schema_uri
    else:
        model = source
    data: Dict[str, Any] = {}
    if schema_uri:
        data["$schema"] = schema_uri
    data.update(_json_node(model))
    return data


def _json_node(model: SchemaModel) -> Union[Dict[str, Any], bool]:
    kind = model.kind
    data: Dict[str, Any] = {}
    _add_optional(data, "title", model.name)
    _add_optional(data, "description", model.documentation)

    if kind == SchemaKind.PRIMITIVE:
        if model.type_name in ("any", "never") and not data:
            return model.type_name == "any"
        if model.type_name not in ("any", "never"):
            data["type"] = model.type_name
        _add_optional(data, "format", model.logical_type)
    elif kind == SchemaKind.REFERENCE:
        data["$ref"] = model.type_name
    elif kind == SchemaKind.ENUM:
        data["enum"] = list(model.symbols)
    elif kind == SchemaKind.UNION:
        simple = all(
            m.kind == SchemaKind.PRIMITIVE and m.name is None and m.documentation is None
            and m.logical_type is None and m.type_name not in ("any", "never")
            for m in model.members
        )
        if simple:
            data["type"] = [m.type_name for m in model.members]
        else:
            data["anyOf"] = [_json_node(m) for m in model.members]
    elif kind == SchemaKind.ARRAY:
        data["type"] = "array"
        data["items"] = _json_node(model.items)
    elif kind == SchemaKind.MAP:
        data["type"] = "object"
        values = _json_node(model.values)
        # a bare ``true`` would read back as a permissive record
        data["additionalProperties"] = values if isinstance(values, dict) else {}
    elif kind == SchemaKind.RECORD:
        data["type"] = "object"
        properties = {}
        for f in model.fields:
            prop = _json_node(f.type)
            if f.has_default and f.default_value is not None and isinstance(prop, dict):
                prop["default"] = f.default_value
            properties[f.name] = prop
        data["properties"] = properties
        required = [f.name for f in model.fields if not f.has_default]
        if required:
            data["required"] = required
        if model.additional_properties is not None:
            data["additionalProperties"] = model.additional_properties
    else:
        raise ValueError(f"Schema kind '{kind.value}' has no JSON Schema representation")
    return data


def _add_optional(data: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        data[key] = value
