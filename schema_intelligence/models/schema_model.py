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

"""Normalized schema model shared by the parser, the linter and the diff evaluator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from .issues import Issue


class SchemaFormat(str, Enum):
    AVRO = "avro"
    PROTOBUF = "protobuf"
    JSON_SCHEMA = "json"

    @classmethod
    def from_value(cls, value) -> "SchemaFormat":
        """Resolve user/registry spellings (``AVRO``, ``PROTOBUF``, ``JSON``, ``jsonschema``)."""
        if isinstance(value, SchemaFormat):
            return value
        key = str(value).strip().lower()
        aliases = {
            "avro": cls.AVRO,
            "avsc": cls.AVRO,
            "protobuf": cls.PROTOBUF,
            "proto": cls.PROTOBUF,
            "json": cls.JSON_SCHEMA,
            "jsonschema": cls.JSON_SCHEMA,
            "json_schema": cls.JSON_SCHEMA,
        }
        if key not in aliases:
            raise ValueError(f"Unknown schema format: '{value}'. Valid formats: {[f.value for f in cls]}")
        return aliases[key]


class SchemaKind(str, Enum):
    RECORD = "record"
    ENUM = "enum"
    UNION = "union"
    PRIMITIVE = "primitive"
    MAP = "map"
    ARRAY = "array"
    MESSAGE = "message"
    REFERENCE = "reference"
    FILE = "file"

    @classmethod
    def named_kinds(cls) -> Tuple["SchemaKind", ...]:
        return (cls.RECORD, cls.ENUM, cls.MESSAGE)

    @classmethod
    def container_kinds(cls) -> Tuple["SchemaKind", ...]:
        """Kinds whose ``fields`` are populated."""
        return (cls.RECORD, cls.MESSAGE, cls.FILE)


@dataclass(frozen=True)
class SchemaModel:
    """A node of the normalized schema tree.

    Only the attributes relevant to ``kind`` are populated: ``fields`` for
    records/messages/files, ``symbols`` for enums, ``items`` for arrays,
    ``values`` for maps, ``members`` for unions and ``type_name`` for
    primitives and references.
    """

    kind: SchemaKind
    name: Optional[str] = None
    namespace: Optional[str] = None
    documentation: Optional[str] = None
    fields: Tuple["Field", ...] = ()
    type_name: Optional[str] = None
    logical_type: Optional[str] = None
    size: Optional[int] = None  # Avro fixed
    symbols: Tuple[str, ...] = ()
    symbol_values: Tuple[int, ...] = ()
    items: Optional["SchemaModel"] = None
    values: Optional["SchemaModel"] = None
    members: Tuple["SchemaModel", ...] = ()
    additional_properties: Optional[bool] = None

    def __post_init__(self):
        if self.fields and self.kind not in SchemaKind.container_kinds():
            raise ValueError(f"Schema kind '{self.kind.value}' cannot carry fields")
        seen = set()
        for f in self.fields:
            if f.name in seen:
                raise ValueError(f"Duplicate field name '{f.name}' in '{self.qualified_name or self.kind.value}'")
            seen.add(f.name)
        if self.symbol_values and len(self.symbol_values) != len(self.symbols):
            raise ValueError("symbol_values must align with symbols")

    @property
    def qualified_name(self) -> Optional[str]:
        if not self.name:
            return None
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def is_named(self) -> bool:
        return self.kind in SchemaKind.named_kinds()

    def field(self, name: str) -> Optional["Field"]:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass(frozen=True)
class Field:
    name: str
    type: SchemaModel
    documentation: Optional[str] = None
    has_default: bool = False
    default_value: Any = None
    # Protobuf only
    tag: Optional[int] = None
    label: Optional[str] = None
    raw: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Field name must be a non-empty string")
        if not self.has_default and self.default_value is not None:
            raise ValueError(f"Field '{self.name}' has a default value but has_default is False")

    @property
    def symbols(self) -> Tuple[str, ...]:
        """Enum symbols of the field type (empty for non-enum fields)."""
        if self.type.kind == SchemaKind.ENUM:
            return self.type.symbols
        return ()


@dataclass(frozen=True)
class SchemaDocument:
    """Result of a single parse call: the root model plus document-level attributes."""

    format: SchemaFormat
    root: SchemaModel
    syntax: Optional[str] = None
    package: Optional[str] = None
    schema_uri: Optional[str] = None
    warnings: Tuple[Issue, ...] = field(default=(), compare=False)
