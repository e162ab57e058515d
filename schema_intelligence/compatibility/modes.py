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

"""Compatibility modes and reader/writer type resolution."""

from enum import Enum
from typing import Dict, FrozenSet

from ..models.schema_model import SchemaKind, SchemaModel
from ..models.traversal import named_signature


class CompatibilityMode(str, Enum):
    """Registry compatibility levels.

    BACKWARD: the new schema can read data written with the old one.
    FORWARD: the old schema can read data written with the new one.
    FULL: both. NONE: no checking. ``*_TRANSITIVE`` variants check against
    every prior version instead of the latest only.
    """

    BACKWARD = "BACKWARD"
    BACKWARD_TRANSITIVE = "BACKWARD_TRANSITIVE"
    FORWARD = "FORWARD"
    FORWARD_TRANSITIVE = "FORWARD_TRANSITIVE"
    FULL = "FULL"
    FULL_TRANSITIVE = "FULL_TRANSITIVE"
    NONE = "NONE"

    @classmethod
    def from_value(cls, value) -> "CompatibilityMode":
        if isinstance(value, CompatibilityMode):
            return value
        key = str(value).strip().upper().replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown compatibility mode: '{value}'. Valid modes: {[m.value for m in cls]}"
            ) from None

    @property
    def transitive(self) -> bool:
        return self.value.endswith("_TRANSITIVE")

    @property
    def base(self) -> "CompatibilityMode":
        return CompatibilityMode(self.value.replace("_TRANSITIVE", ""))

    @property
    def checks_backward(self) -> bool:
        return self.base in (CompatibilityMode.BACKWARD, CompatibilityMode.FULL)

    @property
    def checks_forward(self) -> bool:
        return self.base in (CompatibilityMode.FORWARD, CompatibilityMode.FULL)


# Writer type -> reader types it can be promoted to (Avro schema resolution)
PROMOTIONS: Dict[str, FrozenSet[str]] = {
    "int": frozenset({"long", "float", "double"}),
    "long": frozenset({"float", "double"}),
    "float": frozenset({"double"}),
    "string": frozenset({"bytes"}),
    "bytes": frozenset({"string"}),
}

_NAMED_KINDS = (SchemaKind.RECORD, SchemaKind.ENUM, SchemaKind.MESSAGE, SchemaKind.REFERENCE)


def can_read(reader: SchemaModel, writer: SchemaModel, by_name: bool = True) -> bool:
    """Whether data written with *writer* resolves against *reader*.

    Only the type level is checked; the fields of named types that match by
    name are compared separately by the diff. ``by_name=False`` ignores the
    names of records and enums (JSON Schema titles).
    """
    if writer.kind == SchemaKind.UNION:
        return all(can_read(reader, member, by_name) for member in writer.members)
    if reader.kind == SchemaKind.UNION:
        return any(can_read(member, writer, by_name) for member in reader.members)

    if reader.kind == SchemaKind.PRIMITIVE and reader.type_name == "any":
        return True

    if reader.kind in _NAMED_KINDS and writer.kind in _NAMED_KINDS:
        by_reference = SchemaKind.REFERENCE in (reader.kind, writer.kind)
        if not by_reference and reader.kind != writer.kind:
            return False
        return named_signature(reader, by_name) == named_signature(writer, by_name)

    if reader.kind != writer.kind:
        return False

    if reader.kind == SchemaKind.ARRAY:
        return (
            reader.items is not None
            and writer.items is not None
            and can_read(reader.items, writer.items, by_name)
        )
    if reader.kind == SchemaKind.MAP:
        return (
            reader.values is not None
            and writer.values is not None
            and can_read(reader.values, writer.values, by_name)
        )

    if reader.kind == SchemaKind.PRIMITIVE:
        if "fixed" in (reader.type_name, writer.type_name):
            # fixed: same name and size
            return reader.type_name == writer.type_name and (
                reader.qualified_name == writer.qualified_name and reader.size == writer.size
            )
        if reader.type_name == writer.type_name:
            return True
        return reader.type_name in PROMOTIONS.get(writer.type_name, frozenset())

    return named_signature(reader, by_name) == named_signature(writer, by_name)


def is_breaking_type_change(
    before: SchemaModel, after: SchemaModel, mode: CompatibilityMode, by_name: bool = True
) -> bool:
    """Whether replacing *before* by *after* breaks readers under *mode*."""
    if mode.base == CompatibilityMode.NONE:
        return False
    if mode.checks_backward and not can_read(after, before, by_name):
        return True
    if mode.checks_forward and not can_read(before, after, by_name):
        return True
    return False
