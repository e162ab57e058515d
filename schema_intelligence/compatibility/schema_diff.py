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

"""Structural diff between two versions of a schema."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Union

from ..exceptions import DiffIncomparable
from ..models.issues import SchemaPath, to_pointer
from ..models.schema_model import Field, SchemaDocument, SchemaFormat, SchemaKind, SchemaModel
from ..models.traversal import field_index, named_signature, unwrap_named
from .modes import CompatibilityMode, is_breaking_type_change

logger = logging.getLogger(__name__)


class DiffKind(str, Enum):
    FIELD_ADDED = "field_added"
    FIELD_REMOVED = "field_removed"
    FIELD_TYPE_CHANGED = "field_type_changed"
    FIELD_DEFAULT_CHANGED = "field_default_changed"
    DOC_CHANGED = "doc_changed"
    NAMESPACE_CHANGED = "namespace_changed"
    NAME_CHANGED = "name_changed"
    SYMBOLS_CHANGED = "symbols_changed"
    VERSION_COUNT_MISMATCH = "version_count_mismatch"
    INCOMPARABLE = "incomparable"


@dataclass(frozen=True)
class DiffEntry:
    """One structural difference; ``before``/``after`` are JSON-compatible snapshots."""

    kind: DiffKind
    path: SchemaPath
    before: Any = None
    after: Any = None
    breaking: bool = False
    message: str = ""

    @property
    def pointer(self) -> str:
        return to_pointer(self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "path": list(self.path),
            "before": self.before,
            "after": self.after,
            "breaking": self.breaking,
            "message": self.message,
        }


SchemaInput = Union[SchemaDocument, SchemaModel]

_CONTAINER_KINDS = (SchemaKind.RECORD, SchemaKind.MESSAGE, SchemaKind.FILE)
_STRUCTURED_KINDS = _CONTAINER_KINDS + (SchemaKind.ENUM,)


def _root(schema: SchemaInput) -> SchemaModel:
    return schema.root if isinstance(schema, SchemaDocument) else schema


def _identified_by_name(*schemas: SchemaInput) -> bool:
    return not any(
        isinstance(s, SchemaDocument) and s.format == SchemaFormat.JSON_SCHEMA for s in schemas
    )


def _field_snapshot(f: Field, by_name: bool = True) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": f.name, "type": named_signature(f.type, by_name), "has_default": f.has_default}
    if f.has_default:
        data["default"] = f.default_value
    if f.tag is not None:
        data["tag"] = f.tag
    return data


class SchemaDiffer:
    """Walks two schema trees side by side and reports differences.

    With ``by_name=False`` records and enums are matched by the field that
    holds them instead of by name, and a name change is only informational
    (JSON Schema titles).
    """

    def __init__(self, mode: CompatibilityMode = CompatibilityMode.BACKWARD, by_name: bool = True):
        self.mode = CompatibilityMode.from_value(mode)
        self.by_name = by_name
        self._checking = self.mode.base != CompatibilityMode.NONE

    def compare(self, before: SchemaModel, after: SchemaModel) -> Iterator[DiffEntry]:
        """Diff two roots.

        Raises:
            DiffIncomparable: If the roots are of kinds that cannot be matched
        """
        if before.kind != after.kind:
            if before.kind in _STRUCTURED_KINDS or after.kind in _STRUCTURED_KINDS:
                raise DiffIncomparable(before.kind.value, after.kind.value)
            yield from self._type_change((), before, after)
            return
        if before.kind in _STRUCTURED_KINDS:
            yield from self._compare_named((), before, after)
        elif named_signature(before, self.by_name) != named_signature(after, self.by_name):
            yield from self._type_change((), before, after)

    def _compare_named(self, path: SchemaPath, before: SchemaModel, after: SchemaModel) -> Iterator[DiffEntry]:
        if before.name != after.name:
            yield DiffEntry(
                kind=DiffKind.NAME_CHANGED,
                path=path,
                before=before.name,
                after=after.name,
                breaking=self._checking and self.by_name,
                message=f"Name changed from '{before.name}' to '{after.name}'",
            )
        if before.namespace != after.namespace:
            yield DiffEntry(
                kind=DiffKind.NAMESPACE_CHANGED,
                path=path,
                before=before.namespace,
                after=after.namespace,
                message=f"Namespace changed from '{before.namespace}' to '{after.namespace}'",
            )
        if (before.documentation or None) != (after.documentation or None):
            yield DiffEntry(
                kind=DiffKind.DOC_CHANGED,
                path=path,
                before=before.documentation,
                after=after.documentation,
                message="Documentation changed",
            )
        if before.kind == SchemaKind.ENUM:
            yield from self._compare_symbols(path, before, after)
        else:
            yield from self._compare_fields(path, before, after)

    def _compare_fields(self, path: SchemaPath, before: SchemaModel, after: SchemaModel) -> Iterator[DiffEntry]:
        before_fields = field_index(before)
        after_fields = field_index(after)
        # Protobuf files: declarations may be added freely but not dropped
        declarations = before.kind == SchemaKind.FILE

        for name, old in before_fields.items():
            if name in after_fields:
                continue
            if declarations:
                breaking = self._checking
            elif self.mode.base == CompatibilityMode.FULL:
                breaking = True
            else:
                breaking = self._checking and not old.has_default
            yield DiffEntry(
                kind=DiffKind.FIELD_REMOVED,
                path=path + (name,),
                before=_field_snapshot(old, self.by_name),
                breaking=breaking,
                message=f"Field '{name}' was removed",
            )

        for name, new in after_fields.items():
            if name in before_fields:
                continue
            yield DiffEntry(
                kind=DiffKind.FIELD_ADDED,
                path=path + (name,),
                after=_field_snapshot(new, self.by_name),
                breaking=self._checking and not declarations and not new.has_default,
                message=f"Field '{name}' was added",
            )

        for name, old in before_fields.items():
            new = after_fields.get(name)
            if new is not None:
                yield from self._compare_field(path + (name,), old, new)

    def _compare_field(self, path: SchemaPath, old: Field, new: Field) -> Iterator[DiffEntry]:
        kind_swapped = (
            old.type.kind != new.type.kind
            and old.type.kind in _STRUCTURED_KINDS
            and new.type.kind in _STRUCTURED_KINDS
        )
        if kind_swapped or named_signature(old.type, self.by_name) != named_signature(new.type, self.by_name):
            yield from self._type_change(path, old.type, new.type)

        if old.tag != new.tag:
            yield DiffEntry(
                kind=DiffKind.FIELD_TYPE_CHANGED,
                path=path,
                before={"tag": old.tag},
                after={"tag": new.tag},
                breaking=self._checking,
                message=f"Field number changed from {old.tag} to {new.tag}",
            )

        if old.has_default != new.has_default or (old.has_default and old.default_value != new.default_value):
            yield DiffEntry(
                kind=DiffKind.FIELD_DEFAULT_CHANGED,
                path=path,
                before=old.default_value if old.has_default else None,
                after=new.default_value if new.has_default else None,
                message="Default value changed",
            )

        if (old.documentation or None) != (new.documentation or None):
            yield DiffEntry(
                kind=DiffKind.DOC_CHANGED,
                path=path,
                before=old.documentation,
                after=new.documentation,
                message="Field documentation changed",
            )

        # Inline named types with the same name are compared member by member
        old_named = unwrap_named(old.type)
        new_named = unwrap_named(new.type)
        if (
            old_named is not None
            and new_named is not None
            and old_named.kind == new_named.kind
            and (not self.by_name or old_named.qualified_name == new_named.qualified_name)
        ):
            yield from self._compare_named(path, old_named, new_named)

    def _compare_symbols(self, path: SchemaPath, before: SchemaModel, after: SchemaModel) -> Iterator[DiffEntry]:
        before_values = dict(zip(before.symbols, before.symbol_values))
        after_values = dict(zip(after.symbols, after.symbol_values))
        if before.symbols == after.symbols and before_values == after_values:
            return

        removed = [s for s in before.symbols if s not in after.symbols]
        added = [s for s in after.symbols if s not in before.symbols]
        renumbered = [s for s in before_values if s in after_values and before_values[s] != after_values[s]]

        breaking = False
        if self._checking:
            # The reader must know every symbol the writer may produce
            if self.mode.checks_backward and removed:
                breaking = True
            if self.mode.checks_forward and added:
                breaking = True
            if renumbered:
                breaking = True

        parts = []
        if added:
            parts.append(f"added {added}")
        if removed:
            parts.append(f"removed {removed}")
        if renumbered:
            parts.append(f"renumbered {renumbered}")
        yield DiffEntry(
            kind=DiffKind.SYMBOLS_CHANGED,
            path=path,
            before=list(before.symbols),
            after=list(after.symbols),
            breaking=breaking,
            message="Enum symbols changed: " + (", ".join(parts) if parts else "reordered"),
        )

    def _type_change(self, path: SchemaPath, before: SchemaModel, after: SchemaModel) -> Iterator[DiffEntry]:
        old_sig = named_signature(before, self.by_name)
        new_sig = named_signature(after, self.by_name)
        yield DiffEntry(
            kind=DiffKind.FIELD_TYPE_CHANGED,
            path=path,
            before=old_sig,
            after=new_sig,
            breaking=is_breaking_type_change(before, after, self.mode, self.by_name),
            message=f"Type changed from '{old_sig}' to '{new_sig}'",
        )


def diff(
    before: SchemaInput,
    after: SchemaInput,
    mode: Union[CompatibilityMode, str] = CompatibilityMode.BACKWARD,
) -> List[DiffEntry]:
    """Compare two versions of a schema.

    Args:
        before: The earlier (registered) version
        after: The candidate version
        mode: Compatibility mode deciding which differences are breaking

    Returns:
        Differences in tree order; empty when the schemas are structurally equal.
        Roots of unrelated kinds give a single breaking ``INCOMPARABLE`` entry.
        JSON Schema titles never make a change breaking.
    """
    differ = SchemaDiffer(mode, by_name=_identified_by_name(before, after))
    before_root, after_root = _root(before), _root(after)
    try:
        return list(differ.compare(before_root, after_root))
    except DiffIncomparable as exc:
        logger.debug(f"Schemas are not comparable: {exc}")
        return [
            DiffEntry(
                kind=DiffKind.INCOMPARABLE,
                path=(),
                before=exc.before_kind,
                after=exc.after_kind,
                breaking=True,
                message=str(exc),
            )
        ]


def has_breaking(entries: List[DiffEntry]) -> bool:
    return any(e.breaking for e in entries)
