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

"""Avro lint rules."""

from typing import Any, Iterator, Mapping

from ..exceptions import RuleConfigError
from ..models.issues import Severity
from ..models.schema_model import SchemaFormat, SchemaKind, SchemaModel
from .naming import matches, resolve_pattern
from .rules import AvroRule, Finding, Rule, RuleContext

_NAMED = frozenset({SchemaKind.RECORD, SchemaKind.ENUM, SchemaKind.PRIMITIVE})


def _is_named_type(node: SchemaModel) -> bool:
    # fixed is the only primitive carrying a name
    return bool(node.name) or node.kind != SchemaKind.PRIMITIVE


def _label(node: SchemaModel) -> str:
    return node.qualified_name or node.kind.value


def check_namespace(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    if _is_named_type(node) and not node.namespace:
        yield Finding("Missing namespace")


def check_doc(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    if not _is_named_type(node):
        return
    if not (node.documentation or "").strip():
        if ctx.visit.path:
            yield Finding(f"Type '{_label(node)}' missing documentation")
        else:
            yield Finding("Missing documentation")


def check_field_doc(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    for f in node.fields:
        if not (f.documentation or "").strip():
            yield Finding(f"Field '{f.name}' missing documentation", path=(f.name,))


def check_naming(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    if not node.name:
        return
    pattern = ctx.options.get("pattern", "camelCase")
    if not matches(node.name, pattern):
        _, label = resolve_pattern(pattern)
        yield Finding(f"Name '{node.name}' does not follow {label} convention")


def check_enum_symbols(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    pattern = ctx.options.get("pattern", "UPPERCASE")
    for symbol in node.symbols:
        if not matches(symbol, pattern):
            yield Finding(f"Enum symbol '{symbol}' should be uppercase")


def check_nesting_depth(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    limit = ctx.options.get("limit", 5)
    # Report once per branch, at the first record past the limit
    if ctx.visit.depth == limit + 1:
        yield Finding(f"Nesting depth {ctx.visit.depth} exceeds the maximum of {limit}")


def validate_pattern(options: Mapping[str, Any]) -> None:
    pattern = options.get("pattern")
    if not isinstance(pattern, str) or not pattern:
        raise RuleConfigError(f"Option 'pattern' must be a non-empty string, got {pattern!r}")
    resolve_pattern(pattern)


def validate_limit(options: Mapping[str, Any]) -> None:
    limit = options.get("limit")
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise RuleConfigError(f"Option 'limit' must be a positive integer, got {limit!r}")


RULES = (
    Rule(
        rule_id=AvroRule.NAMESPACE_REQUIRED,
        format=SchemaFormat.AVRO,
        severity=Severity.WARNING,
        applies_to=_NAMED,
        check=check_namespace,
        description="The root type declares a namespace",
        root_only=True,
    ),
    Rule(
        rule_id=AvroRule.DOC_REQUIRED,
        format=SchemaFormat.AVRO,
        severity=Severity.WARNING,
        applies_to=_NAMED,
        check=check_doc,
        description="Named types carry a doc string",
    ),
    Rule(
        rule_id=AvroRule.FIELD_DOC_REQUIRED,
        format=SchemaFormat.AVRO,
        severity=Severity.WARNING,
        applies_to=frozenset({SchemaKind.RECORD}),
        check=check_field_doc,
        description="Record fields carry a doc string",
        enabled_by_default=False,
    ),
    Rule(
        rule_id=AvroRule.NAMING_CONVENTION,
        format=SchemaFormat.AVRO,
        severity=Severity.WARNING,
        applies_to=_NAMED,
        check=check_naming,
        description="The root type name follows the naming convention",
        root_only=True,
        default_options={"pattern": "camelCase"},
        primary_option="pattern",
        validate_options=validate_pattern,
    ),
    Rule(
        rule_id=AvroRule.ENUM_UPPERCASE,
        format=SchemaFormat.AVRO,
        severity=Severity.WARNING,
        applies_to=frozenset({SchemaKind.ENUM}),
        check=check_enum_symbols,
        description="Enum symbols are uppercase",
        default_options={"pattern": "UPPERCASE"},
        primary_option="pattern",
        validate_options=validate_pattern,
    ),
    Rule(
        rule_id=AvroRule.MAX_NESTING_DEPTH,
        format=SchemaFormat.AVRO,
        severity=Severity.WARNING,
        applies_to=frozenset({SchemaKind.RECORD}),
        check=check_nesting_depth,
        description="Records are not nested deeper than the limit",
        default_options={"limit": 5},
        primary_option="limit",
        validate_options=validate_limit,
    ),
)
