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

"""Protobuf lint rules.

File-level rules run on the ``FILE`` root; the others run on every message
and enum declaration, nested ones included.
"""

from typing import Any, Iterator, Mapping

from ..exceptions import RuleConfigError
from ..models.issues import Severity
from ..models.schema_model import SchemaFormat, SchemaKind, SchemaModel
from .avro_rules import validate_pattern
from .naming import matches, resolve_pattern
from .rules import Finding, ProtobufRule, Rule, RuleContext

_FILE = frozenset({SchemaKind.FILE})
_MESSAGE = frozenset({SchemaKind.MESSAGE})


def check_package(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    if not ctx.document.package:
        yield Finding("Missing package declaration")


def check_syntax(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    expected = ctx.options.get("expected", "proto3")
    syntax = ctx.document.syntax
    if syntax is None:
        yield Finding("Missing syntax declaration", severity=Severity.ERROR)
    elif syntax != expected:
        yield Finding(f"Expected syntax '{expected}', found '{syntax}'")


def check_message_naming(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    pattern = ctx.options.get("pattern", "PascalCase")
    if not matches(node.name, pattern):
        _, label = resolve_pattern(pattern)
        yield Finding(f"Message '{node.name}' does not follow {label} convention")


def check_enum_zero(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    if node.symbols and 0 not in node.symbol_values:
        yield Finding(f"Enum '{node.name}' should have a zero value")


def check_field_naming(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    pattern = ctx.options.get("pattern", "snake_case")
    _, label = resolve_pattern(pattern)
    for f in node.fields:
        if not matches(f.name, pattern):
            yield Finding(
                f"Field '{f.name}' in message '{node.name}' does not follow {label} convention",
                path=(f.name,),
            )


def check_field_numbers(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    tags = [f.tag for f in node.fields if f.tag is not None]
    if tags and tags != list(range(1, len(tags) + 1)):
        yield Finding(f"Field numbers of message '{node.name}' are not sequential: {tags}")


def validate_expected(options: Mapping[str, Any]) -> None:
    if options.get("expected") not in ("proto2", "proto3"):
        raise RuleConfigError(f"Option 'expected' must be 'proto2' or 'proto3', got {options.get('expected')!r}")


RULES = (
    Rule(
        rule_id=ProtobufRule.PACKAGE_REQUIRED,
        format=SchemaFormat.PROTOBUF,
        severity=Severity.ERROR,
        applies_to=_FILE,
        check=check_package,
        description="The file declares a package",
        root_only=True,
    ),
    Rule(
        rule_id=ProtobufRule.SYNTAX_VERSION,
        format=SchemaFormat.PROTOBUF,
        severity=Severity.WARNING,
        applies_to=_FILE,
        check=check_syntax,
        description="The file declares the expected syntax",
        root_only=True,
        default_options={"expected": "proto3"},
        primary_option="expected",
        validate_options=validate_expected,
    ),
    Rule(
        rule_id=ProtobufRule.MESSAGE_NAMING,
        format=SchemaFormat.PROTOBUF,
        severity=Severity.WARNING,
        applies_to=_MESSAGE,
        check=check_message_naming,
        description="Message names are PascalCase",
        default_options={"pattern": "PascalCase"},
        primary_option="pattern",
        validate_options=validate_pattern,
    ),
    Rule(
        rule_id=ProtobufRule.ENUM_ZERO_VALUE,
        format=SchemaFormat.PROTOBUF,
        severity=Severity.WARNING,
        applies_to=frozenset({SchemaKind.ENUM}),
        check=check_enum_zero,
        description="Enums define a value numbered 0",
    ),
    Rule(
        rule_id=ProtobufRule.FIELD_NAMING,
        format=SchemaFormat.PROTOBUF,
        severity=Severity.WARNING,
        applies_to=_MESSAGE,
        check=check_field_naming,
        description="Field names are snake_case",
        enabled_by_default=False,
        default_options={"pattern": "snake_case"},
        primary_option="pattern",
        validate_options=validate_pattern,
    ),
    Rule(
        rule_id=ProtobufRule.FIELD_NUMBERS_SEQUENTIAL,
        format=SchemaFormat.PROTOBUF,
        severity=Severity.WARNING,
        applies_to=_MESSAGE,
        check=check_field_numbers,
        description="Field numbers run 1..N in declaration order",
        enabled_by_default=False,
    ),
)
