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

"""JSON Schema lint rules."""

from typing import Iterator

from ..models.issues import Severity
from ..models.schema_model import SchemaFormat, SchemaKind, SchemaModel
from .rules import Finding, JsonSchemaRule, Rule, RuleContext

_ANY_ROOT = frozenset(SchemaKind)


def check_schema_version(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    if not ctx.document.schema_uri:
        yield Finding("Missing $schema declaration")


def check_title(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    if not node.name:
        yield Finding("Missing title")


def check_description(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    if not (node.documentation or "").strip():
        yield Finding("Missing description")


def check_additional_properties(node: SchemaModel, ctx: RuleContext) -> Iterator[Finding]:
    if node.additional_properties is not False:
        yield Finding("Consider setting additionalProperties to false")


RULES = (
    Rule(
        rule_id=JsonSchemaRule.SCHEMA_VERSION_REQUIRED,
        format=SchemaFormat.JSON_SCHEMA,
        severity=Severity.ERROR,
        applies_to=_ANY_ROOT,
        check=check_schema_version,
        description="The document declares $schema",
        root_only=True,
    ),
    Rule(
        rule_id=JsonSchemaRule.TITLE_REQUIRED,
        format=SchemaFormat.JSON_SCHEMA,
        severity=Severity.WARNING,
        applies_to=_ANY_ROOT,
        check=check_title,
        description="The root schema has a title",
        root_only=True,
    ),
    Rule(
        rule_id=JsonSchemaRule.DESCRIPTION_REQUIRED,
        format=SchemaFormat.JSON_SCHEMA,
        severity=Severity.WARNING,
        applies_to=_ANY_ROOT,
        check=check_description,
        description="The root schema has a description",
        root_only=True,
        enabled_by_default=False,
    ),
    Rule(
        rule_id=JsonSchemaRule.ADDITIONAL_PROPERTIES,
        format=SchemaFormat.JSON_SCHEMA,
        severity=Severity.WARNING,
        applies_to=frozenset({SchemaKind.RECORD}),
        check=check_additional_properties,
        description="Objects close their property set",
    ),
)
