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

"""Rule identifiers and the rule definition type."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, FrozenSet, Iterable, Mapping, Optional

from ..models.issues import SchemaPath, Severity
from ..models.schema_model import SchemaDocument, SchemaFormat, SchemaKind, SchemaModel
from ..models.traversal import NodeVisit


PARSE_RULE_ID = "parse"


class AvroRule(str, Enum):
    NAMESPACE_REQUIRED = "namespace_required"
    DOC_REQUIRED = "doc_required"
    FIELD_DOC_REQUIRED = "field_doc_required"
    NAMING_CONVENTION = "naming_convention"
    ENUM_UPPERCASE = "enum_uppercase"
    MAX_NESTING_DEPTH = "max_nesting_depth"


class ProtobufRule(str, Enum):
    PACKAGE_REQUIRED = "package_required"
    SYNTAX_VERSION = "syntax_version"
    MESSAGE_NAMING = "message_naming"
    ENUM_ZERO_VALUE = "enum_zero_value"
    FIELD_NAMING = "field_naming"
    FIELD_NUMBERS_SEQUENTIAL = "field_numbers_sequential"


class JsonSchemaRule(str, Enum):
    SCHEMA_VERSION_REQUIRED = "schema_version_required"
    TITLE_REQUIRED = "title_required"
    DESCRIPTION_REQUIRED = "description_required"
    ADDITIONAL_PROPERTIES = "additional_properties"


@dataclass(frozen=True)
class Finding:
    """What a rule check reports; the engine turns it into an :class:`Issue`.

    ``path`` is relative to the visited node. ``severity`` overrides the
    configured severity (used when one rule has a hard and a soft failure mode).
    """

    message: str
    path: SchemaPath = ()
    severity: Optional[Severity] = None


@dataclass(frozen=True)
class RuleContext:
    document: SchemaDocument
    visit: NodeVisit
    options: Mapping[str, Any]

    @property
    def node(self) -> SchemaModel:
        return self.visit.node

    @property
    def is_root(self) -> bool:
        return not self.visit.path and self.visit.node is self.document.root


RuleCheck = Callable[[SchemaModel, RuleContext], Iterable[Finding]]
OptionsValidator = Callable[[Mapping[str, Any]], None]


@dataclass(frozen=True)
class Rule:
    """A named, side-effect free check over one node kind set of one format."""

    rule_id: str
    format: SchemaFormat
    severity: Severity
    applies_to: FrozenSet[SchemaKind]
    check: RuleCheck
    description: str = ""
    root_only: bool = False
    enabled_by_default: bool = True
    default_options: Mapping[str, Any] = field(default_factory=dict)
    # Option set by the shorthand form ``rule_id: <value>`` in rule files
    primary_option: Optional[str] = None
    validate_options: Optional[OptionsValidator] = None

    def applies(self, visit: NodeVisit) -> bool:
        if self.root_only and visit.path:
            return False
        return visit.node.kind in self.applies_to
