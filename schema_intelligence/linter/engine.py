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

"""Rule evaluation over a parsed schema."""

import logging
from typing import Iterator, List, Optional, Tuple, Union

from ..models.issues import Issue
from ..models.schema_model import SchemaDocument, SchemaFormat, SchemaKind, SchemaModel
from ..models.traversal import walk
from .catalog import RULES_BY_FORMAT
from .rule_set import RuleConfig, RuleSet
from .rules import Rule, RuleContext

logger = logging.getLogger(__name__)


def as_document(
    document_or_model: Union[SchemaDocument, SchemaModel],
    schema_format: Optional[SchemaFormat] = None,
) -> SchemaDocument:
    """Wrap a bare model in a document.

    Without an explicit format a ``FILE`` root is Protobuf and anything else Avro.
    """
    if isinstance(document_or_model, SchemaDocument):
        return document_or_model
    if schema_format is None:
        schema_format = SchemaFormat.PROTOBUF if document_or_model.kind == SchemaKind.FILE else SchemaFormat.AVRO
    return SchemaDocument(format=SchemaFormat.from_value(schema_format), root=document_or_model)


def lint(
    document_or_model: Union[SchemaDocument, SchemaModel],
    rule_set: Optional[RuleSet] = None,
    schema_format: Optional[SchemaFormat] = None,
) -> Iterator[Issue]:
    """Lazily yield the issues found in a schema.

    One pre-order pass over the tree; at each node the enabled rules of the
    document's format run in registration order.

    Args:
        document_or_model: Parsed document (or bare root model)
        rule_set: Effective rule configuration; defaults when omitted
        schema_format: Format of a bare model (ignored for documents)
    """
    document = as_document(document_or_model, schema_format)
    rule_set = rule_set if rule_set is not None else RuleSet.defaults()

    active: List[Tuple[Rule, RuleConfig]] = []
    for rule in RULES_BY_FORMAT[document.format]:
        config = rule_set.config(rule.rule_id)
        if config.enabled:
            active.append((rule, config))
    if not active:
        return
    logger.debug(f"Linting {document.format.value} schema with {len(active)} active rules")

    for visit in walk(document.root):
        for rule, config in active:
            if not rule.applies(visit):
                continue
            ctx = RuleContext(document=document, visit=visit, options=config.options)
            for finding in rule.check(visit.node, ctx):
                yield Issue(
                    rule_id=rule.rule_id.value,
                    severity=finding.severity or config.severity,
                    message=finding.message,
                    path=visit.path + tuple(finding.path),
                )
