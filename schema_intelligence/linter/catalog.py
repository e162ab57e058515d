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

"""Registered lint rules, in the order they run at each node."""

from typing import Dict, Tuple

from ..models.schema_model import SchemaFormat
from . import avro_rules, json_schema_rules, protobuf_rules
from .rules import Rule

RULES_BY_FORMAT: Dict[SchemaFormat, Tuple[Rule, ...]] = {
    SchemaFormat.AVRO: avro_rules.RULES,
    SchemaFormat.PROTOBUF: protobuf_rules.RULES,
    SchemaFormat.JSON_SCHEMA: json_schema_rules.RULES,
}

ALL_RULES: Tuple[Rule, ...] = tuple(rule for rules in RULES_BY_FORMAT.values() for rule in rules)

_RULES_BY_ID: Dict[str, Rule] = {rule.rule_id.value: rule for rule in ALL_RULES}


def get_rule(rule_id: str) -> Rule:
    """Look up a rule by id.

    Raises:
        KeyError: If no rule has this id
    """
    return _RULES_BY_ID[str(getattr(rule_id, "value", rule_id))]


def known_rule_ids() -> Tuple[str, ...]:
    return tuple(_RULES_BY_ID)
