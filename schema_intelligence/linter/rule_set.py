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

"""Rule configuration values and override merging."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from ..exceptions import RuleConfigError
from ..models.issues import Severity
from .catalog import ALL_RULES, get_rule
from .rules import Rule

logger = logging.getLogger(__name__)

_BOOL_STRINGS = {"true": True, "false": False}


@dataclass(frozen=True)
class RuleConfig:
    enabled: bool
    severity: Severity
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "severity": self.severity.value, "options": dict(self.options)}


@dataclass(frozen=True)
class RuleSet:
    """Immutable mapping of rule id to :class:`RuleConfig`."""

    configs: Mapping[str, RuleConfig]

    def __post_init__(self):
        object.__setattr__(self, "configs", MappingProxyType(dict(self.configs)))

    @classmethod
    def defaults(cls) -> "RuleSet":
        return cls({rule.rule_id.value: default_config(rule) for rule in ALL_RULES})

    def config(self, rule_id: str) -> RuleConfig:
        key = str(getattr(rule_id, "value", rule_id))
        if key not in self.configs:
            return default_config(get_rule(key))
        return self.configs[key]

    def is_enabled(self, rule_id: str) -> bool:
        return self.config(rule_id).enabled

    def __iter__(self) -> Iterator[str]:
        return iter(self.configs)

    def __len__(self) -> int:
        return len(self.configs)

    def to_dict(self) -> Dict[str, Any]:
        return {rule_id: cfg.to_dict() for rule_id, cfg in self.configs.items()}


def default_config(rule: Rule) -> RuleConfig:
    return RuleConfig(
        enabled=rule.enabled_by_default,
        severity=rule.severity,
        options=dict(rule.default_options),
    )


def merge_overrides(base: RuleSet, overrides: Optional[Mapping[str, Any]]) -> RuleSet:
    """Return a new rule set with *overrides* applied over *base*.

    Each override is either a mapping with any of ``enabled``, ``severity`` and
    ``options``, or a shorthand: a bool (enable/disable) or a scalar that sets
    the rule's main option and enables it. ``None`` leaves the rule untouched.
    Unknown rule ids are ignored with a warning.

    Raises:
        RuleConfigError: If an override has the wrong shape or invalid options
    """
    if not overrides:
        return base

    configs = dict(base.configs)
    for raw_id, value in overrides.items():
        rule_id = str(getattr(raw_id, "value", raw_id))
        try:
            rule = get_rule(rule_id)
        except KeyError:
            logger.warning(f"Ignoring override for unknown rule '{rule_id}'")
            continue
        if value is None:
            continue
        current = configs.get(rule_id) or default_config(rule)
        configs[rule_id] = _apply_override(rule, current, value)
    return RuleSet(configs)


def _apply_override(rule: Rule, current: RuleConfig, value: Any) -> RuleConfig:
    rule_id = rule.rule_id.value
    if isinstance(value, str) and value.strip().lower() in _BOOL_STRINGS:
        value = _BOOL_STRINGS[value.strip().lower()]

    if isinstance(value, bool):
        return replace(current, enabled=value)

    if isinstance(value, Mapping):
        unknown = set(value) - {"enabled", "severity", "options"}
        if unknown:
            raise RuleConfigError(f"Rule '{rule_id}': unknown keys {sorted(unknown)}")
        enabled = value.get("enabled", current.enabled)
        if not isinstance(enabled, bool):
            raise RuleConfigError(f"Rule '{rule_id}': 'enabled' must be a boolean, got {enabled!r}")
        severity = current.severity
        if value.get("severity") is not None:
            try:
                severity = Severity.from_value(value["severity"])
            except ValueError as exc:
                raise RuleConfigError(f"Rule '{rule_id}': {exc}") from exc
        options = dict(current.options)
        extra = value.get("options") or {}
        if not isinstance(extra, Mapping):
            raise RuleConfigError(f"Rule '{rule_id}': 'options' must be a mapping")
        options.update(extra)
        return _validated(rule, RuleConfig(enabled=enabled, severity=severity, options=options))

    if isinstance(value, (str, int, float)):
        if rule.primary_option is None:
            raise RuleConfigError(f"Rule '{rule_id}' takes no option value, got {value!r}")
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value)
        options = dict(current.options)
        options[rule.primary_option] = value
        return _validated(rule, RuleConfig(enabled=True, severity=current.severity, options=options))

    raise RuleConfigError(f"Rule '{rule_id}': unsupported override {value!r}")


def _validated(rule: Rule, config: RuleConfig) -> RuleConfig:
    if rule.validate_options is not None:
        try:
            rule.validate_options(config.options)
        except RuleConfigError as exc:
            raise RuleConfigError(f"Rule '{rule.rule_id.value}': {exc}") from exc
    return config
