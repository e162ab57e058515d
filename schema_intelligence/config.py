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

"""Configuration management for the schema intelligence engine."""

import os
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from .compatibility.check import PriorVersion, check_sources
from .linter import lint_sources
from .linter.rule_file import load_rule_file, load_rule_set
from .linter.rule_set import RuleSet, merge_overrides
from .parsers.sources import SchemaSource
from .reports.batch_reports import CompatibilityReport, LintReport, ValidationReport
from .validation import validate_sources
from .utils.logging_utils import configure_split_stream_logging

ENV_PREFIX = "SCHEMA_INTELLIGENCE_"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


@dataclass
class EngineConfig:
    """Configuration class for batch runs of the engine."""
    log_level: str = "INFO"
    print_level: str = "WARNING"
    strict: bool = False
    # None: use the registry's configured level, then BACKWARD
    compatibility_level: Optional[str] = None
    max_workers: int = 1
    rules_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'EngineConfig':
        """Create configuration from environment variables."""
        return cls(
            log_level=_env('LOG_LEVEL', 'INFO'),
            print_level=_env('PRINT_LEVEL', 'WARNING'),
            strict=_env('STRICT', 'false').lower() == 'true',
            compatibility_level=_env('COMPATIBILITY_LEVEL') or None,
            max_workers=max(1, int(_env('MAX_WORKERS', '1'))),
            rules_file=_env('RULES_FILE') or None,
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        stderr_level = getattr(logging, self.print_level.upper(), logging.WARNING)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        configure_split_stream_logging(level=level, stderr_level=stderr_level, formatter=formatter)

        return logging.getLogger('schema_intelligence')

    def load_rule_set(self) -> RuleSet:
        """Defaults merged with the configured rule file (if any).

        Raises:
            RuleConfigError: If the rule file is missing or invalid
        """
        return load_rule_set(self.rules_file)

    def lint(self, sources: Iterable[SchemaSource]) -> LintReport:
        """Lint with the configured rule file, strictness and worker count.

        Strict mode is on when the environment or the rule file asks for it.
        """
        rule_file = load_rule_file(self.rules_file) if self.rules_file else None
        rule_set = merge_overrides(RuleSet.defaults(), rule_file.overrides if rule_file else None)
        strict = self.strict or bool(rule_file and rule_file.strict)
        return lint_sources(sources, rule_set, strict=strict, max_workers=self.max_workers)

    def check(
        self,
        sources: Iterable[SchemaSource],
        registered: Optional[Mapping[str, Sequence[PriorVersion]]] = None,
        registry_config: Optional[Mapping[str, Any]] = None,
    ) -> CompatibilityReport:
        """Check compatibility at the configured level (else the registry's) with the configured workers."""
        return check_sources(
            sources,
            registered,
            mode=self.compatibility_level,
            registry_config=registry_config,
            max_workers=self.max_workers,
        )

    def validate(self, sources: Iterable[SchemaSource]) -> ValidationReport:
        return validate_sources(sources, max_workers=self.max_workers)


# Global configuration instance
engine_config = EngineConfig.from_env()
