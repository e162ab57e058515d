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

"""Parse, lint and compare Avro, Protobuf and JSON Schema definitions."""

__version__ = "0.1.0"

from .compatibility import (
    CompareMode,
    CompatibilityMode,
    CompatibilityResult,
    CompatibilityVerdict,
    DiffEntry,
    DiffKind,
    RegistryVersion,
    check_compatible,
    check_sources,
    diff,
    diff_registries,
    load_snapshot,
    resolve_mode,
)
from .config import EngineConfig, engine_config
from .exceptions import (
    DiffIncomparable,
    FormatVersionError,
    ParseError,
    RuleConfigError,
    SchemaIntelligenceError,
)
from .linter import (
    LintResult,
    RuleConfig,
    RuleSet,
    lint,
    lint_files,
    lint_sources,
    load_rule_set,
    merge_overrides,
)
from .models import Field, Issue, SchemaDocument, SchemaFormat, SchemaKind, SchemaModel, Severity
from .parsers import SchemaSource, detect_format, find_schema_files, parse, parse_model, parse_source
from .reports import CompatibilityReport, DiffReport, LintReport, ResultAggregator, ValidationReport
from .subjects import derive_subject
from .validation import ValidationResult, validate_files, validate_sources

__all__ = [
    "__version__",
    "CompareMode",
    "CompatibilityMode",
    "CompatibilityReport",
    "CompatibilityResult",
    "CompatibilityVerdict",
    "DiffEntry",
    "DiffIncomparable",
    "DiffKind",
    "DiffReport",
    "EngineConfig",
    "Field",
    "FormatVersionError",
    "Issue",
    "LintReport",
    "LintResult",
    "ParseError",
    "RegistryVersion",
    "ResultAggregator",
    "RuleConfig",
    "RuleConfigError",
    "RuleSet",
    "SchemaDocument",
    "SchemaFormat",
    "SchemaIntelligenceError",
    "SchemaKind",
    "SchemaModel",
    "SchemaSource",
    "Severity",
    "ValidationReport",
    "ValidationResult",
    "check_compatible",
    "check_sources",
    "derive_subject",
    "detect_format",
    "diff",
    "diff_registries",
    "engine_config",
    "find_schema_files",
    "lint",
    "lint_files",
    "lint_sources",
    "load_rule_set",
    "load_snapshot",
    "merge_overrides",
    "parse",
    "parse_model",
    "parse_source",
    "resolve_mode",
    "validate_files",
    "validate_sources",
]
