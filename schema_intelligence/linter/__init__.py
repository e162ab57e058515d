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

"""Rule-based schema linter."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..exceptions import SchemaIntelligenceError
from ..parsers import parse_source
from ..parsers.protobuf_parser import MISSING_PACKAGE_MESSAGE, MISSING_SYNTAX_MESSAGE
from ..parsers.sources import SchemaSource
from ..reports.aggregator import ResultAggregator
from ..reports.batch_reports import LintReport
from .engine import lint
from .report import LintResult
from .rule_file import load_rule_file, load_rule_set
from .rule_set import RuleConfig, RuleSet, merge_overrides
from .rules import AvroRule, JsonSchemaRule, ProtobufRule

logger = logging.getLogger(__name__)

# Parse-time warnings and the rule that reports the same problem
_PARSE_WARNING_RULES = {
    MISSING_SYNTAX_MESSAGE: ProtobufRule.SYNTAX_VERSION,
    MISSING_PACKAGE_MESSAGE: ProtobufRule.PACKAGE_REQUIRED,
}

__all__ = [
    "AvroRule",
    "JsonSchemaRule",
    "LintResult",
    "ProtobufRule",
    "RuleConfig",
    "RuleSet",
    "lint",
    "lint_files",
    "lint_source",
    "lint_sources",
    "load_rule_file",
    "load_rule_set",
    "merge_overrides",
]


def lint_source(source: SchemaSource, rule_set: Optional[RuleSet] = None, strict: bool = False) -> LintResult:
    """Parse and lint one schema.

    A schema that cannot be parsed yields a single ``parse`` error instead of
    raising. Parse-time warnings are kept unless an enabled rule already
    reports the same problem.
    """
    rule_set = rule_set if rule_set is not None else RuleSet.defaults()
    result = LintResult(source.identifier, schema_format=source.format, strict=strict)
    try:
        result.format = source.resolve_format()
        document = parse_source(source, result.format)
    except SchemaIntelligenceError as exc:
        logger.debug(f"Parse failure in {source.identifier}: {exc}")
        result.add_error(str(exc), path=getattr(exc, "path", ()))
        return result
    result.extend(lint(document, rule_set))
    for warning in document.warnings:
        covering_rule = _PARSE_WARNING_RULES.get(warning.message)
        if covering_rule is None or not rule_set.is_enabled(covering_rule):
            result.add_issue(warning)
    return result


def lint_sources(
    sources: Iterable[SchemaSource],
    rule_set: Optional[RuleSet] = None,
    strict: bool = False,
    max_workers: int = 1,
) -> LintReport:
    """Lint a batch of schemas.

    Each item is parsed, linted and recorded independently; one failing item
    never aborts the batch.

    Args:
        sources: Schemas to lint
        rule_set: Effective rules (defaults when omitted)
        strict: Fail items that only have warnings
        max_workers: Worker threads (1 runs inline)

    Returns:
        LintReport ordered by identifier
    """
    rule_set = rule_set if rule_set is not None else RuleSet.defaults()
    aggregator = ResultAggregator()

    def _lint(source: SchemaSource) -> None:
        result = lint_source(source, rule_set, strict)
        aggregator.record(result.identifier, result.passed, result.issues, payload=result)

    source_list = list(sources)
    if max_workers and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            list(executor.map(_lint, source_list))
    else:
        for source in source_list:
            _lint(source)

    report = LintReport([rec.payload for rec in aggregator.finalize()], strict=strict)
    summary = report.summary
    logger.info(
        f"Linted {summary['total']} schemas: {summary['passed']} passed, {summary['failed']} failed "
        f"({summary['errors']} errors, {summary['warnings']} warnings)"
    )
    return report


def lint_files(
    file_paths: Iterable[Union[str, Path]],
    rule_set: Optional[RuleSet] = None,
    strict: bool = False,
    max_workers: int = 1,
) -> LintReport:
    """Lint schema files; unreadable files are reported as ``parse`` errors."""
    sources: List[SchemaSource] = []
    unreadable: List[LintResult] = []
    for file_path in file_paths:
        try:
            sources.append(SchemaSource.from_path(file_path))
        except SchemaIntelligenceError as exc:
            logger.error(str(exc))
            result = LintResult(str(file_path), strict=strict)
            result.add_error(str(exc))
            unreadable.append(result)

    report = lint_sources(sources, rule_set, strict, max_workers)
    if unreadable:
        report = LintReport(sorted(report.results + unreadable, key=lambda r: r.identifier), strict=strict)
    return report
