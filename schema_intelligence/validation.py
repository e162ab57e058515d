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

"""Structural validation of schema files."""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from .exceptions import SchemaIntelligenceError
from .models.issues import Issue
from .models.schema_model import SchemaDocument, SchemaFormat, SchemaKind
from .parsers import parse_source
from .parsers.sources import SchemaSource, find_schema_files
from .reports.aggregator import ResultAggregator
from .reports.batch_reports import ValidationReport

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    identifier: str
    format: Optional[SchemaFormat] = None
    error: Optional[str] = None
    warnings: List[Issue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.error is None

    @property
    def status(self) -> str:
        return "valid" if self.valid else "invalid"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.identifier,
            "status": self.status,
            "format": self.format.value if self.format else None,
            "error": self.error,
            "warnings": [w.to_dict() for w in self.warnings],
        }


def check_metaschema(raw_text: str) -> Optional[str]:
    """Validate a JSON Schema document against the metaschema it declares.

    Returns:
        Error message, or None when the document is a valid schema
    """
    schema = json.loads(raw_text)
    validator_cls = validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as exc:
        location = "/".join(str(p) for p in exc.absolute_path)
        return f"Invalid JSON Schema at '/{location}': {exc.message}"
    return None


def _structural_error(document: SchemaDocument, source: SchemaSource) -> Optional[str]:
    if document.format == SchemaFormat.PROTOBUF:
        has_message = any(f.type.kind == SchemaKind.MESSAGE for f in document.root.fields)
        if not (document.syntax or document.package or has_message):
            return "No syntax, package or message declaration found"
    elif document.format == SchemaFormat.JSON_SCHEMA:
        return check_metaschema(source.text)
    return None


def validate_source(source: SchemaSource) -> ValidationResult:
    """Validate one schema; never raises for malformed input."""
    result = ValidationResult(identifier=source.identifier, format=source.format)
    try:
        result.format = source.resolve_format()
        document = parse_source(source, result.format)
    except SchemaIntelligenceError as exc:
        result.error = str(exc)
        return result
    result.warnings = list(document.warnings)
    result.error = _structural_error(document, source)
    return result


def validate_sources(sources: Iterable[SchemaSource], max_workers: int = 1) -> ValidationReport:
    """Validate a batch of schemas.

    An empty batch produces a failed report.
    """
    aggregator = ResultAggregator()

    def _validate(source: SchemaSource) -> None:
        result = validate_source(source)
        if not result.valid:
            logger.warning(f"Validation failed for {result.identifier}: {result.error}")
        aggregator.record(result.identifier, result.valid, result.warnings, payload=result)

    source_list = list(sources)
    if max_workers and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            list(executor.map(_validate, source_list))
    else:
        for source in source_list:
            _validate(source)

    report = ValidationReport([rec.payload for rec in aggregator.finalize()])
    if not source_list:
        logger.error("No schemas to validate")
    else:
        logger.info(f"Validated {report.summary['total']} schemas: {report.summary['invalid']} invalid")
    return report


def validate_files(
    paths: Iterable[Union[str, Path]],
    schema_format: Union[SchemaFormat, str, None] = None,
    max_workers: int = 1,
) -> ValidationReport:
    """Discover schema files under *paths* and validate them."""
    sources: List[SchemaSource] = []
    unreadable: List[ValidationResult] = []
    for file_path in find_schema_files(paths, schema_format):
        try:
            sources.append(SchemaSource.from_path(file_path, schema_format))
        except SchemaIntelligenceError as exc:
            unreadable.append(ValidationResult(identifier=str(file_path), error=str(exc)))

    report = validate_sources(sources, max_workers)
    if unreadable:
        report = ValidationReport(sorted(report.results + unreadable, key=lambda r: r.identifier))
    return report
