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

"""Compatibility of a candidate schema with its registered versions."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..exceptions import SchemaIntelligenceError
from ..models.schema_model import SchemaDocument, SchemaModel
from ..parsers import parse_source
from ..parsers.sources import RegistryOrigin, SchemaSource
from ..reports.aggregator import ResultAggregator
from ..reports.batch_reports import CompatibilityReport
from ..subjects import derive_subject
from .modes import CompatibilityMode
from .registry_diff import RegistryVersion
from .schema_diff import DiffEntry, diff

logger = logging.getLogger(__name__)

DEFAULT_MODE = CompatibilityMode.BACKWARD

PriorVersion = Union[RegistryVersion, SchemaDocument, SchemaModel]


class CompatibilityVerdict(str, Enum):
    COMPATIBLE = "compatible"
    INCOMPATIBLE = "incompatible"
    # No prior version to break: counts as compatible
    UNKNOWN_SUBJECT_NOT_FOUND = "unknown_subject_not_found"

    @property
    def is_compatible(self) -> bool:
        return self != CompatibilityVerdict.INCOMPATIBLE


@dataclass
class CompatibilityResult:
    identifier: str
    verdict: CompatibilityVerdict
    mode: CompatibilityMode = DEFAULT_MODE
    entries: List[DiffEntry] = field(default_factory=list)
    checked_versions: List[int] = field(default_factory=list)
    source: Optional[str] = None
    error: Optional[str] = None

    @property
    def compatible(self) -> bool:
        return self.error is None and self.verdict.is_compatible

    @property
    def breaking_entries(self) -> List[DiffEntry]:
        return [e for e in self.entries if e.breaking]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "subject": self.identifier,
            "verdict": self.verdict.value,
            "compatible": self.compatible,
            "mode": self.mode.value,
            "checked_versions": list(self.checked_versions),
            "entries": [e.to_dict() for e in self.entries],
        }
        if self.source is not None:
            data["source"] = self.source
        if self.error is not None:
            data["error"] = self.error
        return data


def resolve_mode(
    requested: Union[CompatibilityMode, str, None] = None,
    registry_config: Optional[Mapping[str, Any]] = None,
) -> CompatibilityMode:
    """Pick the mode to check with.

    An explicit request wins; otherwise the registry's configured
    ``compatibilityLevel`` (``compatibility`` in older registry APIs); otherwise BACKWARD.
    """
    if requested:
        return CompatibilityMode.from_value(requested)
    if registry_config:
        level = registry_config.get("compatibilityLevel") or registry_config.get("compatibility")
        if level:
            return CompatibilityMode.from_value(level)
    return DEFAULT_MODE


def _ordered(prior: Sequence[PriorVersion]) -> List[tuple]:
    """(version number, schema) pairs, oldest first."""
    numbered = []
    for idx, item in enumerate(prior):
        if isinstance(item, RegistryVersion):
            numbered.append((item.version, item.schema))
        else:
            numbered.append((idx + 1, item))
    return sorted(numbered, key=lambda pair: pair[0])


def check_compatible(
    model: Union[SchemaDocument, SchemaModel],
    prior: Optional[Sequence[PriorVersion]],
    mode: Union[CompatibilityMode, str] = DEFAULT_MODE,
    identifier: str = "<inline>",
) -> CompatibilityResult:
    """Check a candidate schema against the registered versions of its subject.

    Args:
        model: Candidate schema
        prior: Registered versions (absent or empty when the subject is unknown)
        mode: Compatibility mode; transitive modes check every prior version
        identifier: Subject name used in the result

    Returns:
        ``UNKNOWN_SUBJECT_NOT_FOUND`` without prior versions, ``INCOMPATIBLE``
        when any diff entry is breaking, ``COMPATIBLE`` otherwise.
    """
    mode = CompatibilityMode.from_value(mode)
    if not prior:
        logger.info(f"Subject '{identifier}' has no registered versions; treating as compatible")
        return CompatibilityResult(identifier=identifier, verdict=CompatibilityVerdict.UNKNOWN_SUBJECT_NOT_FOUND, mode=mode)

    versions = _ordered(prior)
    if not mode.transitive:
        versions = versions[-1:]

    entries: List[DiffEntry] = []
    checked: List[int] = []
    for number, schema in versions:
        checked.append(number)
        for entry in diff(schema, model, mode):
            if entry not in entries:
                entries.append(entry)

    breaking = any(e.breaking for e in entries)
    verdict = CompatibilityVerdict.INCOMPATIBLE if breaking else CompatibilityVerdict.COMPATIBLE
    logger.debug(f"Subject '{identifier}' checked against versions {checked}: {verdict.value}")
    return CompatibilityResult(
        identifier=identifier,
        verdict=verdict,
        mode=mode,
        entries=entries,
        checked_versions=checked,
    )


def _subject_of(source: SchemaSource, document: Optional[SchemaDocument]) -> str:
    if isinstance(source.origin, RegistryOrigin):
        return source.origin.subject
    return derive_subject(document, source.path)


def check_sources(
    sources: Iterable[SchemaSource],
    registered: Optional[Mapping[str, Sequence[PriorVersion]]] = None,
    mode: Union[CompatibilityMode, str, None] = None,
    registry_config: Optional[Mapping[str, Any]] = None,
    max_workers: int = 1,
) -> CompatibilityReport:
    """Check a batch of candidate schemas against the registered versions of their subjects.

    A schema that fails to parse is reported as incompatible with the parse
    error attached; the rest of the batch still runs.

    Args:
        sources: Candidate schemas
        registered: Registered versions keyed by subject (absent subjects are unknown)
        mode: Explicit compatibility mode, see :func:`resolve_mode`
        registry_config: Registry configuration used when no mode is given
        max_workers: Worker threads (1 runs inline)
    """
    registered = registered or {}
    effective_mode = resolve_mode(mode, registry_config)
    aggregator = ResultAggregator()

    def _check(source: SchemaSource) -> None:
        try:
            document = parse_source(source)
            subject = _subject_of(source, document)
            result = check_compatible(document, registered.get(subject), effective_mode, identifier=subject)
        except (SchemaIntelligenceError, ValueError) as exc:
            logger.error(f"Failed to check {source.identifier}: {exc}")
            result = CompatibilityResult(
                identifier=source.identifier,
                verdict=CompatibilityVerdict.INCOMPATIBLE,
                mode=effective_mode,
                error=str(exc),
            )
        if source.path is not None:
            result.source = str(source.path)
        aggregator.record(result.identifier, result.compatible, result.entries, payload=result)

    source_list = list(sources)
    if max_workers and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            list(executor.map(_check, source_list))
    else:
        for source in source_list:
            _check(source)

    report = CompatibilityReport([rec.payload for rec in aggregator.finalize()])
    logger.info(
        f"Compatibility check finished ({effective_mode.value}): "
        f"{report.summary['compatible']}/{report.summary['total']} compatible"
    )
    return report
