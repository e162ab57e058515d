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

"""Comparison of two registries' complete subject sets."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..exceptions import ParseError, SchemaIntelligenceError
from ..models.schema_model import SchemaDocument, SchemaModel
from ..models.traversal import fingerprint
from ..parsers import parse_source
from ..parsers.sources import SchemaSource
from ..reports.batch_reports import DiffReport, SubjectDiff, SubjectFailure
from .modes import CompatibilityMode
from .schema_diff import DiffEntry, DiffKind, diff

logger = logging.getLogger(__name__)


class CompareMode(str, Enum):
    ALL = "all"
    SUBJECTS = "subjects"
    SCHEMAS = "schemas"
    VERSIONS = "versions"

    @classmethod
    def from_value(cls, value) -> "CompareMode":
        if isinstance(value, CompareMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown compare mode: '{value}'. Valid modes: {[m.value for m in cls]}") from None

    @property
    def compares_versions(self) -> bool:
        return self in (CompareMode.ALL, CompareMode.VERSIONS)

    @property
    def compares_schemas(self) -> bool:
        return self in (CompareMode.ALL, CompareMode.SCHEMAS)


@dataclass(frozen=True)
class RegistryVersion:
    """One registered version of a subject."""

    version: int
    schema: Union[SchemaDocument, SchemaModel]
    schema_id: Optional[int] = None
    raw: Optional[str] = None

    @property
    def model(self) -> SchemaModel:
        return self.schema.root if isinstance(self.schema, SchemaDocument) else self.schema


# subject -> registered versions (any order), parsed or as registry payloads
RegistrySnapshot = Mapping[str, Sequence[Union[RegistryVersion, Mapping[str, Any]]]]


def _registry_entry(registry_url: str, subject: str, number: Any, entry: Any) -> RegistryVersion:
    if not isinstance(entry, Mapping):
        raise ParseError(f"Registry entry must be an object, got {type(entry).__name__}")
    text = entry.get("schemaText", entry.get("schema"))
    if not isinstance(text, str):
        raise ParseError("Registry entry has no schema text")
    source = SchemaSource.from_registry(registry_url, subject, number, text, entry.get("schemaType"))
    return RegistryVersion(version=int(number), schema=parse_source(source), schema_id=entry.get("id"), raw=text)


def load_snapshot(
    raw: Optional[Mapping[str, Sequence[Any]]],
    registry_url: str = "",
) -> Tuple[Dict[str, List[RegistryVersion]], List[SubjectFailure]]:
    """Parse a registry export into :class:`RegistryVersion` lists.

    Entries are registry payloads with ``version``, ``schemaText`` (or
    ``schema``), ``schemaType`` (absent for Avro) and ``id``; ready
    ``RegistryVersion`` objects are kept as they are. A version that fails to
    parse is left out and returned as a :class:`SubjectFailure`, the rest of
    the snapshot still loads.

    Args:
        raw: ``{subject: [entry, ...]}``; ``None`` is an empty registry
        registry_url: Registry the entries came from, recorded on failures
    """
    snapshot: Dict[str, List[RegistryVersion]] = {}
    failures: List[SubjectFailure] = []
    for subject, entries in (raw or {}).items():
        versions: List[RegistryVersion] = []
        for idx, entry in enumerate(entries or ()):
            if isinstance(entry, RegistryVersion):
                versions.append(entry)
                continue
            number = entry.get("version", idx + 1) if isinstance(entry, Mapping) else idx + 1
            try:
                versions.append(_registry_entry(registry_url, subject, number, entry))
            except (SchemaIntelligenceError, ValueError) as exc:
                logger.error(f"Failed to load '{subject}' version {number} from {registry_url or 'registry'}: {exc}")
                failures.append(SubjectFailure(subject=subject, registry=registry_url, version=number, error=str(exc)))
        snapshot[subject] = versions
    return snapshot, failures


def latest_version(versions: Sequence[RegistryVersion]) -> Optional[RegistryVersion]:
    if not versions:
        return None
    return max(versions, key=lambda v: v.version)


def diff_registries(
    source: Optional[RegistrySnapshot],
    target: Optional[RegistrySnapshot],
    mode: Union[CompatibilityMode, str] = CompatibilityMode.BACKWARD,
    compare_mode: Union[CompareMode, str] = CompareMode.ALL,
    include_schema_content: bool = False,
) -> DiffReport:
    """Compare the subjects of two registries.

    An absent snapshot is an empty registry. For every common subject the
    version counts are compared, and the latest versions are diffed
    (source as ``before``, target as ``after``) unless their canonical
    fingerprints already match. Raw registry payloads are parsed with
    :func:`load_snapshot`; versions that fail to parse are reported in
    ``DiffReport.failed`` (which fails the report) and their subject is not
    schema-compared.

    Args:
        source: Subjects of the source registry
        target: Subjects of the target registry
        mode: Compatibility mode used to flag breaking differences
        compare_mode: Which comparisons to run (``all``, ``subjects``, ``schemas``, ``versions``)
        include_schema_content: Attach the raw latest schema texts to differing subjects
    """
    raw_source = source or {}
    raw_target = target or {}
    mode = CompatibilityMode.from_value(mode)
    compare_mode = CompareMode.from_value(compare_mode)
    source, source_failures = load_snapshot(raw_source, "source")
    target, target_failures = load_snapshot(raw_target, "target")

    source_subjects = set(source)
    target_subjects = set(target)
    report = DiffReport(
        only_in_source=sorted(source_subjects - target_subjects),
        only_in_target=sorted(target_subjects - source_subjects),
        common=sorted(source_subjects & target_subjects),
        mode=mode.value,
        compare_mode=compare_mode.value,
        failed=source_failures + target_failures,
    )
    failed_subjects = {f.subject for f in report.failed}
    logger.info(
        f"Comparing registries: {len(report.only_in_source)} only in source, "
        f"{len(report.only_in_target)} only in target, {len(report.common)} common"
    )

    for subject in report.common:
        source_count = len(raw_source[subject] or ())
        target_count = len(raw_target[subject] or ())

        if compare_mode.compares_versions and source_count != target_count:
            report.version_mismatches.append(
                DiffEntry(
                    kind=DiffKind.VERSION_COUNT_MISMATCH,
                    path=(subject,),
                    before=source_count,
                    after=target_count,
                    message=(
                        f"Subject '{subject}' has {source_count} versions in source "
                        f"and {target_count} in target"
                    ),
                )
            )

        if not compare_mode.compares_schemas:
            continue
        if subject in failed_subjects:
            logger.warning(f"Subject '{subject}' not compared: a registered version failed to parse")
            continue
        source_latest = latest_version(source[subject])
        target_latest = latest_version(target[subject])
        if source_latest is None or target_latest is None:
            continue
        if fingerprint(source_latest.model) == fingerprint(target_latest.model):
            continue

        entries = diff(source_latest.schema, target_latest.schema, mode)
        if not entries:
            continue
        logger.debug(f"Subject '{subject}': {len(entries)} differences")
        report.schema_diffs.append(
            SubjectDiff(
                subject=subject,
                entries=entries,
                source_version=source_latest.version,
                target_version=target_latest.version,
                source_id=source_latest.schema_id,
                target_id=target_latest.schema_id,
                source_schema=source_latest.raw if include_schema_content else None,
                target_schema=target_latest.raw if include_schema_content else None,
            )
        )

    return report
