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

"""Batch reports handed back to callers.

Every report renders to plain JSON-compatible data through ``to_dict()`` and
exposes an overall ``status`` (``success``, ``warning`` or ``failure``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from ..compatibility.check import CompatibilityResult
    from ..compatibility.schema_diff import DiffEntry
    from ..linter.report import LintResult
    from ..validation import ValidationResult

STATUS_SUCCESS = "success"
STATUS_WARNING = "warning"
STATUS_FAILURE = "failure"


class LintReport:
    """Outcome of linting a batch of schemas."""

    def __init__(self, results: List["LintResult"], strict: bool = False):
        self.results = list(results)
        self.strict = strict

    @property
    def summary(self) -> Dict[str, int]:
        passed = sum(1 for r in self.results if r.passed)
        return {
            "total": len(self.results),
            "passed": passed,
            "failed": len(self.results) - passed,
            "warnings": sum(len(r.warnings) for r in self.results),
            "errors": sum(len(r.errors) for r in self.results),
        }

    @property
    def status(self) -> str:
        return STATUS_SUCCESS if self.summary["failed"] == 0 else STATUS_FAILURE

    @property
    def ok(self) -> bool:
        return self.status != STATUS_FAILURE

    def result_for(self, identifier: str) -> Optional["LintResult"]:
        return next((r for r in self.results if r.identifier == identifier), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": "lint",
            "status": self.status,
            "strict": self.strict,
            "summary": self.summary,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class SubjectDiff:
    """Comparison of the latest versions of one subject present in both registries."""

    subject: str
    entries: List["DiffEntry"] = field(default_factory=list)
    source_version: Optional[int] = None
    target_version: Optional[int] = None
    source_id: Optional[int] = None
    target_id: Optional[int] = None
    source_schema: Optional[str] = None
    target_schema: Optional[str] = None

    @property
    def breaking(self) -> bool:
        return any(e.breaking for e in self.entries)

    def to_dict(self) -> Dict[str, Any]:
        source: Dict[str, Any] = {"id": self.source_id, "version": self.source_version}
        target: Dict[str, Any] = {"id": self.target_id, "version": self.target_version}
        if self.source_schema is not None:
            source["schema"] = self.source_schema
        if self.target_schema is not None:
            target["schema"] = self.target_schema
        return {
            "subject": self.subject,
            "type": "schema_content_mismatch",
            "breaking": self.breaking,
            "source": source,
            "target": target,
            "entries": [e.to_dict() for e in self.entries],
        }


@dataclass
class SubjectFailure:
    """A registered schema version that could not be parsed."""

    subject: str
    registry: str
    version: Any = None
    error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "registry": self.registry,
            "version": self.version,
            "error": self.error,
        }


@dataclass
class DiffReport:
    """Outcome of comparing two registries' subject sets."""

    only_in_source: List[str] = field(default_factory=list)
    only_in_target: List[str] = field(default_factory=list)
    common: List[str] = field(default_factory=list)
    version_mismatches: List["DiffEntry"] = field(default_factory=list)
    schema_diffs: List[SubjectDiff] = field(default_factory=list)
    failed: List[SubjectFailure] = field(default_factory=list)
    mode: str = "BACKWARD"
    compare_mode: str = "all"

    @property
    def summary(self) -> Dict[str, int]:
        result = {
            "only_in_source": len(self.only_in_source),
            "only_in_target": len(self.only_in_target),
            "common_subjects": len(self.common),
            "schema_differences": len(self.schema_diffs),
            "version_differences": len(self.version_mismatches),
            "failed_subjects": len({f.subject for f in self.failed}),
        }
        result["total_differences"] = (
            result["only_in_source"]
            + result["only_in_target"]
            + result["schema_differences"]
            + result["version_differences"]
        )
        return result

    @property
    def has_breaking(self) -> bool:
        return any(d.breaking for d in self.schema_diffs)

    @property
    def status(self) -> str:
        if self.failed or self.has_breaking:
            return STATUS_FAILURE
        if self.summary["total_differences"]:
            return STATUS_WARNING
        return STATUS_SUCCESS

    @property
    def ok(self) -> bool:
        return self.status != STATUS_FAILURE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": "compare",
            "status": self.status,
            "mode": self.mode,
            "compare_mode": self.compare_mode,
            "summary": self.summary,
            "subjects": {
                "only_in_source": list(self.only_in_source),
                "only_in_target": list(self.only_in_target),
                "common": list(self.common),
            },
            "versions": [e.to_dict() for e in self.version_mismatches],
            "schemas": [d.to_dict() for d in self.schema_diffs],
            "failed": [f.to_dict() for f in self.failed],
        }


class CompatibilityReport:
    """Outcome of checking a batch of candidate schemas against their registered versions."""

    def __init__(self, results: List["CompatibilityResult"]):
        self.results = list(results)

    @property
    def summary(self) -> Dict[str, int]:
        compatible = sum(1 for r in self.results if r.compatible)
        return {
            "total": len(self.results),
            "compatible": compatible,
            "incompatible": len(self.results) - compatible,
        }

    @property
    def status(self) -> str:
        return STATUS_SUCCESS if self.summary["incompatible"] == 0 else STATUS_FAILURE

    @property
    def ok(self) -> bool:
        return self.status != STATUS_FAILURE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": "check-compatibility",
            "status": self.status,
            "summary": self.summary,
            "results": [r.to_dict() for r in self.results],
        }


class ValidationReport:
    """Outcome of structurally validating a batch of schemas."""

    def __init__(self, results: List["ValidationResult"]):
        self.results = list(results)

    @property
    def summary(self) -> Dict[str, int]:
        valid = sum(1 for r in self.results if r.valid)
        return {"total": len(self.results), "valid": valid, "invalid": len(self.results) - valid}

    @property
    def status(self) -> str:
        # Nothing validated is a failure
        if not self.results or self.summary["invalid"]:
            return STATUS_FAILURE
        return STATUS_SUCCESS

    @property
    def ok(self) -> bool:
        return self.status != STATUS_FAILURE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": "validate",
            "status": self.status,
            "summary": self.summary,
            "results": [r.to_dict() for r in self.results],
        }
