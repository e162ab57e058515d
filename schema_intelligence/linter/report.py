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

"""Error reporting for the linter."""

from typing import Any, Dict, Iterable, List, Optional

from ..models.issues import Issue, SchemaPath, Severity
from ..models.schema_model import SchemaFormat
from .rules import PARSE_RULE_ID


class LintResult:
    """Container for linting results for a single schema."""

    def __init__(self, identifier: str, schema_format: Optional[SchemaFormat] = None, strict: bool = False):
        """Initialize lint result.

        Args:
            identifier: File path or subject of the schema being linted
            schema_format: Detected format (None when detection failed)
            strict: Whether warnings fail the item
        """
        self.identifier = identifier
        self.format = schema_format
        self.strict = strict
        self.issues: List[Issue] = []

    def add_issue(self, issue: Issue):
        self.issues.append(issue)

    def extend(self, issues: Iterable[Issue]):
        self.issues.extend(issues)

    def add_error(self, message: str, rule_id: str = PARSE_RULE_ID, path: SchemaPath = ()):
        """Add an error issue.

        Args:
            message: Error message
            rule_id: Rule that produced the error (``parse`` for load failures)
            path: Optional structural path of the offending node
        """
        self.issues.append(Issue(rule_id=rule_id, severity=Severity.ERROR, message=message, path=tuple(path)))

    def add_warning(self, message: str, rule_id: str, path: SchemaPath = ()):
        """Add a warning issue."""
        self.issues.append(Issue(rule_id=rule_id, severity=Severity.WARNING, message=message, path=tuple(path)))

    @property
    def errors(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def passed(self) -> bool:
        # Strict mode fails on warnings but never rewrites their severity
        if self.errors:
            return False
        return not (self.strict and self.warnings)

    @property
    def status(self) -> str:
        return "passed" if self.passed else "failed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "format": self.format.value if self.format else None,
            "status": self.status,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
        }
