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

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union


PathElement = Union[str, int]
SchemaPath = Tuple[PathElement, ...]


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"

    @classmethod
    def from_value(cls, value) -> "Severity":
        if isinstance(value, Severity):
            return value
        key = str(value).strip().lower()
        if key in ("warn", "warning"):
            return cls.WARNING
        if key in ("error", "err"):
            return cls.ERROR
        raise ValueError(f"Unknown severity: '{value}'")


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def to_pointer(path: Sequence[PathElement]) -> str:
    """Render a structural path as a JSON pointer (``""`` for the root)."""
    return "".join(f"/{_jp_escape(str(p))}" for p in path)


@dataclass(frozen=True)
class Issue:
    rule_id: str
    severity: Severity
    message: str
    path: SchemaPath = ()

    @property
    def pointer(self) -> str:
        return to_pointer(self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "message": self.message,
            "path": list(self.path),
        }

    def format(self, identifier: Optional[str] = None) -> str:
        """One-line rendering, e.g. ``WARNING[doc_required]: ... (source= a.avsc path= /email)``."""
        parts = []
        if identifier:
            parts.append(f"source= {identifier}")
        if self.path:
            parts.append(f"path= {self.pointer}")
        suffix = f" ({' '.join(parts)})" if parts else ""
        return f"{self.severity.value.upper()}[{self.rule_id}]: {self.message}{suffix}"
