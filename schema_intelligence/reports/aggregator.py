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

"""Thread-safe collection of per-item batch outcomes."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from ..models.issues import Issue, Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregatedRecord:
    """One batch item: its identifier, whether it passed, and what was found."""

    identifier: str
    passed: bool
    entries: Tuple[Any, ...] = ()
    payload: Any = None


class ResultAggregator:
    """Collects item outcomes from one or more producer threads.

    Records keep first-seen order while the batch runs; :meth:`finalize`
    returns them sorted by identifier so the report does not depend on
    which worker finished first.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: List[AggregatedRecord] = []

    def record(self, identifier: str, passed: bool, entries: Iterable[Any] = (), payload: Any = None) -> AggregatedRecord:
        rec = AggregatedRecord(identifier=identifier, passed=bool(passed), entries=tuple(entries), payload=payload)
        with self._lock:
            self._records.append(rec)
        logger.debug(f"Recorded {identifier}: {'passed' if rec.passed else 'failed'}")
        return rec

    @property
    def records(self) -> List[AggregatedRecord]:
        """Snapshot of the records in first-seen order."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def finalize(self) -> List[AggregatedRecord]:
        """Records ordered by identifier (stable for equal identifiers)."""
        return sorted(self.records, key=lambda r: r.identifier)

    def summary(self) -> Dict[str, int]:
        records = self.records
        passed = sum(1 for r in records if r.passed)
        result = {"total": len(records), "passed": passed, "failed": len(records) - passed}
        issues = [e for r in records for e in r.entries if isinstance(e, Issue)]
        if issues:
            result["errors"] = sum(1 for i in issues if i.severity == Severity.ERROR)
            result["warnings"] = sum(1 for i in issues if i.severity == Severity.WARNING)
        return result
