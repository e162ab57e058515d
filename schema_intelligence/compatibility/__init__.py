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

"""Schema diff and compatibility evaluation."""

from .check import (
    CompatibilityResult,
    CompatibilityVerdict,
    check_compatible,
    check_sources,
    resolve_mode,
)
from .modes import PROMOTIONS, CompatibilityMode, can_read
from .registry_diff import CompareMode, RegistryVersion, diff_registries, load_snapshot
from .schema_diff import DiffEntry, DiffKind, diff, has_breaking

__all__ = [
    "PROMOTIONS",
    "CompareMode",
    "CompatibilityMode",
    "CompatibilityResult",
    "CompatibilityVerdict",
    "DiffEntry",
    "DiffKind",
    "RegistryVersion",
    "can_read",
    "check_compatible",
    "check_sources",
    "diff",
    "diff_registries",
    "has_breaking",
    "load_snapshot",
    "resolve_mode",
]
