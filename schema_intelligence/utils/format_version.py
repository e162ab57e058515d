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

"""Version handling for rule override files.

A rule file may declare ``version: 1.0.0``. The major number has to equal the
engine's; a newer minor number is loaded with a warning (rules or options the
engine does not know are skipped); the patch number is not compared.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..exceptions import FormatVersionError


RULES_FORMAT_VERSION = "1.0.0"

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)(?:\.(\d+))?$")


@dataclass(frozen=True)
class SemanticVersion:
    major: int
    minor: int
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_format_version(raw) -> SemanticVersion:
    """Parse ``MAJOR.MINOR[.PATCH]`` with an optional ``v`` prefix.

    YAML reads ``version: 1.0`` as a float, so numbers are accepted too.

    Raises:
        FormatVersionError: If the value is not a version.
    """
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
        raise FormatVersionError(f"Rule file version must be a string, got {type(raw).__name__}: {raw!r}")
    match = _VERSION_RE.match(str(raw).strip())
    if match is None:
        raise FormatVersionError(f"Invalid rule file version: '{raw}'. Expected 'MAJOR.MINOR.PATCH' (e.g. '1.0.0').")
    major, minor, patch = match.groups()
    return SemanticVersion(int(major), int(minor), int(patch or 0))


@dataclass(frozen=True)
class VersionCheckResult:
    compatible: bool
    message: str
    file_version: Optional[SemanticVersion] = None
    supported_version: Optional[SemanticVersion] = None
    minor_newer: bool = False


def check_format_version(raw_version) -> VersionCheckResult:
    """Decide whether a rule file declaring *raw_version* can be loaded.

    Files without a version predate versioning and are read as the supported one.
    """
    supported = parse_format_version(RULES_FORMAT_VERSION)
    if raw_version is None:
        return VersionCheckResult(True, f"No version declared, assuming {supported}.", None, supported)

    try:
        declared = parse_format_version(raw_version)
    except FormatVersionError as exc:
        return VersionCheckResult(False, str(exc), None, supported)

    if declared.major != supported.major:
        message = (
            f"Incompatible rule file version: file declares {declared} but this engine "
            f"supports major version {supported.major} (supported: {supported})."
        )
        return VersionCheckResult(False, message, declared, supported)
    if declared.minor > supported.minor:
        message = (
            f"Rule file version {declared} is newer than the supported {supported}. "
            "Unknown rules and options will be ignored."
        )
        return VersionCheckResult(True, message, declared, supported, minor_newer=True)
    return VersionCheckResult(True, f"Rule file version {declared} is compatible.", declared, supported)
