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

"""Naming convention helpers for lint rules."""

import re
from functools import lru_cache
from typing import Pattern, Tuple

from ..exceptions import RuleConfigError


# Named casing conventions accepted wherever a naming rule takes a pattern
NAMING_PRESETS = {
    "camelCase": r"^[a-z][a-zA-Z0-9]*$",
    "PascalCase": r"^[A-Z][a-zA-Z0-9]*$",
    "snake_case": r"^[a-z][a-z0-9_]*$",
    "SCREAMING_SNAKE_CASE": r"^[A-Z][A-Z0-9_]*$",
    "UPPERCASE": r"^[A-Z_]+$",
}


@lru_cache(maxsize=None)
def resolve_pattern(pattern: str) -> Tuple[Pattern, str]:
    """Compile a preset name or a raw regex.

    Returns:
        (compiled pattern, label used in messages)

    Raises:
        RuleConfigError: If the regex does not compile
    """
    if pattern in NAMING_PRESETS:
        return re.compile(NAMING_PRESETS[pattern]), pattern
    try:
        return re.compile(pattern), f"'{pattern}'"
    except re.error as exc:
        raise RuleConfigError(f"Invalid naming pattern {pattern!r}: {exc}") from exc


def matches(name: str, pattern: str) -> bool:
    if not name:
        return False
    compiled, _ = resolve_pattern(pattern)
    return bool(compiled.match(name))
