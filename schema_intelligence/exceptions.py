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

"""Custom exceptions for the schema intelligence engine."""

from typing import Optional, Sequence, Union


class SchemaIntelligenceError(Exception):
    """Base exception for schema-intelligence related errors."""
    pass


class ParseError(SchemaIntelligenceError):
    """Exception raised when schema text cannot be turned into a model.

    Args:
        reason: Human readable description of the problem
        offset: Optional character offset into the raw text
        path: Structural locator of the offending node (field names / indices)
    """

    def __init__(
        self,
        reason: str,
        offset: Optional[int] = None,
        path: Sequence[Union[str, int]] = (),
    ):
        self.reason = reason
        self.offset = offset
        self.path = tuple(path)
        message = reason
        if self.path:
            message += f" (path= /{'/'.join(str(p) for p in self.path)})"
        if offset is not None:
            message += f" (offset= {offset})"
        super().__init__(message)


class RuleConfigError(SchemaIntelligenceError):
    """Exception raised for invalid rule override configuration."""
    pass


class FormatVersionError(RuleConfigError):
    """Exception raised when a rule file's format version is incompatible."""
    pass


class DiffIncomparable(SchemaIntelligenceError):
    """Raised when two schema roots have kinds that cannot be compared."""

    def __init__(self, before_kind: str, after_kind: str):
        self.before_kind = before_kind
        self.after_kind = after_kind
        super().__init__(
            f"Cannot compare a '{before_kind}' schema with a '{after_kind}' schema"
        )
