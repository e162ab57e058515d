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

import json
from abc import ABC, abstractmethod
from typing import Any

from ..exceptions import ParseError
from ..models.schema_model import SchemaDocument, SchemaFormat


class BaseSchemaParser(ABC):
    """Abstract base parser."""

    FORMAT: SchemaFormat

    @classmethod
    def get_format(cls) -> SchemaFormat:
        """Return the schema format this parser handles."""
        schema_format = getattr(cls, "FORMAT", None)
        if not isinstance(schema_format, SchemaFormat):
            raise NotImplementedError("Parser must define FORMAT")
        return schema_format

    @abstractmethod
    def parse(self, raw_text: str) -> SchemaDocument:
        """Parse raw schema text into a :class:`SchemaDocument`."""

    @staticmethod
    def load_json(raw_text: str) -> Any:
        """Decode JSON text, converting decoder errors into :class:`ParseError`."""
        if raw_text is None or not str(raw_text).strip():
            raise ParseError("Schema text is empty")
        try:
            return json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON format: {exc.msg}", offset=exc.pos) from exc
