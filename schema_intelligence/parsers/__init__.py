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

"""Multi-format schema parsing."""

from typing import Optional, Union

from ..exceptions import ParseError
from ..models.schema_model import SchemaDocument, SchemaFormat, SchemaModel
from .avro_parser import AvroParser
from .base import BaseSchemaParser
from .json_schema_parser import JsonSchemaParser
from .protobuf_parser import ProtobufParser
from .sources import RegistryOrigin, SchemaSource, detect_format, find_schema_files

__all__ = [
    "ParserFactory",
    "RegistryOrigin",
    "SchemaSource",
    "detect_format",
    "find_schema_files",
    "parse",
    "parse_model",
    "parse_source",
]


class ParserFactory:
    """Factory for creating parsers."""

    _parsers = {
        SchemaFormat.AVRO: AvroParser,
        SchemaFormat.PROTOBUF: ProtobufParser,
        SchemaFormat.JSON_SCHEMA: JsonSchemaParser,
    }

    @classmethod
    def get_parser(cls, schema_format: Union[SchemaFormat, str]) -> BaseSchemaParser:
        """Get parser for a schema format."""
        try:
            fmt = SchemaFormat.from_value(schema_format)
        except ValueError as exc:
            raise ParseError(str(exc)) from exc
        return cls._parsers[fmt]()


def parse(raw_text: str, schema_format: Union[SchemaFormat, str]) -> SchemaDocument:
    """Parse schema text of a known format.

    Raises:
        ParseError: On malformed input
    """
    return ParserFactory.get_parser(schema_format).parse(raw_text)


def parse_model(raw_text: str, schema_format: Union[SchemaFormat, str]) -> SchemaModel:
    """Like :func:`parse` but returns only the root model."""
    return parse(raw_text, schema_format).root


def parse_source(source: SchemaSource, schema_format: Optional[SchemaFormat] = None) -> SchemaDocument:
    """Parse a :class:`SchemaSource`, detecting its format when needed."""
    fmt = schema_format or source.resolve_format()
    return parse(source.text, fmt)
