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

"""Shallow Protobuf IDL parser.

Only the syntactic skeleton is modeled: ``syntax``, ``package``, message and
enum blocks (nested ones included) and their field / value lines. Field types
are not resolved; imports, services, extensions and options are skipped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..exceptions import ParseError
from ..models.issues import Issue, Severity
from ..models.schema_model import Field, SchemaDocument, SchemaFormat, SchemaKind, SchemaModel
from .base import BaseSchemaParser

logger = logging.getLogger(__name__)


PROTO_SCALARS = frozenset(
    [
        "double", "float", "int32", "int64", "uint32", "uint64", "sint32", "sint64",
        "fixed32", "fixed64", "sfixed32", "sfixed64", "bool", "string", "bytes",
    ]
)

_STRINGS_AND_COMMENTS_RE = re.compile(
    r'("(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\')|(//[^\n]*)|(/\*.*?\*/)',
    re.DOTALL,
)
_SYNTAX_RE = re.compile(r'^syntax\s*=\s*["\']([^"\']+)["\']$')
_PACKAGE_RE = re.compile(r'^package\s+([\w.]+)$')
_BLOCK_HEADER_RE = re.compile(r'^(message|enum|oneof|service|extend)\s+([\w.]+)$')
_FIELD_RE = re.compile(
    r'^(?:(repeated|optional|required)\s+)?'
    r'(map\s*<\s*([\w.]+)\s*,\s*([\w.]+)\s*>|\.?[\w.]+)\s+'
    r'(\w+)\s*=\s*(\d+)\s*(?:\[.*\])?$',
    re.DOTALL,
)
_ENUM_VALUE_RE = re.compile(r'^(\w+)\s*=\s*(-?(?:0[xX][0-9a-fA-F]+|\d+))\s*(?:\[.*\])?$', re.DOTALL)

MISSING_SYNTAX_MESSAGE = "Missing syntax declaration"
MISSING_PACKAGE_MESSAGE = "Missing package declaration"

_SKIPPED_STATEMENTS = ("option", "reserved", "extensions", "import", "syntax", "package", "edition")


def strip_comments(text: str) -> str:
    """Blank out comments while keeping string literals and character offsets."""

    def _blank(match: re.Match) -> str:
        if match.group(1) is not None:
            return match.group(1)
        return re.sub(r"[^\n]", " ", match.group(0))

    return _STRINGS_AND_COMMENTS_RE.sub(_blank, text)


@dataclass
class _Statement:
    text: str
    offset: int


@dataclass
class _Block:
    header: str
    offset: int
    children: List[object] = field(default_factory=list)


def _scan(text: str) -> List[object]:
    """Split cleaned IDL text into statements and (nested) blocks."""
    root = _Block(header="", offset=0)
    stack = [root]
    start = 0
    for match in re.finditer(r"[{};]", text):
        idx = match.start()
        char = match.group(0)
        current = stack[-1]
        if char == ";":
            stmt = " ".join(text[start:idx].split())
            if stmt:
                current.children.append(_Statement(stmt, start))
        elif char == "{":
            block = _Block(header=" ".join(text[start:idx].split()), offset=idx)
            current.children.append(block)
            stack.append(block)
        else:
            if len(stack) == 1:
                raise ParseError("Unexpected '}' without a matching '{'", offset=idx)
            stack.pop()
        start = idx + 1
    if len(stack) > 1:
        raise ParseError("Unterminated block: missing '}'", offset=stack[-1].offset)
    return root.children


def _top_level_value(items: List[object], pattern: re.Pattern) -> Optional[str]:
    for item in items:
        if isinstance(item, _Statement):
            match = pattern.match(item.text)
            if match:
                return match.group(1)
    return None


def _parse_int(raw: str) -> int:
    sign = -1 if raw.startswith("-") else 1
    digits = raw.lstrip("-")
    if digits.lower().startswith("0x"):
        return sign * int(digits, 16)
    return sign * int(digits, 10)


class ProtobufParser(BaseSchemaParser):
    """Parser for ``.proto`` IDL text."""

    FORMAT = SchemaFormat.PROTOBUF

    def parse(self, raw_text: str) -> SchemaDocument:
        if raw_text is None or not raw_text.strip():
            raise ParseError("Schema text is empty")

        items = _scan(strip_comments(raw_text))
        warnings: List[Issue] = []

        syntax = _top_level_value(items, _SYNTAX_RE)
        if syntax is None:
            warnings.append(Issue("parse", Severity.WARNING, MISSING_SYNTAX_MESSAGE))

        package = _top_level_value(items, _PACKAGE_RE)
        if package is None:
            warnings.append(Issue("parse", Severity.WARNING, MISSING_PACKAGE_MESSAGE))

        for warning in warnings:
            logger.debug(f"Protobuf parse warning: {warning.message}")

        declarations: List[Field] = []
        self._collect(items, package, None, syntax, declarations)

        root = SchemaModel(kind=SchemaKind.FILE, namespace=package, fields=tuple(declarations))
        return SchemaDocument(
            format=SchemaFormat.PROTOBUF,
            root=root,
            syntax=syntax,
            package=package,
            warnings=tuple(warnings),
        )

    def _collect(
        self,
        items: List[object],
        namespace: Optional[str],
        outer: Optional[str],
        syntax: Optional[str],
        declarations: List[Field],
    ) -> None:
        """Add every message/enum found in *items* to *declarations*.

        Nested definitions are flattened; their declaration key is the dotted
        path below the package (``Outer.Inner``).
        """
        for item in items:
            if not isinstance(item, _Block):
                continue
            match = _BLOCK_HEADER_RE.match(item.header)
            if not match:
                continue
            keyword, name = match.groups()
            key = f"{outer}.{name}" if outer else name
            if keyword == "message":
                model = self._message(item, name, namespace, syntax)
                nested_ns = f"{namespace}.{name}" if namespace else name
                self._add_declaration(declarations, key, model, item)
                self._collect(item.children, nested_ns, key, syntax, declarations)
            elif keyword == "enum":
                self._add_declaration(declarations, key, self._enum(item, name, namespace), item)

    @staticmethod
    def _add_declaration(declarations: List[Field], key: str, model: SchemaModel, block: _Block) -> None:
        if any(d.name == key for d in declarations):
            raise ParseError(f"'{key}' is declared more than once", offset=block.offset, path=(key,))
        declarations.append(Field(name=key, type=model, raw=block.header))

    def _message(self, block: _Block, name: str, namespace: Optional[str], syntax: Optional[str]) -> SchemaModel:
        fields: List[Field] = []
        statements: List[Tuple[_Statement, Optional[str]]] = []
        for child in block.children:
            if isinstance(child, _Statement):
                statements.append((child, None))
            elif isinstance(child, _Block) and child.header.startswith("oneof "):
                statements.extend((s, "oneof") for s in child.children if isinstance(s, _Statement))

        for stmt, group_label in statements:
            if stmt.text.split()[0] in _SKIPPED_STATEMENTS:
                continue
            match = _FIELD_RE.match(stmt.text)
            if not match:
                logger.debug(f"Skipping unrecognized statement in message '{name}': {stmt.text}")
                continue
            label, type_token, map_key, map_value, field_name, number = match.groups()
            label = label or group_label
            if any(f.name == field_name for f in fields):
                raise ParseError(
                    f"Duplicate field '{field_name}' in message '{name}'",
                    offset=stmt.offset,
                    path=(name, field_name),
                )
            field_type = self._field_type(type_token, map_value)
            if label == "repeated":
                field_type = SchemaModel(kind=SchemaKind.ARRAY, items=field_type)
            # proto3 (and proto2 non-required) fields always decode to a default
            has_default = label != "required" or syntax == "proto3"
            fields.append(
                Field(
                    name=field_name,
                    type=field_type,
                    has_default=has_default,
                    tag=int(number),
                    label=label,
                    raw=stmt.text,
                )
            )

        return SchemaModel(kind=SchemaKind.MESSAGE, name=name, namespace=namespace, fields=tuple(fields))

    @staticmethod
    def _field_type(type_token: str, map_value: Optional[str]) -> SchemaModel:
        if map_value is not None:
            return SchemaModel(kind=SchemaKind.MAP, values=ProtobufParser._field_type(map_value, None))
        type_token = type_token.lstrip(".")
        if type_token in PROTO_SCALARS:
            return SchemaModel(kind=SchemaKind.PRIMITIVE, type_name=type_token)
        return SchemaModel(kind=SchemaKind.REFERENCE, type_name=type_token)

    @staticmethod
    def _enum(block: _Block, name: str, namespace: Optional[str]) -> SchemaModel:
        symbols: List[str] = []
        values: List[int] = []
        for child in block.children:
            if not isinstance(child, _Statement):
                continue
            match = _ENUM_VALUE_RE.match(child.text)
            if not match:
                continue
            symbol, raw_value = match.groups()
            if symbol in symbols:
                raise ParseError(f"Duplicate value '{symbol}' in enum '{name}'", offset=child.offset, path=(name,))
            symbols.append(symbol)
            values.append(_parse_int(raw_value))
        return SchemaModel(
            kind=SchemaKind.ENUM,
            name=name,
            namespace=namespace,
            symbols=tuple(symbols),
            symbol_values=tuple(values),
        )
