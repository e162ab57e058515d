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

"""Schema sources and format detection."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..exceptions import ParseError
from ..models.schema_model import SchemaFormat

logger = logging.getLogger(__name__)


# Schema file extensions; ``.json`` needs a look at the content
SCHEMA_EXTENSIONS = {
    ".avsc": SchemaFormat.AVRO,
    ".proto": SchemaFormat.PROTOBUF,
    ".json": None,
}

# Pattern used when a batch is restricted to one format
FORMAT_EXTENSIONS = {
    SchemaFormat.AVRO: ".avsc",
    SchemaFormat.PROTOBUF: ".proto",
    SchemaFormat.JSON_SCHEMA: ".json",
}


@dataclass(frozen=True)
class RegistryOrigin:
    """Where a registry-held schema came from."""

    registry_url: str
    subject: str
    version: Union[int, str]

    def __str__(self) -> str:
        return f"{self.registry_url.rstrip('/')}/subjects/{self.subject}/versions/{self.version}"


@dataclass(frozen=True)
class SchemaSource:
    """Schema text handed to the engine together with its (optional) format."""

    text: str
    format: Optional[SchemaFormat] = None
    origin: Union[Path, RegistryOrigin, str, None] = None

    @property
    def identifier(self) -> str:
        if isinstance(self.origin, RegistryOrigin):
            return self.origin.subject
        if self.origin is not None:
            return str(self.origin)
        return "<inline>"

    @property
    def path(self) -> Optional[Path]:
        if isinstance(self.origin, (Path, str)):
            return Path(self.origin)
        return None

    def resolve_format(self) -> SchemaFormat:
        if self.format is not None:
            return self.format
        return detect_format(self.path, self.text)

    @classmethod
    def from_path(cls, file_path: Union[str, Path], schema_format=None) -> "SchemaSource":
        """Read a schema file.

        Raises:
            ParseError: If the file does not exist or cannot be read
        """
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"Schema file not found: {path}")
        if not path.is_file():
            raise ParseError(f"Path is not a file: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ParseError(f"Failed to read schema file {path}: {exc}") from exc
        fmt = SchemaFormat.from_value(schema_format) if schema_format else None
        return cls(text=text, format=fmt, origin=path)

    @classmethod
    def from_registry(
        cls,
        registry_url: str,
        subject: str,
        version: Union[int, str],
        schema_text: str,
        schema_type: Optional[str] = None,
    ) -> "SchemaSource":
        """Wrap a registry payload; registries omit ``schemaType`` for Avro."""
        fmt = SchemaFormat.from_value(schema_type) if schema_type else SchemaFormat.AVRO
        return cls(text=schema_text, format=fmt, origin=RegistryOrigin(registry_url, subject, version))


def detect_format(file_path: Optional[Path], text: Optional[str] = None) -> SchemaFormat:
    """Detect the schema format from the file extension (and content for ``.json``).

    ``.json`` documents carrying a ``$schema`` key are JSON Schema, any other
    ``.json`` file is treated as Avro.

    Raises:
        ParseError: If the format cannot be determined
    """
    if file_path is None:
        raise ParseError("Cannot detect schema format without a file name; pass the format explicitly")

    suffix = Path(file_path).suffix.lower()
    if suffix not in SCHEMA_EXTENSIONS:
        raise ParseError(
            f"Unknown schema type for '{file_path}'. "
            f"Expected one of: {', '.join(SCHEMA_EXTENSIONS.keys())}"
        )

    fmt = SCHEMA_EXTENSIONS[suffix]
    if fmt is not None:
        return fmt

    if text is None:
        text = Path(file_path).read_text(encoding="utf-8")
    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        # Leave the error to the parser
        return SchemaFormat.AVRO
    if isinstance(document, dict) and "$schema" in document:
        return SchemaFormat.JSON_SCHEMA
    return SchemaFormat.AVRO


def find_schema_files(paths: Iterable[Union[str, Path]], schema_format=None) -> List[Path]:
    """Find all schema files in the given files/directories (sorted, deduplicated)."""
    schema_files = []
    extensions = list(SCHEMA_EXTENSIONS.keys())
    if schema_format is not None:
        extensions = [FORMAT_EXTENSIONS[SchemaFormat.from_value(schema_format)]]

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            logger.warning(f"Path does not exist: {path}")
            continue

        if path.is_file():
            if path.suffix.lower() in extensions:
                schema_files.append(path)
            else:
                logger.warning(f"File does not match a schema file pattern: {path}")
        elif path.is_dir():
            for ext in extensions:
                schema_files.extend(p for p in path.rglob(f"*{ext}") if p.is_file())
        else:
            logger.warning(f"Path is neither file nor directory: {path}")

    return sorted(set(schema_files))
