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

"""Registry subject naming."""

from pathlib import Path
from typing import Optional, Union

from .models.schema_model import SchemaDocument, SchemaFormat

SUBJECT_SUFFIXES = ("-value", "-key")


def derive_subject(document: Optional[SchemaDocument], path: Union[str, Path, None] = None) -> str:
    """Subject a schema registers under (topic-name strategy).

    Avro schemas use their qualified name, everything else the file stem.
    ``-value`` is appended unless the name already ends in ``-value`` or ``-key``.

    Raises:
        ValueError: If neither a schema name nor a path is available
    """
    base = None
    if document is not None and document.format == SchemaFormat.AVRO:
        base = document.root.qualified_name
    if not base and path is not None:
        base = Path(path).stem
    if not base:
        raise ValueError("Cannot derive a subject without a schema name or file path")
    if base.endswith(SUBJECT_SUFFIXES):
        return base
    return f"{base}-value"
