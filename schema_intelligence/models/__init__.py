"""Normalized schema model."""

from .issues import Issue, Severity, SchemaPath, to_pointer
from .schema_model import Field, SchemaDocument, SchemaFormat, SchemaKind, SchemaModel

__all__ = [
    "Field",
    "Issue",
    "SchemaDocument",
    "SchemaFormat",
    "SchemaKind",
    "SchemaModel",
    "SchemaPath",
    "Severity",
    "to_pointer",
]
