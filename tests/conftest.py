"""
Pytest configuration and fixtures for schema intelligence tests.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from schema_intelligence.models import SchemaFormat
from schema_intelligence.parsers import SchemaSource


# ============================================================================
# Avro Fixtures
# ============================================================================


@pytest.fixture
def user_avro() -> Dict[str, Any]:
    """Well documented Avro record with a nested record and an enum."""
    return {
        "type": "record",
        "name": "userEvent",
        "namespace": "com.example",
        "doc": "A user lifecycle event",
        "fields": [
            {"name": "id", "type": "long", "doc": "User id"},
            {"name": "email", "type": ["null", "string"], "default": None, "doc": "Contact address"},
            {
                "name": "address",
                "type": {
                    "type": "record",
                    "name": "Address",
                    "doc": "Postal address",
                    "fields": [
                        {"name": "street", "type": "string"},
                        {"name": "zip", "type": "string"},
                    ],
                },
            },
            {
                "name": "status",
                "type": {
                    "type": "enum",
                    "name": "Status",
                    "doc": "Account status",
                    "symbols": ["ACTIVE", "SUSPENDED"],
                },
            },
        ],
    }


@pytest.fixture
def user_avro_text(user_avro: Dict[str, Any]) -> str:
    return json.dumps(user_avro)


# ============================================================================
# Protobuf Fixtures
# ============================================================================


@pytest.fixture
def order_proto() -> str:
    return """
syntax = "proto3";
package shop.orders;

// An order placed by a customer
message Order {
  string order_id = 1;
  repeated LineItem items = 2;
  map<string, string> labels = 3;
  Status status = 4;

  message LineItem {
    string sku = 1;
    int32 quantity = 2;
  }
}

enum Status {
  STATUS_UNSPECIFIED = 0;
  STATUS_OPEN = 1;
  STATUS_CLOSED = 2;
}
"""


# ============================================================================
# JSON Schema Fixtures
# ============================================================================


@pytest.fixture
def product_json_schema() -> Dict[str, Any]:
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": "Product",
        "description": "A catalog product",
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "name": {"type": "string", "description": "Display name"},
            "tags": {"type": "array", "items": {"type": "string"}},
            "price": {"type": "number", "default": 0},
        },
        "required": ["id", "name"],
        "additionalProperties": False,
    }


# ============================================================================
# File Fixtures
# ============================================================================


@pytest.fixture
def write_schema(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write a schema (dict or text) below tmp_path and return its path."""

    def _write(name: str, content: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else json.dumps(content, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def avro_source() -> Callable[[Any, str], SchemaSource]:
    """Build an in-memory Avro source from a dict."""

    def _source(schema: Any, origin: str = "inline.avsc") -> SchemaSource:
        return SchemaSource(text=json.dumps(schema), format=SchemaFormat.AVRO, origin=origin)

    return _source
