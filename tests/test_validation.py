"""
Tests for structural validation of schema files.
"""

import json

from schema_intelligence.models import SchemaFormat
from schema_intelligence.parsers import SchemaSource
from schema_intelligence.validation import check_metaschema, validate_files, validate_source, validate_sources


class TestValidateSource:
    """Tests for validate_source."""

    def test_valid_avro(self, avro_source, user_avro) -> None:
        result = validate_source(avro_source(user_avro))
        assert result.valid
        assert result.format == SchemaFormat.AVRO
        assert result.to_dict()["status"] == "valid"

    def test_parse_error_is_invalid(self) -> None:
        source = SchemaSource(text='{"type": "record"}', format=SchemaFormat.AVRO, origin="r.avsc")
        result = validate_source(source)
        assert not result.valid
        assert "missing required key 'name'" in result.error

    def test_proto_without_declarations(self) -> None:
        source = SchemaSource(text="enum E { A = 0; }", format=SchemaFormat.PROTOBUF, origin="e.proto")
        result = validate_source(source)
        assert result.error == "No syntax, package or message declaration found"
        assert len(result.warnings) == 2

    def test_proto_warnings_do_not_invalidate(self) -> None:
        source = SchemaSource(text="message Ping { string id = 1; }", format=SchemaFormat.PROTOBUF, origin="p.proto")
        result = validate_source(source)
        assert result.valid
        assert [w.message for w in result.warnings] == ["Missing syntax declaration", "Missing package declaration"]

    def test_json_schema_metaschema(self, product_json_schema) -> None:
        product_json_schema["properties"]["price"]["minimum"] = "zero"
        text = json.dumps(product_json_schema)
        error = check_metaschema(text)
        assert error.startswith("Invalid JSON Schema at '/properties/price/minimum'")
        result = validate_source(SchemaSource(text=text, format=SchemaFormat.JSON_SCHEMA, origin="p.json"))
        assert result.error == error

    def test_valid_json_schema(self, product_json_schema) -> None:
        assert check_metaschema(json.dumps(product_json_schema)) is None


class TestValidateBatches:
    """Tests for validate_sources / validate_files."""

    def test_empty_batch_fails(self) -> None:
        report = validate_sources([])
        assert report.summary == {"total": 0, "valid": 0, "invalid": 0}
        assert report.status == "failure"

    def test_directory_scan(self, write_schema, user_avro, product_json_schema, order_proto, tmp_path) -> None:
        write_schema("avro/user.avsc", user_avro)
        write_schema("json/product.json", product_json_schema)
        write_schema("proto/order.proto", order_proto)
        write_schema("proto/broken.proto", "message M {")
        report = validate_files([tmp_path], max_workers=3)
        statuses = {r.identifier.rsplit("/", 1)[-1]: r.status for r in report.results}
        assert statuses == {
            "user.avsc": "valid",
            "product.json": "valid",
            "order.proto": "valid",
            "broken.proto": "invalid",
        }
        assert [r.identifier for r in report.results] == sorted(r.identifier for r in report.results)
        assert report.status == "failure"

    def test_format_filter(self, write_schema, user_avro, order_proto, tmp_path) -> None:
        write_schema("user.avsc", user_avro)
        write_schema("order.proto", order_proto)
        report = validate_files([tmp_path], schema_format="protobuf")
        assert report.summary == {"total": 1, "valid": 1, "invalid": 0}
        assert report.results[0].format == SchemaFormat.PROTOBUF
