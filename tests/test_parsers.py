"""
Tests for the Avro, Protobuf and JSON Schema parsers and format detection.
"""

import json

import pytest

from schema_intelligence.exceptions import ParseError
from schema_intelligence.models import SchemaFormat, SchemaKind, Severity
from schema_intelligence.parsers import (
    ParserFactory,
    SchemaSource,
    detect_format,
    find_schema_files,
    parse,
    parse_model,
)


class TestAvroParser:
    """Tests for Avro parsing."""

    def test_record_fields_in_order(self, user_avro_text: str) -> None:
        model = parse_model(user_avro_text, "avro")
        assert model.kind == SchemaKind.RECORD
        assert model.qualified_name == "com.example.userEvent"
        assert [f.name for f in model.fields] == ["id", "email", "address", "status"]

    def test_optional_field_default(self, user_avro_text: str) -> None:
        email = parse_model(user_avro_text, "avro").field("email")
        assert email.has_default
        assert email.default_value is None
        assert email.type.kind == SchemaKind.UNION
        assert [m.type_name for m in email.type.members] == ["null", "string"]

    def test_nested_types_inherit_namespace(self, user_avro_text: str) -> None:
        model = parse_model(user_avro_text, "avro")
        address = model.field("address").type
        assert address.kind == SchemaKind.RECORD
        assert address.qualified_name == "com.example.Address"
        status = model.field("status")
        assert status.symbols == ("ACTIVE", "SUSPENDED")

    def test_dotted_name_carries_namespace(self) -> None:
        model = parse_model(
            json.dumps({"type": "record", "name": "org.acme.Thing", "namespace": "ignored", "fields": []}),
            SchemaFormat.AVRO,
        )
        assert model.name == "Thing"
        assert model.namespace == "org.acme"

    def test_named_reference(self) -> None:
        schema = {
            "type": "record",
            "name": "Node",
            "namespace": "tree",
            "fields": [
                {"name": "children", "type": {"type": "array", "items": "Node"}},
            ],
        }
        model = parse_model(json.dumps(schema), "avro")
        items = model.field("children").type.items
        assert items.kind == SchemaKind.REFERENCE
        assert items.type_name == "tree.Node"

    def test_fixed_and_map(self) -> None:
        schema = {
            "type": "record",
            "name": "blob",
            "fields": [
                {"name": "digest", "type": {"type": "fixed", "name": "MD5", "size": 16}},
                {"name": "attrs", "type": {"type": "map", "values": "string"}},
            ],
        }
        model = parse_model(json.dumps(schema), "avro")
        digest = model.field("digest").type
        assert digest.type_name == "fixed"
        assert digest.size == 16
        assert model.field("attrs").type.kind == SchemaKind.MAP

    def test_missing_field_type_names_field(self) -> None:
        with pytest.raises(ParseError) as excinfo:
            parse('{"type":"record","name":"Invalid","fields":[{"name":"missing_type"}]}', "avro")
        assert "missing_type" in str(excinfo.value)
        assert "'type'" in excinfo.value.reason
        assert excinfo.value.path == ("missing_type",)

    def test_missing_root_type(self) -> None:
        with pytest.raises(ParseError, match="missing required key 'type'"):
            parse('{"name": "x"}', "avro")

    def test_duplicate_field(self) -> None:
        schema = {"type": "record", "name": "r", "fields": [{"name": "a", "type": "int"}, {"name": "a", "type": "long"}]}
        with pytest.raises(ParseError, match="Duplicate field 'a'"):
            parse(json.dumps(schema), "avro")

    def test_record_without_name(self) -> None:
        with pytest.raises(ParseError, match="missing required key 'name'"):
            parse('{"type": "record", "fields": []}', "avro")

    def test_invalid_json_reports_offset(self) -> None:
        with pytest.raises(ParseError) as excinfo:
            parse('{"type": "record",', "avro")
        assert excinfo.value.reason.startswith("Invalid JSON format")
        assert excinfo.value.offset is not None

    def test_empty_text(self) -> None:
        with pytest.raises(ParseError, match="empty"):
            parse("   ", "avro")

    def test_unknown_format(self) -> None:
        with pytest.raises(ParseError, match="Unknown schema format"):
            parse("{}", "xml")


class TestProtobufParser:
    """Tests for Protobuf parsing."""

    def test_document_attributes(self, order_proto: str) -> None:
        document = parse(order_proto, "protobuf")
        assert document.syntax == "proto3"
        assert document.package == "shop.orders"
        assert document.root.kind == SchemaKind.FILE
        assert document.warnings == ()

    def test_declarations_flatten_nested_messages(self, order_proto: str) -> None:
        root = parse_model(order_proto, "protobuf")
        assert [f.name for f in root.fields] == ["Order", "Order.LineItem", "Status"]
        line_item = root.field("Order.LineItem").type
        assert line_item.kind == SchemaKind.MESSAGE
        assert line_item.qualified_name == "shop.orders.Order.LineItem"

    def test_fields_keep_numbers_and_labels(self, order_proto: str) -> None:
        order = parse_model(order_proto, "protobuf").field("Order").type
        items = order.field("items")
        assert items.tag == 2
        assert items.label == "repeated"
        assert items.type.kind == SchemaKind.ARRAY
        assert items.raw == "repeated LineItem items = 2"
        labels = order.field("labels")
        assert labels.type.kind == SchemaKind.MAP
        assert labels.type.values.type_name == "string"

    def test_enum_values(self, order_proto: str) -> None:
        status = parse_model(order_proto, "protobuf").field("Status").type
        assert status.symbols == ("STATUS_UNSPECIFIED", "STATUS_OPEN", "STATUS_CLOSED")
        assert status.symbol_values == (0, 1, 2)

    def test_missing_syntax_and_package_are_warnings(self) -> None:
        document = parse("message Ping { string id = 1; }", "protobuf")
        messages = [w.message for w in document.warnings]
        assert messages == ["Missing syntax declaration", "Missing package declaration"]
        assert all(w.severity == Severity.WARNING and w.rule_id == "parse" for w in document.warnings)

    def test_comments_are_ignored(self) -> None:
        text = 'syntax = "proto3";\npackage a;\n/* message Ghost { } */\nmessage Real { int32 x = 1; // trailing }\n}'
        root = parse_model(text, "protobuf")
        assert [f.name for f in root.fields] == ["Real"]

    def test_oneof_members_become_fields(self) -> None:
        text = 'syntax = "proto3"; package p; message M { oneof choice { string a = 1; int64 b = 2; } }'
        message = parse_model(text, "protobuf").field("M").type
        assert [(f.name, f.label) for f in message.fields] == [("a", "oneof"), ("b", "oneof")]

    def test_unbalanced_braces(self) -> None:
        with pytest.raises(ParseError, match="Unterminated block"):
            parse('syntax = "proto3"; message M { string a = 1;', "protobuf")
        with pytest.raises(ParseError, match="Unexpected '}'"):
            parse('syntax = "proto3"; }', "protobuf")

    def test_statements_sharing_a_line(self) -> None:
        document = parse('syntax = "proto3"; package shop.orders; message Ping { string id = 1; }', "protobuf")
        assert document.syntax == "proto3"
        assert document.package == "shop.orders"
        assert document.warnings == ()
        assert document.root.field("Ping").type.qualified_name == "shop.orders.Ping"

    def test_commented_out_declarations_do_not_count(self) -> None:
        document = parse('// syntax = "proto3";\n/* package p; */\nmessage Ping { string id = 1; }', "protobuf")
        assert document.syntax is None
        assert document.package is None
        assert len(document.warnings) == 2

    def test_package_inside_message_is_not_the_file_package(self) -> None:
        document = parse('syntax = "proto3"; message Ping { package inner; string id = 1; }', "protobuf")
        assert document.package is None


class TestJsonSchemaParser:
    """Tests for JSON Schema parsing."""

    def test_object_maps_to_record(self, product_json_schema) -> None:
        document = parse(json.dumps(product_json_schema), "json")
        root = document.root
        assert document.schema_uri == "http://json-schema.org/draft-07/schema#"
        assert root.kind == SchemaKind.RECORD
        assert root.name == "Product"
        assert root.documentation == "A catalog product"
        assert root.additional_properties is False

    def test_required_controls_has_default(self, product_json_schema) -> None:
        root = parse_model(json.dumps(product_json_schema), "json")
        assert not root.field("id").has_default
        assert root.field("tags").has_default
        assert root.field("price").default_value == 0
        assert root.field("name").documentation == "Display name"

    def test_unions_enums_and_refs(self) -> None:
        schema = {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "type": "object",
            "properties": {
                "a": {"type": ["string", "null"]},
                "b": {"anyOf": [{"type": "integer"}, {"type": "string"}]},
                "c": {"enum": ["x", "y"]},
                "d": {"$ref": "#/definitions/D"},
                "e": {"type": "object", "additionalProperties": {"type": "integer"}},
            },
        }
        root = parse_model(json.dumps(schema), "json")
        assert root.field("a").type.kind == SchemaKind.UNION
        assert root.field("b").type.kind == SchemaKind.UNION
        assert root.field("c").type.symbols == ("x", "y")
        assert root.field("d").type.type_name == "#/definitions/D"
        assert root.field("e").type.kind == SchemaKind.MAP

    def test_root_must_be_object(self) -> None:
        with pytest.raises(ParseError, match="must be an object"):
            parse("[1, 2]", "json")

    def test_unknown_type(self) -> None:
        with pytest.raises(ParseError, match="Unknown JSON Schema type 'float'"):
            parse('{"type": "float"}', "json")

    def test_object_as_type_is_parse_error(self) -> None:
        with pytest.raises(ParseError, match="'type' must be a string or an array") as excinfo:
            parse('{"$schema": "x", "properties": {"a": {"type": {"a": 1}}}}', "json")
        assert excinfo.value.path == ("a",)

    def test_object_inside_type_list_is_parse_error(self) -> None:
        with pytest.raises(ParseError, match="'type' entries must be strings") as excinfo:
            parse('{"type": ["string", {"a": 1}]}', "json")
        assert excinfo.value.path == (1,)


class TestFormatDetection:
    """Tests for extension/content based format detection."""

    def test_by_extension(self, tmp_path) -> None:
        assert detect_format(tmp_path / "a.avsc", "{}") == SchemaFormat.AVRO
        assert detect_format(tmp_path / "a.proto", "") == SchemaFormat.PROTOBUF

    def test_json_with_schema_key(self, tmp_path) -> None:
        assert detect_format(tmp_path / "a.json", '{"$schema": "x"}') == SchemaFormat.JSON_SCHEMA
        assert detect_format(tmp_path / "b.json", '{"type": "record"}') == SchemaFormat.AVRO

    def test_unknown_extension(self, tmp_path) -> None:
        with pytest.raises(ParseError, match="Unknown schema type"):
            detect_format(tmp_path / "a.xml", "")

    def test_explicit_format_wins(self) -> None:
        source = SchemaSource(text="{}", format=SchemaFormat.JSON_SCHEMA, origin="schema.avsc")
        assert source.resolve_format() == SchemaFormat.JSON_SCHEMA

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ParseError, match="not found"):
            SchemaSource.from_path(tmp_path / "missing.avsc")

    def test_find_schema_files_sorted(self, write_schema, tmp_path) -> None:
        write_schema("b/z.proto", 'syntax = "proto3";')
        write_schema("a/y.avsc", {"type": "string"})
        write_schema("notes.txt", "ignored")
        found = find_schema_files([tmp_path])
        assert [p.name for p in found] == ["y.avsc", "z.proto"]
        assert find_schema_files([tmp_path], "protobuf") == [tmp_path / "b" / "z.proto"]

    def test_factory_returns_matching_parser(self) -> None:
        for fmt in SchemaFormat:
            assert ParserFactory.get_parser(fmt.value).get_format() == fmt
