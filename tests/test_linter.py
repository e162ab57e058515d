"""
Tests for the lint rule catalog, the lint engine and batch linting.
"""

import json
import types

import pytest

from schema_intelligence.exceptions import RuleConfigError
from schema_intelligence.linter import RuleSet, lint, lint_files, lint_source, lint_sources, merge_overrides
from schema_intelligence.linter.naming import matches, resolve_pattern
from schema_intelligence.models import SchemaFormat, Severity
from schema_intelligence.parsers import SchemaSource, parse, parse_model


def _ids(issues):
    return [i.rule_id for i in issues]


class TestAvroRules:
    """Tests for the Avro rules."""

    def test_clean_schema_has_no_issues(self, user_avro_text: str) -> None:
        assert list(lint(parse(user_avro_text, "avro"))) == []

    def test_missing_namespace_and_doc(self) -> None:
        document = parse(json.dumps({"type": "record", "name": "userEvent", "fields": []}), "avro")
        issues = list(lint(document))
        assert _ids(issues) == ["namespace_required", "doc_required"]
        assert all(i.severity == Severity.WARNING for i in issues)
        assert [i.message for i in issues] == ["Missing namespace", "Missing documentation"]

    def test_nested_type_without_doc_reports_path(self, user_avro) -> None:
        del user_avro["fields"][2]["type"]["doc"]
        issues = list(lint(parse(json.dumps(user_avro), "avro")))
        assert _ids(issues) == ["doc_required"]
        assert issues[0].path == ("address",)
        assert issues[0].pointer == "/address"
        assert "com.example.Address" in issues[0].message

    def test_naming_convention_on_root_only(self, user_avro) -> None:
        user_avro["name"] = "UserEvent"
        issues = list(lint(parse(json.dumps(user_avro), "avro")))
        assert _ids(issues) == ["naming_convention"]
        assert issues[0].message == "Name 'UserEvent' does not follow camelCase convention"

    def test_enum_symbols_uppercase(self, user_avro) -> None:
        user_avro["fields"][3]["type"]["symbols"] = ["ACTIVE", "suspended"]
        issues = list(lint(parse(json.dumps(user_avro), "avro")))
        assert _ids(issues) == ["enum_uppercase"]
        assert issues[0].path == ("status",)

    def test_field_doc_disabled_by_default(self, user_avro) -> None:
        rule_set = merge_overrides(RuleSet.defaults(), {"field_doc_required": True})
        issues = list(lint(parse(json.dumps(user_avro), "avro"), rule_set))
        assert set(_ids(issues)) == {"field_doc_required"}
        assert [i.path for i in issues] == [
            ("address",),
            ("status",),
            ("address", "street"),
            ("address", "zip"),
        ]

    def test_max_nesting_depth(self) -> None:
        def nest(depth):
            node = {"type": "record", "name": f"level{depth}", "doc": "d", "fields": []}
            if depth < 4:
                node["fields"] = [{"name": "child", "type": nest(depth + 1)}]
            return node

        schema = nest(1)
        schema["namespace"] = "deep"
        rule_set = merge_overrides(RuleSet.defaults(), {"max_nesting_depth": 2})
        issues = list(lint(parse(json.dumps(schema), "avro"), rule_set))
        assert _ids(issues) == ["max_nesting_depth"]
        assert issues[0].path == ("child", "child")
        assert issues[0].message == "Nesting depth 3 exceeds the maximum of 2"

    def test_lint_is_lazy(self, user_avro_text: str) -> None:
        assert isinstance(lint(parse(user_avro_text, "avro")), types.GeneratorType)

    def test_bare_model_defaults_to_avro(self) -> None:
        model = parse_model('{"type": "enum", "name": "color", "namespace": "x", "doc": "d", "symbols": ["red"]}', "avro")
        assert _ids(lint(model)) == ["enum_uppercase"]


class TestProtobufRules:
    """Tests for the Protobuf rules."""

    def test_clean_file(self, order_proto: str) -> None:
        assert list(lint(parse(order_proto, "protobuf"))) == []

    def test_missing_syntax_is_error_and_package_is_error(self) -> None:
        issues = list(lint(parse("message Ping { string id = 1; }", "protobuf")))
        assert [(i.rule_id, i.severity) for i in issues] == [
            ("package_required", Severity.ERROR),
            ("syntax_version", Severity.ERROR),
        ]

    def test_syntax_mismatch_is_warning(self) -> None:
        issues = list(lint(parse('syntax = "proto2"; package p; message Ping { optional string id = 1; }', "protobuf")))
        assert _ids(issues) == ["syntax_version"]
        assert issues[0].severity == Severity.WARNING
        assert issues[0].message == "Expected syntax 'proto3', found 'proto2'"

    def test_message_naming_and_enum_zero(self) -> None:
        text = 'syntax = "proto3"; package p; message ping_msg { string id = 1; } enum Kind { KIND_A = 1; }'
        issues = list(lint(parse(text, "protobuf")))
        assert _ids(issues) == ["message_naming", "enum_zero_value"]
        assert issues[0].path == ("ping_msg",)
        assert issues[1].path == ("Kind",)

    def test_optional_rules(self) -> None:
        text = 'syntax = "proto3"; package p; message Ping { string userId = 1; string b = 3; }'
        rule_set = merge_overrides(RuleSet.defaults(), {"field_naming": True, "field_numbers_sequential": True})
        issues = list(lint(parse(text, "protobuf"), rule_set))
        assert _ids(issues) == ["field_naming", "field_numbers_sequential"]
        assert issues[0].path == ("Ping", "userId")

    def test_parse_warning_reported_when_rule_disabled(self) -> None:
        source = SchemaSource(
            text='syntax = "proto3"; message Ping { string id = 1; }',
            format=SchemaFormat.PROTOBUF,
            origin="ping.proto",
        )
        assert [(i.rule_id, i.severity) for i in lint_source(source).issues] == [("package_required", Severity.ERROR)]

        rule_set = merge_overrides(RuleSet.defaults(), {"package_required": False})
        issues = lint_source(source, rule_set).issues
        assert [(i.rule_id, i.severity, i.message) for i in issues] == [
            ("parse", Severity.WARNING, "Missing package declaration")
        ]


class TestJsonSchemaRules:
    """Tests for the JSON Schema rules."""

    def test_clean_schema(self, product_json_schema) -> None:
        assert list(lint(parse(json.dumps(product_json_schema), "json"))) == []

    def test_missing_schema_title_and_open_objects(self) -> None:
        schema = {"type": "object", "properties": {"meta": {"type": "object", "properties": {"k": {"type": "string"}}}}}
        issues = list(lint(parse(json.dumps(schema), "json")))
        assert [(i.rule_id, i.severity, i.path) for i in issues] == [
            ("schema_version_required", Severity.ERROR, ()),
            ("title_required", Severity.WARNING, ()),
            ("additional_properties", Severity.WARNING, ()),
            ("additional_properties", Severity.WARNING, ("meta",)),
        ]

    def test_description_rule_opt_in(self, product_json_schema) -> None:
        del product_json_schema["description"]
        document = parse(json.dumps(product_json_schema), "json")
        assert list(lint(document)) == []
        rule_set = merge_overrides(RuleSet.defaults(), {"description_required": {"enabled": True}})
        assert _ids(lint(document, rule_set)) == ["description_required"]


class TestStrictMode:
    """Strict mode fails warnings without changing their severity."""

    def test_warnings_fail_only_in_strict_mode(self, avro_source) -> None:
        source = avro_source({"type": "record", "name": "userEvent", "fields": []})
        relaxed = lint_source(source, strict=False)
        strict = lint_source(source, strict=True)
        assert relaxed.status == "passed"
        assert strict.status == "failed"
        assert [i.severity for i in strict.issues] == [Severity.WARNING, Severity.WARNING]

    def test_severity_override(self, avro_source) -> None:
        source = avro_source({"type": "record", "name": "userEvent", "doc": "d", "fields": []})
        rule_set = merge_overrides(RuleSet.defaults(), {"namespace_required": {"severity": "error"}})
        result = lint_source(source, rule_set)
        assert [i.severity for i in result.issues] == [Severity.ERROR]
        assert result.status == "failed"


class TestBatchLinting:
    """Tests for lint_sources / lint_files."""

    def test_parse_failure_is_one_error(self, avro_source) -> None:
        source = SchemaSource(text='{"type": "record"', format=SchemaFormat.AVRO, origin="broken.avsc")
        result = lint_source(source)
        assert len(result.issues) == 1
        assert result.issues[0].rule_id == "parse"
        assert result.issues[0].severity == Severity.ERROR

    def test_batch_continues_after_failure(self, avro_source, user_avro) -> None:
        sources = [
            SchemaSource(text="not json", format=SchemaFormat.AVRO, origin="b.avsc"),
            avro_source(user_avro, origin="a.avsc"),
        ]
        report = lint_sources(sources)
        assert [r.identifier for r in report.results] == ["a.avsc", "b.avsc"]
        assert report.summary == {"total": 2, "passed": 1, "failed": 1, "warnings": 0, "errors": 1}
        assert report.status == "failure"
        assert not report.ok

    def test_malformed_json_schema_does_not_abort_batch(self, avro_source, user_avro) -> None:
        bad = SchemaSource(
            text='{"$schema": "x", "type": {"a": 1}}',
            format=SchemaFormat.JSON_SCHEMA,
            origin="bad.json",
        )
        report = lint_sources([bad, avro_source(user_avro, origin="good.avsc")])
        assert [r.identifier for r in report.results] == ["bad.json", "good.avsc"]
        assert [(i.rule_id, i.severity) for i in report.result_for("bad.json").issues] == [
            ("parse", Severity.ERROR)
        ]
        assert report.result_for("good.avsc").passed

    @pytest.mark.parametrize("max_workers", [1, 4])
    def test_order_is_deterministic(self, avro_source, user_avro, max_workers: int) -> None:
        sources = [avro_source(user_avro, origin=f"s{i:02d}.avsc") for i in reversed(range(12))]
        report = lint_sources(sources, max_workers=max_workers)
        assert [r.identifier for r in report.results] == [f"s{i:02d}.avsc" for i in range(12)]
        assert report.status == "success"

    def test_lint_files_reports_missing_file(self, write_schema, user_avro, tmp_path) -> None:
        good = write_schema("good.avsc", user_avro)
        report = lint_files([good, tmp_path / "missing.avsc"])
        assert report.summary["total"] == 2
        missing = report.result_for(str(tmp_path / "missing.avsc"))
        assert missing is not None
        assert missing.issues[0].rule_id == "parse"
        assert "not found" in missing.issues[0].message

    def test_report_to_dict(self, avro_source) -> None:
        report = lint_sources([avro_source({"type": "record", "name": "userEvent", "fields": []})], strict=True)
        data = report.to_dict()
        assert data["status"] == "failure"
        assert data["summary"]["warnings"] == 2
        assert data["results"][0]["issues"][0]["rule_id"] == "namespace_required"
        json.dumps(data)


class TestNaming:
    """Tests for naming-convention helpers."""

    def test_presets(self) -> None:
        assert matches("UserEvent", "PascalCase")
        assert not matches("userEvent", "PascalCase")
        assert matches("created_at", "snake_case")
        assert not matches("createdAt", "snake_case")
        assert matches("userEvent", "camelCase")
        assert not matches("user_event", "camelCase")
        assert not matches("", "camelCase")

    def test_raw_regex_label(self) -> None:
        _, label = resolve_pattern("^ev[A-Z]")
        assert label == "'^ev[A-Z]'"
        assert resolve_pattern("PascalCase")[1] == "PascalCase"

    def test_invalid_regex(self) -> None:
        with pytest.raises(RuleConfigError):
            resolve_pattern("([")
