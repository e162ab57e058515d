"""
Tests for rule configuration: override merging, rule files and format versions.
"""

import json
import logging

import pytest

from schema_intelligence.exceptions import FormatVersionError, RuleConfigError
from schema_intelligence.linter import RuleSet, load_rule_file, load_rule_set, merge_overrides
from schema_intelligence.linter.catalog import get_rule, known_rule_ids
from schema_intelligence.linter.rule_file import build_source_map, parse_rule_text
from schema_intelligence.models import Severity
from schema_intelligence.utils.format_version import check_format_version, parse_format_version


class TestDefaults:
    """Tests for the default rule catalog."""

    def test_every_rule_has_a_default(self) -> None:
        defaults = RuleSet.defaults()
        assert set(defaults) == set(known_rule_ids())

    def test_disabled_by_default(self) -> None:
        defaults = RuleSet.defaults()
        for rule_id in ("field_doc_required", "field_naming", "field_numbers_sequential", "description_required"):
            assert not defaults.is_enabled(rule_id)
        assert defaults.is_enabled("namespace_required")

    def test_default_options(self) -> None:
        defaults = RuleSet.defaults()
        assert defaults.config("max_nesting_depth").options["limit"] == 5
        assert defaults.config("syntax_version").options["expected"] == "proto3"
        assert defaults.config("package_required").severity == Severity.ERROR

    def test_unknown_rule_lookup(self) -> None:
        with pytest.raises(KeyError):
            get_rule("no_such_rule")


class TestMergeOverrides:
    """Tests for merge_overrides."""

    def test_bool_toggles_rule(self) -> None:
        merged = merge_overrides(RuleSet.defaults(), {"doc_required": False, "field_naming": True})
        assert not merged.is_enabled("doc_required")
        assert merged.is_enabled("field_naming")

    def test_base_is_not_mutated(self) -> None:
        base = RuleSet.defaults()
        merge_overrides(base, {"doc_required": False})
        assert base.is_enabled("doc_required")

    def test_string_false_disables(self) -> None:
        merged = merge_overrides(RuleSet.defaults(), {"namespace_required": "false"})
        assert not merged.is_enabled("namespace_required")

    def test_shorthand_sets_primary_option(self) -> None:
        merged = merge_overrides(RuleSet.defaults(), {"max_nesting_depth": "3", "naming_convention": "PascalCase"})
        assert merged.config("max_nesting_depth").options["limit"] == 3
        assert merged.config("naming_convention").options["pattern"] == "PascalCase"

    def test_mapping_merges_options_and_severity(self) -> None:
        merged = merge_overrides(
            RuleSet.defaults(),
            {"enum_uppercase": {"severity": "error", "options": {"pattern": "SCREAMING_SNAKE_CASE"}}},
        )
        config = merged.config("enum_uppercase")
        assert config.severity == Severity.ERROR
        assert config.enabled
        assert config.options["pattern"] == "SCREAMING_SNAKE_CASE"

    def test_none_leaves_rule_untouched(self) -> None:
        merged = merge_overrides(RuleSet.defaults(), {"doc_required": None})
        assert merged.config("doc_required").to_dict() == RuleSet.defaults().config("doc_required").to_dict()

    def test_unknown_rule_is_ignored(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            merged = merge_overrides(RuleSet.defaults(), {"made_up_rule": True})
        assert "made_up_rule" not in merged
        assert "made_up_rule" in caplog.text

    @pytest.mark.parametrize(
        "overrides",
        [
            {"doc_required": {"severity": "fatal"}},
            {"doc_required": {"level": "error"}},
            {"doc_required": "strict"},
            {"max_nesting_depth": 0},
            {"naming_convention": "([a-z"},
            {"syntax_version": "proto4"},
        ],
    )
    def test_invalid_overrides(self, overrides) -> None:
        with pytest.raises(RuleConfigError):
            merge_overrides(RuleSet.defaults(), overrides)

    def test_config_is_read_only(self) -> None:
        config = RuleSet.defaults().config("max_nesting_depth")
        with pytest.raises(TypeError):
            config.options["limit"] = 1


class TestRuleFiles:
    """Tests for YAML/JSON rule override files."""

    def test_yaml_file(self, write_schema) -> None:
        path = write_schema(
            "rules.yaml",
            "version: 1.0.0\nstrict: true\nrules:\n  doc_required: false\n  max_nesting_depth: 2\n",
        )
        rule_file = load_rule_file(path)
        assert rule_file.strict is True
        assert rule_file.version == "1.0.0"
        assert rule_file.path == path
        rule_set = load_rule_set(path)
        assert not rule_set.is_enabled("doc_required")
        assert rule_set.config("max_nesting_depth").options["limit"] == 2

    def test_json_file(self, write_schema) -> None:
        path = write_schema("rules.json", json.dumps({"rules": {"field_naming": {"enabled": True}}}))
        assert load_rule_set(path).is_enabled("field_naming")

    def test_no_file_returns_defaults(self) -> None:
        assert load_rule_set(None).to_dict() == RuleSet.defaults().to_dict()

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(RuleConfigError, match="Rule file not found"):
            load_rule_file(tmp_path / "nope.yaml")

    def test_schema_violation_reports_line(self) -> None:
        content = "rules:\n  doc_required: true\n  enum_uppercase:\n    severity: fatal\n"
        with pytest.raises(RuleConfigError) as excinfo:
            parse_rule_text(content, origin="rules.yaml")
        message = str(excinfo.value)
        assert message.startswith("rules.yaml:4:")
        assert "/rules/enum_uppercase" in message

    def test_unknown_top_level_key(self) -> None:
        with pytest.raises(RuleConfigError, match="invalid rule file"):
            parse_rule_text("ruels: {}\n", origin="r.yaml")

    def test_yaml_syntax_error(self) -> None:
        with pytest.raises(RuleConfigError, match="Failed to parse rule file"):
            parse_rule_text("rules: [unclosed\n", origin="r.yaml")

    def test_root_must_be_mapping(self) -> None:
        with pytest.raises(RuleConfigError, match="must be a mapping"):
            parse_rule_text("- a\n- b\n", origin="r.yaml")

    def test_major_version_mismatch(self) -> None:
        with pytest.raises(RuleConfigError, match="Incompatible rule file version"):
            parse_rule_text("version: 2.0.0\n", origin="r.yaml")

    def test_newer_minor_version_warns(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            rule_file = parse_rule_text("version: 1.4.0\nrules: {}\n", origin="r.yaml")
        assert rule_file.overrides == {}
        assert "newer" in caplog.text

    def test_source_map_lines(self) -> None:
        source_map = build_source_map("rules:\n  doc_required: false\n")
        assert source_map["/rules"]["line"] == 2
        assert source_map["/rules/doc_required"]["line"] == 2


class TestFormatVersion:
    """Tests for rule file version parsing."""

    def test_parse(self) -> None:
        version = parse_format_version("v1.2")
        assert (version.major, version.minor, version.patch) == (1, 2, 0)
        assert str(version) == "1.2.0"

    def test_invalid(self) -> None:
        with pytest.raises(FormatVersionError):
            parse_format_version("one")

    def test_missing_version_is_compatible(self) -> None:
        assert check_format_version(None).compatible

    def test_patch_is_ignored(self) -> None:
        result = check_format_version("1.0.9")
        assert result.compatible
        assert not result.minor_newer
