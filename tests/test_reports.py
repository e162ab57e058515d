"""
Tests for the result aggregator and the batch reports.
"""

import threading

from schema_intelligence.linter import LintResult
from schema_intelligence.models import Issue, Severity
from schema_intelligence.reports import LintReport, ResultAggregator, ValidationReport
from schema_intelligence.validation import ValidationResult


class TestResultAggregator:
    """Tests for ResultAggregator."""

    def test_finalize_orders_by_identifier(self) -> None:
        aggregator = ResultAggregator()
        aggregator.record("b.avsc", True)
        aggregator.record("a.avsc", False)
        assert [r.identifier for r in aggregator.records] == ["b.avsc", "a.avsc"]
        assert [r.identifier for r in aggregator.finalize()] == ["a.avsc", "b.avsc"]
        assert len(aggregator) == 2

    def test_summary_counts_issues(self) -> None:
        aggregator = ResultAggregator()
        aggregator.record("a", False, [Issue("parse", Severity.ERROR, "broken")])
        aggregator.record("b", True, [Issue("doc_required", Severity.WARNING, "Missing documentation")])
        assert aggregator.summary() == {"total": 2, "passed": 1, "failed": 1, "errors": 1, "warnings": 1}

    def test_summary_without_issues(self) -> None:
        aggregator = ResultAggregator()
        aggregator.record("a", True, ["not an issue"])
        assert aggregator.summary() == {"total": 1, "passed": 1, "failed": 0}

    def test_concurrent_producers(self) -> None:
        aggregator = ResultAggregator()

        def produce(offset: int) -> None:
            for i in range(50):
                aggregator.record(f"item-{offset + i:04d}", True)

        threads = [threading.Thread(target=produce, args=(n * 50,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        final = aggregator.finalize()
        assert len(final) == 400
        assert [r.identifier for r in final] == sorted(f"item-{i:04d}" for i in range(400))


class TestLintResult:
    """Tests for LintResult."""

    def test_status(self) -> None:
        result = LintResult("a.avsc")
        assert result.status == "passed"
        result.add_warning("Missing namespace", "namespace_required")
        assert result.passed
        result.add_error("Invalid JSON format: Expecting value")
        assert not result.passed
        assert result.issues[-1].rule_id == "parse"

    def test_strict_fails_on_warnings(self) -> None:
        result = LintResult("a.avsc", strict=True)
        result.add_warning("Missing namespace", "namespace_required", path=("inner",))
        assert result.status == "failed"
        assert result.errors == []
        assert result.to_dict()["issues"][0]["path"] == ["inner"]


class TestBatchReports:
    """Tests for report status reductions."""

    def test_lint_report_status(self) -> None:
        ok = LintResult("a")
        bad = LintResult("b")
        bad.add_error("broken")
        assert LintReport([ok]).status == "success"
        report = LintReport([ok, bad])
        assert report.status == "failure"
        assert report.result_for("b") is bad
        assert report.result_for("missing") is None

    def test_empty_validation_report_fails(self) -> None:
        assert ValidationReport([]).status == "failure"

    def test_validation_report(self) -> None:
        report = ValidationReport([ValidationResult("a"), ValidationResult("b", error="bad")])
        assert report.summary == {"total": 2, "valid": 1, "invalid": 1}
        assert not report.ok
        assert report.to_dict()["results"][1]["status"] == "invalid"


class TestIssue:
    """Tests for Issue rendering."""

    def test_pointer_escaping(self) -> None:
        issue = Issue("doc_required", Severity.WARNING, "Missing documentation", ("a/b", "c~d", 0))
        assert issue.pointer == "/a~1b/c~0d/0"

    def test_format(self) -> None:
        issue = Issue("doc_required", Severity.WARNING, "Missing documentation", ("email",))
        assert issue.format("a.avsc") == "WARNING[doc_required]: Missing documentation (source= a.avsc path= /email)"
        assert Issue("parse", Severity.ERROR, "broken").format() == "ERROR[parse]: broken"

    def test_severity_from_value(self) -> None:
        assert Severity.from_value("warn") == Severity.WARNING
        assert Severity.from_value("ERROR") == Severity.ERROR
