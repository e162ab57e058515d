"""Batch result aggregation and reports."""

from .aggregator import AggregatedRecord, ResultAggregator
from .batch_reports import (
    STATUS_FAILURE,
    STATUS_SUCCESS,
    STATUS_WARNING,
    CompatibilityReport,
    DiffReport,
    LintReport,
    SubjectDiff,
    SubjectFailure,
    ValidationReport,
)

__all__ = [
    "AggregatedRecord",
    "CompatibilityReport",
    "DiffReport",
    "LintReport",
    "ResultAggregator",
    "STATUS_FAILURE",
    "STATUS_SUCCESS",
    "STATUS_WARNING",
    "SubjectDiff",
    "SubjectFailure",
    "ValidationReport",
]
