"""
TPAR Rule Engine.

Provides layout-driven validation for TPAR report files.

Usage:
    from tpar_lint.core.parser import parse_file
    from tpar_lint.core.rules import validate

    report = validate(parse_file("TPAR2025.txt"))

    for issue in report.issues:
        print(f"{issue.code}: {issue.message}")
    print(report.verdict)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tpar_lint.core.parser.models import ReportFile

from .checks import CheckerRegistry, FieldChecker, Violation
from .models import (
    Category,
    FieldSpec,
    FieldType,
    Issue,
    RecordLayout,
    Rule,
    Severity,
    ValidationSummary,
    Verdict,
)
from .pipeline import ExecutionPipeline, ScanState
from .records import RecordValidator, build_validators
from .registry import RuleRegistry, get_registry, reset_registry
from .report import ReportFinalizedError, ValidationReport

if TYPE_CHECKING:
    from datetime import date


def validate(
    source: ReportFile | list[str],
    *,
    today: date | None = None,
    registry: RuleRegistry | None = None,
) -> ValidationReport:
    """
    Validate a TPAR report file.

    Args:
        source: Result from parse_file(), or the raw lines of the file
        today: Date used for the financial year upper bound (default: today)
        registry: Registry to use instead of the global one

    Returns:
        Finalized ValidationReport with issues, counts and verdict

    Raises:
        InsufficientRecordsError: If the file has fewer than three lines
    """
    report_file = source if isinstance(source, ReportFile) else ReportFile.from_lines(source)

    pipeline = ExecutionPipeline(registry=registry or get_registry(), today=today)
    return pipeline.run(report_file)


__all__ = [
    "Category",
    # Checkers
    "CheckerRegistry",
    # Pipeline
    "ExecutionPipeline",
    "FieldChecker",
    "FieldSpec",
    "FieldType",
    "Issue",
    "RecordLayout",
    "RecordValidator",
    "ReportFinalizedError",
    "Rule",
    # Registry
    "RuleRegistry",
    "ScanState",
    # Models
    "Severity",
    "ValidationReport",
    "ValidationSummary",
    "Verdict",
    "Violation",
    "build_validators",
    "get_registry",
    "reset_registry",
    # Main function
    "validate",
]
