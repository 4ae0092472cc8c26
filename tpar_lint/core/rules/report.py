"""
Validation report.

Accumulates issues in scan order and derives the verdict.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

import tpar_lint

from .models import Issue, Severity, ValidationSummary, Verdict

if TYPE_CHECKING:
    from tpar_lint.core.parser.models import RecordKind

    from .models import Rule


class ReportFinalizedError(RuntimeError):
    """Raised when adding to a report after the scan finished."""


class ValidationReport:
    """
    Result of validating one report file.

    Owned by a single scan. Grows monotonically until finalize() and is
    read-only afterwards. Issues are never merged, sorted or dropped.
    """

    def __init__(
        self,
        file: str | None = None,
        encoding: str | None = None,
        line_count: int = 0,
        layout_version: str = "",
        engine_version: str = "",
    ) -> None:
        self.file = file
        self.encoding = encoding
        self.line_count = line_count
        self.layout_version = layout_version
        self.engine_version = engine_version or tpar_lint.__version__

        self.records_processed = 0
        self.payee_count = 0
        self.stopped_at_line: int | None = None
        self.stats: dict[str, int] = {}

        self._issues: list[Issue] = []
        self._error_count = 0
        self._warn_count = 0
        self._finalized = False

    # -------------------------------------------------------------------------
    # Accumulation
    # -------------------------------------------------------------------------

    def add(self, issue: Issue) -> None:
        """Append an issue."""
        self._ensure_open()
        if issue.line_no > self.line_count:
            raise ValueError(f"Issue refers to line {issue.line_no}, file has {self.line_count}")

        self._issues.append(issue)
        if issue.severity == Severity.ERROR:
            self._error_count += 1
        else:
            self._warn_count += 1

    def report(
        self,
        rule: Rule,
        line_no: int,
        message: str | None = None,
        *,
        record_kind: RecordKind | None = None,
        field: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> Issue:
        """Create an issue for a catalog rule and append it."""
        issue = Issue(
            code=rule.id,
            category=rule.category,
            severity=rule.severity,
            line_no=line_no,
            record_kind=record_kind,
            field=field,
            message=message or rule.message,
            context=context or {},
        )
        self.add(issue)
        return issue

    def count_record(self, *, payee: bool = False) -> int:
        """Count a scanned record; returns the running total."""
        self._ensure_open()
        self.records_processed += 1
        if payee:
            self.payee_count += 1
        return self.records_processed

    def finalize(self, stopped_at_line: int | None = None) -> None:
        """Freeze the report once the scan is over."""
        self._ensure_open()
        self.stopped_at_line = stopped_at_line
        self._finalized = True

    def _ensure_open(self) -> None:
        if self._finalized:
            raise ReportFinalizedError("Validation report is already finalized")

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def issues(self) -> tuple[Issue, ...]:
        """Issues in emission order."""
        return tuple(self._issues)

    @property
    def errors(self) -> list[Issue]:
        """Error issues in emission order."""
        return [i for i in self._issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        """Warning issues in emission order."""
        return [i for i in self._issues if i.severity == Severity.WARN]

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def warn_count(self) -> int:
        return self._warn_count

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def has_errors(self) -> bool:
        """Check if any error issues."""
        return self._error_count > 0

    @property
    def verdict(self) -> Verdict:
        """Failed on any error, else passed with or without warnings."""
        if self._error_count > 0:
            return Verdict.FAILED
        if self._warn_count > 0:
            return Verdict.PASSED_WITH_WARNINGS
        return Verdict.PASSED

    def get_summary(self) -> ValidationSummary:
        """Create a validation summary."""
        code_counts = Counter(i.code for i in self._issues)

        return ValidationSummary(
            file=self.file or "<unknown>",
            encoding=self.encoding or "<unknown>",
            line_count=self.line_count,
            records_processed=self.records_processed,
            payee_count=self.payee_count,
            engine_version=self.engine_version,
            layout_version=self.layout_version,
            error_count=self._error_count,
            warn_count=self._warn_count,
            verdict=self.verdict,
            stopped_at_line=self.stopped_at_line,
            top_codes=code_counts.most_common(10),
            duration_ms=self.stats.get("duration_ms", 0),
        )
