"""
Execution Pipeline.

Walks the records of a report file in order: line-length pre-check, then the
record-kind state machine that dispatches each line to its validator.
"""

from __future__ import annotations

import logging
import time
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any

from tpar_lint.core.parser.errors import InsufficientRecordsError
from tpar_lint.core.parser.models import (
    RECORD_WIDTH,
    SENDER_KINDS,
    TERMINATED_RECORD_WIDTH,
    RecordKind,
)

from .records import build_validators
from .registry import RuleRegistry, get_registry
from .report import ValidationReport

if TYPE_CHECKING:
    from tpar_lint.core.parser.models import Record, ReportFile

logger = logging.getLogger(__name__)

ALLOWED_WIDTHS = frozenset({RECORD_WIDTH, TERMINATED_RECORD_WIDTH})


class ScanState(Enum):
    """Which record kind the file walk expects next."""

    EXPECT_SENDER_1 = "expect_sender_1"
    EXPECT_SENDER_2 = "expect_sender_2"
    EXPECT_SENDER_3 = "expect_sender_3"
    EXPECT_IDENTITY = "expect_identity"
    EXPECT_SOFTWARE = "expect_software"
    EXPECT_PAYEE = "expect_payee"


class ExecutionPipeline:
    """
    Validates a report file end to end.

    CRITICAL: Stops at the first FILE-TOTAL record. The trailing check only
    looks at the last physical line, so a FILE-TOTAL in the middle of the file
    hides whatever follows it.
    """

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        today: date | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.today = today
        self.validators = build_validators(self.registry)

    def run(self, report_file: ReportFile) -> ValidationReport:
        """
        Validate all records, collecting issues.

        Raises:
            InsufficientRecordsError: If the file has fewer than three lines
        """
        start_time = time.perf_counter()
        records = report_file.records

        if len(records) < len(SENDER_KINDS):
            raise InsufficientRecordsError(
                f"File has {len(records)} line(s), at least {len(SENDER_KINDS)} sender "
                "records are required",
                context={"line_count": len(records)},
            )

        report = ValidationReport(
            file=str(report_file.file_path),
            encoding=report_file.encoding,
            line_count=len(records),
            layout_version=self.registry.layout_version,
        )
        context: dict[str, Any] = {
            "today": self.today or date.today(),
            "records_processed": 0,
        }

        self._check_line_lengths(records, report)
        stopped_at = self._scan(records, report, context)
        self._check_terminator(records, report)

        report.stats["duration_ms"] = int((time.perf_counter() - start_time) * 1000)
        report.finalize(stopped_at_line=stopped_at)

        logger.info(
            "Validated %s: %d records, %d payees, %d errors, %d warnings",
            report.file,
            report.records_processed,
            report.payee_count,
            report.error_count,
            report.warn_count,
        )
        return report

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _check_line_lengths(self, records: list[Record], report: ValidationReport) -> None:
        """Every line must be 996 characters, or 998 with a line terminator."""
        rule = self.registry.require_rule("TPR-LEN-001")
        for record in records:
            if record.width in ALLOWED_WIDTHS:
                continue
            report.report(
                rule,
                record.line_no,
                f"Line is {record.width} characters long, expected {RECORD_WIDTH}",
                record_kind=self._positional_kind(record),
                context={"width": record.width},
            )

    def _scan(
        self,
        records: list[Record],
        report: ValidationReport,
        context: dict[str, Any],
    ) -> int | None:
        """
        Run the record-kind state machine.

        Returns:
            Line number of the FILE-TOTAL record that stopped the scan, if any
        """
        state = ScanState.EXPECT_SENDER_1

        # Lines 1-3 are the sender records, whatever their tags say
        for record, kind in zip(records, SENDER_KINDS):
            context["records_processed"] = report.count_record()
            self.validators[kind].validate(record, report, context)
            state = _next_sender_state(state)

        for record in records[len(SENDER_KINDS) :]:
            kind = record.kind
            payee = kind == RecordKind.PAYEE
            context["records_processed"] = report.count_record(payee=payee)
            logger.debug("Line %d: %s in state %s", record.line_no, kind, state.value)

            if kind == RecordKind.IDENTITY:
                self.validators[kind].validate(record, report, context)
                state = ScanState.EXPECT_SOFTWARE

            elif kind == RecordKind.SOFTWARE:
                if state != ScanState.EXPECT_SOFTWARE:
                    self._report_order(report, "TPR-ORD-001", record, kind)
                self.validators[kind].validate(record, report, context)
                state = ScanState.EXPECT_PAYEE

            elif kind == RecordKind.PAYEE:
                if state != ScanState.EXPECT_PAYEE:
                    self._report_order(report, "TPR-ORD-002", record, kind)
                self.validators[kind].validate(record, report, context)

            elif kind == RecordKind.FILE_TOTAL:
                self.validators[kind].validate(record, report, context)
                remaining = len(records) - record.line_no
                if remaining:
                    logger.debug(
                        "Scan stopped at line %d, %d lines not checked", record.line_no, remaining
                    )
                return record.line_no

            else:
                self._report_unknown(report, record, kind)

        return None

    def _check_terminator(self, records: list[Record], report: ValidationReport) -> None:
        """The last physical line must be a FILE-TOTAL record."""
        last = records[-1]
        if last.kind == RecordKind.FILE_TOTAL:
            return
        report.report(
            self.registry.require_rule("TPR-STR-004"),
            last.line_no,
            "File does not end with a FILE-TOTAL record",
            record_kind=last.kind,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _report_order(
        self,
        report: ValidationReport,
        code: str,
        record: Record,
        kind: RecordKind,
    ) -> None:
        report.report(self.registry.require_rule(code), record.line_no, record_kind=kind)

    def _report_unknown(
        self,
        report: ValidationReport,
        record: Record,
        kind: RecordKind | None,
    ) -> None:
        tag = record.content[3:17].rstrip()
        if kind in SENDER_KINDS:
            message = f"{kind.tag} record is only allowed in lines 1-3"
        else:
            message = f"Unknown record type '{tag}'"
        report.report(
            self.registry.require_rule("TPR-STR-003"),
            record.line_no,
            message,
            record_kind=kind,
            context={"tag": tag},
        )

    @staticmethod
    def _positional_kind(record: Record) -> RecordKind | None:
        if record.line_no <= len(SENDER_KINDS):
            return SENDER_KINDS[record.line_no - 1]
        return record.kind


def _next_sender_state(state: ScanState) -> ScanState:
    return {
        ScanState.EXPECT_SENDER_1: ScanState.EXPECT_SENDER_2,
        ScanState.EXPECT_SENDER_2: ScanState.EXPECT_SENDER_3,
        ScanState.EXPECT_SENDER_3: ScanState.EXPECT_IDENTITY,
    }[state]
