"""Tests for output adapters and exit codes."""

from __future__ import annotations

import io
import json
from datetime import date
from typing import TYPE_CHECKING

import pytest

from tpar_lint.cli.context import ExitCode, get_exit_code
from tpar_lint.cli.output import (
    JsonOutput,
    OutputFormat,
    TerminalOutput,
    get_output_adapter,
)
from tpar_lint.core.parser import RecordKind
from tpar_lint.core.rules import ValidationReport, Verdict, validate

if TYPE_CHECKING:
    from conftest import RecordBuilder


@pytest.fixture
def failed_report(
    valid_lines: list[str], build_record: RecordBuilder, today: date
) -> ValidationReport:
    """Report with an ABN error on line 6 and a warning on line 2."""
    valid_lines[1] = build_record(RecordKind.SENDER_2, sender_name="ACME  PAYROLL")
    valid_lines[5] = build_record(RecordKind.PAYEE, payee_abn="53004085617")
    return validate(valid_lines, today=today)


class TestExitCode:
    """Tests for verdict to exit code mapping."""

    def test_passed(self) -> None:
        assert get_exit_code(Verdict.PASSED) == ExitCode.SUCCESS

    def test_warnings(self) -> None:
        assert get_exit_code(Verdict.PASSED_WITH_WARNINGS) == ExitCode.WARNING

    def test_warnings_fail_on_warn(self) -> None:
        assert get_exit_code(Verdict.PASSED_WITH_WARNINGS, "warn") == ExitCode.ERROR

    def test_failed(self) -> None:
        assert get_exit_code(Verdict.FAILED) == ExitCode.ERROR


class TestTerminalOutput:
    """Tests for the terminal transcript."""

    def test_clean_report(self, valid_lines: list[str], today: date) -> None:
        report = validate(valid_lines, today=today)
        text = TerminalOutput(stream=io.StringIO()).render_report(report)

        assert "No issues found." in text
        assert "Records processed: 8 of 8 line(s), payee records: 2" in text
        assert "Verdict: Passed" in text
        assert "\033[" not in text

    def test_issues_in_scan_order(self, failed_report: ValidationReport) -> None:
        text = TerminalOutput(stream=io.StringIO()).render_report(failed_report)
        lines = text.splitlines()

        issue_lines = [line for line in lines if "[TPR-" in line]
        assert len(issue_lines) == 2
        assert "L2:IDENTREGISTER2:Sender name:" in issue_lines[0]
        assert issue_lines[0].endswith("[TPR-FLD-003]")
        assert "L6:DPAIVS:Payee ABN:" in issue_lines[1]

        assert "Found: 1 error(s), 1 warning(s)" in text
        assert lines[-1] == "Verdict: Failed"

    def test_stopped_scan_is_shown(self, valid_lines: list[str], today: date) -> None:
        lines = valid_lines[:5] + valid_lines[-1:] + valid_lines[5:]
        lines[5] = lines[5][:13] + "00000006" + lines[5][21:]
        report = validate(lines, today=today)
        text = TerminalOutput(stream=io.StringIO()).render_report(report)

        assert "Scan stopped at FILE-TOTAL on line 6" in text

    def test_render_and_write(self, failed_report: ValidationReport) -> None:
        stream = io.StringIO()
        TerminalOutput(stream=stream).render_and_write(failed_report)
        assert stream.getvalue().endswith("Verdict: Failed\n")


class TestJsonOutput:
    """Tests for JSON output."""

    def test_structure(self, failed_report: ValidationReport) -> None:
        data = json.loads(JsonOutput().render_report(failed_report))

        assert [i["code"] for i in data["issues"]] == ["TPR-FLD-003", "TPR-ABN-001"]
        issue = data["issues"][1]
        assert issue["severity"] == "error"
        assert issue["category"] == "Field"
        assert issue["field"] == "Payee ABN"
        assert issue["context"]["raw_value"] == "53004085617"

        summary = data["summary"]
        assert summary["error_count"] == 1
        assert summary["warn_count"] == 1
        assert summary["verdict"] == "failed"
        assert summary["layout_version"] == "FPAIVV03.0"
        assert summary["stopped_at_line"] == 8

    def test_unknown_record_kind_is_null(self, valid_lines: list[str], today: date) -> None:
        valid_lines[5] = "996BOGUS".ljust(996)
        data = json.loads(JsonOutput().render_report(validate(valid_lines, today=today)))
        assert data["issues"][0]["record_kind"] is None


class TestGetOutputAdapter:
    """Tests for adapter lookup."""

    def test_by_name(self) -> None:
        assert isinstance(get_output_adapter("json"), JsonOutput)
        assert isinstance(get_output_adapter(OutputFormat.TERMINAL), TerminalOutput)

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            get_output_adapter("sarif")
