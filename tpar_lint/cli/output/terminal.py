"""
Operator transcript.

One line per issue in scan order, then record tallies and the verdict.
Colour is applied only when writing to a TTY.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any, TextIO

import typer

from tpar_lint.cli.output.base import OutputAdapter, OutputFormat

if TYPE_CHECKING:
    from tpar_lint.core.rules.models import Issue, ValidationSummary

# Marker and style per severity: (unicode, ascii fallback, style)
SEVERITY_MARKS: dict[str, tuple[str, str, dict[str, Any]]] = {
    "error": ("✖", "X", {"fg": typer.colors.RED}),
    "warn": ("⚠", "!", {"fg": typer.colors.YELLOW}),
}

VERDICT_STYLES: dict[str, dict[str, Any]] = {
    "passed": {"fg": typer.colors.GREEN},
    "passed_with_warnings": {"fg": typer.colors.YELLOW},
    "failed": {"fg": typer.colors.RED, "bold": True},
}


def _can_encode(text: str, stream: TextIO) -> bool:
    try:
        text.encode(getattr(stream, "encoding", None) or sys.stdout.encoding or "utf-8")
    except (UnicodeEncodeError, LookupError):
        return False
    return True


class TerminalOutput(OutputAdapter):
    """Human-readable transcript for the terminal."""

    format = OutputFormat.TERMINAL

    def __init__(self, stream: TextIO | None = None, color: bool = True) -> None:
        super().__init__(stream=stream, color=color)
        isatty = getattr(self.stream, "isatty", None)
        self._use_color = color and callable(isatty) and isatty()
        self._unicode = _can_encode("✖⚠✓", self.stream)

    def render_issues(
        self,
        issues: list[Issue],
        summary: ValidationSummary | None = None,
    ) -> str:
        out: list[str] = []
        if summary is not None:
            out.append(self._style(summary.file, bold=True))

        if issues:
            out.extend(self._issue_line(issue) for issue in issues)
        else:
            mark = "✓" if self._unicode else "OK"
            out.append(self._style(f"{mark} No issues found.", fg=typer.colors.GREEN))

        if summary is not None:
            out.append("")
            out.extend(self._summary_lines(summary))

        return "\n".join(out)

    def _issue_line(self, issue: Issue) -> str:
        """`  X L6:DPAIVS:Payee ABN: message [TPR-ABN-001]`"""
        unicode_mark, ascii_mark, style = SEVERITY_MARKS[issue.severity.value]
        mark = self._style(unicode_mark if self._unicode else ascii_mark, **style)

        where = f"L{issue.line_no}"
        if issue.record_kind is not None:
            where += f":{issue.record_kind.tag}"
        if issue.field:
            where += f":{issue.field}"

        code = self._style(issue.code, dim=True)
        return f"  {mark} {where}: {issue.message} [{code}]"

    def _summary_lines(self, summary: ValidationSummary) -> list[str]:
        out = [
            f"Records processed: {summary.records_processed} of {summary.line_count} line(s), "
            f"payee records: {summary.payee_count}"
        ]

        stopped = summary.stopped_at_line
        if stopped is not None and stopped < summary.line_count:
            out.append(
                self._style(f"Scan stopped at FILE-TOTAL on line {stopped}", fg=typer.colors.YELLOW)
            )

        counts = []
        if summary.error_count:
            counts.append(self._style(f"{summary.error_count} error(s)", fg=typer.colors.RED))
        if summary.warn_count:
            counts.append(
                self._style(f"{summary.warn_count} warning(s)", fg=typer.colors.YELLOW)
            )
        if counts:
            out.append("Found: " + ", ".join(counts))

        verdict = summary.verdict
        out.append("Verdict: " + self._style(verdict.label, **VERDICT_STYLES[verdict.value]))
        return out

    def _style(self, text: str, **style: Any) -> str:
        if not self._use_color:
            return text
        return typer.style(text, **style)
