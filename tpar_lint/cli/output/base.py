"""
Report renderers.

A renderer turns a finalized ValidationReport into text. Renderers only read
the report; issue order on output is the order the scan emitted them.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, TextIO

if TYPE_CHECKING:
    from tpar_lint.core.rules.models import Issue, ValidationSummary
    from tpar_lint.core.rules.report import ValidationReport


class OutputFormat(Enum):
    """Formats the validate command can emit."""

    TERMINAL = "terminal"
    JSON = "json"

    @classmethod
    def names(cls) -> list[str]:
        return [f.value for f in cls]


class OutputAdapter(ABC):
    """Renders a report for one output format."""

    format: ClassVar[OutputFormat]

    def __init__(self, stream: TextIO | None = None, color: bool = True) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.color = color

    @abstractmethod
    def render_issues(
        self,
        issues: list[Issue],
        summary: ValidationSummary | None = None,
    ) -> str:
        """Render issues, optionally followed by the run summary."""

    def render_report(self, report: ValidationReport) -> str:
        """Render every issue of a report plus its summary."""
        return self.render_issues(list(report.issues), report.get_summary())

    def render_and_write(self, report: ValidationReport) -> None:
        """Render a report and write it, newline-terminated, to the stream."""
        text = self.render_report(report)
        self.stream.write(text if text.endswith("\n") else text + "\n")
        self.stream.flush()


def get_output_adapter(
    format: OutputFormat | str,
    stream: TextIO | None = None,
    color: bool = True,
) -> OutputAdapter:
    """
    Look up the renderer for a format.

    Raises:
        ValueError: If the format is not one of OutputFormat
    """
    from tpar_lint.cli.output.json import JsonOutput
    from tpar_lint.cli.output.terminal import TerminalOutput

    adapters: dict[OutputFormat, type[OutputAdapter]] = {
        OutputFormat.TERMINAL: TerminalOutput,
        OutputFormat.JSON: JsonOutput,
    }
    return adapters[OutputFormat(format)](stream=stream, color=color)
