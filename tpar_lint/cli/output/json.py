"""
JSON renderer.

Serializes issues and the summary through their pydantic models, so enum
fields appear by value (record_kind as the record tag).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, TextIO

from tpar_lint.cli.output.base import OutputAdapter, OutputFormat

if TYPE_CHECKING:
    from tpar_lint.core.rules.models import Issue, ValidationSummary


class JsonOutput(OutputAdapter):
    """Machine-readable report."""

    format = OutputFormat.JSON

    def __init__(self, stream: TextIO | None = None, color: bool = False, indent: int = 2) -> None:
        super().__init__(stream=stream, color=False)
        self.indent = indent

    def render_issues(
        self,
        issues: list[Issue],
        summary: ValidationSummary | None = None,
    ) -> str:
        document: dict[str, Any] = {
            "issues": [issue.model_dump(mode="json") for issue in issues],
        }
        if summary is not None:
            document["summary"] = self._summary(summary)
        return json.dumps(document, indent=self.indent, ensure_ascii=False)

    @staticmethod
    def _summary(summary: ValidationSummary) -> dict[str, Any]:
        data = summary.model_dump(mode="json", exclude={"top_codes"})
        data["total_issues"] = summary.total_issues
        data["has_errors"] = summary.has_errors
        data["top_codes"] = [{"code": code, "count": n} for code, n in summary.top_codes]
        return data
