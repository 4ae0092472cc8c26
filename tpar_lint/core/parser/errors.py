"""
Fatal error types.

Only conditions that make validation impossible are raised. Everything else
found in a report file is collected as an Issue on the ValidationReport.
All fatal errors carry a code from the TPR-XXX-NNN taxonomy.
"""

from __future__ import annotations

from typing import Any


class TparLintError(Exception):
    """Base class for fatal tpar-lint errors."""

    code: str = "TPR-IO-000"

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class FileTooLargeError(TparLintError):
    """Input exceeds the configured size limit."""

    code = "TPR-IO-001"


class ReportReadError(TparLintError):
    """Input could not be decoded into text lines."""

    code = "TPR-IO-002"


class InsufficientRecordsError(TparLintError):
    """File has fewer than the three mandatory sender records."""

    code = "TPR-HDR-001"


# =============================================================================
# Error Codes Registry
# =============================================================================

ERROR_CODES: dict[str, str] = {
    "TPR-IO-001": "File exceeds maximum size",
    "TPR-IO-002": "File could not be decoded",
    "TPR-HDR-001": "File must contain at least three sender records",
}


def get_error_description(code: str) -> str | None:
    """Get the description for a fatal error code."""
    return ERROR_CODES.get(code)
