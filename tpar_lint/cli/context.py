"""
CLI context.

Exit codes and their mapping from the validation verdict.
"""

from __future__ import annotations

from enum import IntEnum

from tpar_lint.core.rules.models import Verdict


class ExitCode(IntEnum):
    """CLI exit codes following Unix conventions."""

    SUCCESS = 0  # Passed
    ERROR = 1  # Validation errors found
    FATAL = 2  # Fatal error (unreadable file, fewer than three records)
    WARNING = 3  # Passed with warnings
    USAGE = 64  # Command line usage error


def get_exit_code(verdict: Verdict, fail_on: str = "error") -> ExitCode:
    """Determine exit code from the verdict and the fail_on setting."""
    if verdict == Verdict.FAILED:
        return ExitCode.ERROR

    if verdict == Verdict.PASSED_WITH_WARNINGS:
        if fail_on.lower() == "warn":
            return ExitCode.ERROR
        return ExitCode.WARNING

    return ExitCode.SUCCESS
