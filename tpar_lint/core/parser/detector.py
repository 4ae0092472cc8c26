"""
Format detection for TPAR files.

Detects whether input starts like a TPAR electronic report.
"""

from __future__ import annotations

import re

from .models import DetectedFormat

# First record: length marker followed by the Sender 1 identifier
TPAR_PATTERN = re.compile(rb"^996IDENTREGISTER1")


def detect_format(data: bytes) -> DetectedFormat:
    """
    Detect if data is a TPAR report.

    Checks the first line of the file for the Sender 1 marker.

    Args:
        data: First ~1KB of file content

    Returns:
        DetectedFormat enum value
    """
    # Skip BOM if present
    if data.startswith(b"\xef\xbb\xbf"):
        data = data[3:]

    if TPAR_PATTERN.match(data):
        return DetectedFormat.TPAR

    return DetectedFormat.UNKNOWN


def detect_format_from_lines(lines: list[str]) -> DetectedFormat:
    """Detect format from already decoded lines."""
    if lines and lines[0].startswith("996IDENTREGISTER1"):
        return DetectedFormat.TPAR
    return DetectedFormat.UNKNOWN
