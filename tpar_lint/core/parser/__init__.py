"""
TPAR Parser Core.

Public API for reading TPAR report files into records.

Usage:
    from tpar_lint.core.parser import parse_file, ReportFile

    report_file = parse_file("TPAR2025.txt")
    for record in report_file.records:
        print(record.line_no, record.kind)

API Functions:
    parse_file(path) -> ReportFile
    parse_bytes(data, filename) -> ReportFile
    parse_stream(stream, filename) -> ReportFile
    detect_encoding(data) -> str
    detect_format(data) -> DetectedFormat
    extract_field(content, start, length) -> str
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from .detector import detect_format
from .encoding import decode, detect_encoding
from .errors import (
    ERROR_CODES,
    FileTooLargeError,
    InsufficientRecordsError,
    ReportReadError,
    TparLintError,
    get_error_description,
)
from .extract import extract_field
from .models import (
    RECORD_WIDTH,
    SENDER_KINDS,
    TERMINATED_RECORD_WIDTH,
    DetectedFormat,
    Record,
    RecordKind,
    ReportFile,
)

logger = logging.getLogger(__name__)


def parse_file(
    path: Path | str,
    *,
    max_bytes: int | None = None,
    encoding: str | None = None,
) -> ReportFile:
    """
    Read a TPAR report file.

    Args:
        path: Path to the report file
        max_bytes: Maximum bytes to read (None = unlimited)
        encoding: Force an encoding instead of detecting it

    Returns:
        ReportFile with all records in file order

    Raises:
        FileNotFoundError: If file does not exist
        FileTooLargeError: If file exceeds max_bytes
        ReportReadError: If file cannot be decoded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if max_bytes is not None and max_bytes > 0:
        with path.open("rb") as f:
            data = f.read(max_bytes + 1)
    else:
        data = path.read_bytes()

    return parse_bytes(data, str(path), max_bytes=max_bytes, encoding=encoding)


def parse_bytes(
    data: bytes,
    filename: str = "<bytes>",
    *,
    max_bytes: int | None = None,
    encoding: str | None = None,
) -> ReportFile:
    """
    Read TPAR data from bytes.

    Args:
        data: Raw file content
        filename: Optional filename for messages
        max_bytes: Maximum size (None = unlimited)
        encoding: Force an encoding instead of detecting it

    Returns:
        ReportFile with all records in file order
    """
    if max_bytes is not None and max_bytes > 0 and len(data) > max_bytes:
        raise FileTooLargeError(
            f"Input exceeds maximum size of {max_bytes} bytes",
            context={"max_bytes": max_bytes, "file_size": len(data)},
        )

    # Step 1: Detect encoding
    resolved_encoding = encoding or detect_encoding(data)
    logger.debug("Reading %s as %s", filename, resolved_encoding)

    # Step 2: Detect format (informational only)
    detected_format = detect_format(data[:1024])

    # Step 3: Decode and split into physical lines
    text = decode(data, resolved_encoding)
    lines = split_lines(text)

    return ReportFile(
        file_path=Path(filename),
        encoding=resolved_encoding,
        detected_format=detected_format,
        records=[Record(line_no=i, content=line) for i, line in enumerate(lines, start=1)],
    )


def split_lines(text: str) -> list[str]:
    """
    Split text into physical lines on CR, LF or CRLF.

    Other control characters stay inside the record so columns never shift.
    A single trailing terminator does not produce an empty last line.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_stream(
    stream: BinaryIO,
    filename: str = "<stream>",
    *,
    max_bytes: int | None = None,
    encoding: str | None = None,
) -> ReportFile:
    """
    Read TPAR data from a binary stream.

    Args:
        stream: Binary file-like object
        filename: Optional filename for messages

    Returns:
        ReportFile with all records in file order
    """
    data = stream.read(max_bytes + 1) if max_bytes is not None and max_bytes > 0 else stream.read()

    return parse_bytes(data, filename, max_bytes=max_bytes, encoding=encoding)


# =============================================================================
# Public API Exports
# =============================================================================

__all__ = [
    "ERROR_CODES",
    "RECORD_WIDTH",
    "SENDER_KINDS",
    "TERMINATED_RECORD_WIDTH",
    # Enums
    "DetectedFormat",
    # Errors
    "FileTooLargeError",
    "InsufficientRecordsError",
    # Models
    "Record",
    "RecordKind",
    "ReportFile",
    "ReportReadError",
    "TparLintError",
    "decode",
    "detect_encoding",
    "detect_format",
    "extract_field",
    "get_error_description",
    "parse_bytes",
    # Main functions
    "parse_file",
    "parse_stream",
    "split_lines",
]
