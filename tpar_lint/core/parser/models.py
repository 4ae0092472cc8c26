"""
Parser data models.

Core data models for TPAR report files.

CRITICAL DESIGN DECISIONS:
- Records keep their raw content untouched (no stripping, no padding)
- Record kind is derived from the content, never stored
- All models are frozen (immutable)
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

# Mandated width of every record, and the tolerated width when a
# two-character line terminator is still attached.
RECORD_WIDTH = 996
TERMINATED_RECORD_WIDTH = RECORD_WIDTH + 2

# Column where every record identifier starts (1-based)
TAG_COLUMN = 4

# =============================================================================
# Enums
# =============================================================================


class DetectedFormat(Enum):
    """Result of format detection."""

    TPAR = "tpar"  # Starts with a 996IDENTREGISTER1 record
    UNKNOWN = "unknown"  # Cannot determine


class RecordKind(Enum):
    """Record kinds, valued by their literal identifier tag."""

    SENDER_1 = "IDENTREGISTER1"
    SENDER_2 = "IDENTREGISTER2"
    SENDER_3 = "IDENTREGISTER3"
    IDENTITY = "IDENTITY"
    SOFTWARE = "SOFTWARE"
    PAYEE = "DPAIVS"
    FILE_TOTAL = "FILE-TOTAL"

    @property
    def tag(self) -> str:
        """Literal identifier tag at column 4."""
        return self.value

    @property
    def label(self) -> str:
        """Human-readable name."""
        return _LABELS[self]

    @classmethod
    def detect(cls, content: str) -> RecordKind | None:
        """
        Classify a record by the identifier tag at column 4.

        Returns None for unrecognized tags.
        """
        body = content[TAG_COLUMN - 1 :]
        for kind in cls:
            if body.startswith(kind.value):
                return kind
        return None

    @classmethod
    def from_name(cls, name: str) -> RecordKind | None:
        """Resolve a kind from its enum name, tag, or label (case-insensitive)."""
        wanted = name.strip().lower().replace("_", "-").replace(" ", "-")
        for kind in cls:
            candidates = {
                kind.name.lower().replace("_", "-"),
                kind.value.lower(),
                kind.label.lower().replace(" ", "-"),
            }
            if wanted in candidates:
                return kind
        return None


_LABELS: dict[RecordKind, str] = {
    RecordKind.SENDER_1: "Sender 1",
    RecordKind.SENDER_2: "Sender 2",
    RecordKind.SENDER_3: "Sender 3",
    RecordKind.IDENTITY: "Payer Identity",
    RecordKind.SOFTWARE: "Software",
    RecordKind.PAYEE: "Payee",
    RecordKind.FILE_TOTAL: "File Total",
}

# Sender records are fixed to the first three lines
SENDER_KINDS: tuple[RecordKind, RecordKind, RecordKind] = (
    RecordKind.SENDER_1,
    RecordKind.SENDER_2,
    RecordKind.SENDER_3,
)


# =============================================================================
# Record Model
# =============================================================================


class Record(BaseModel, frozen=True):
    """A single fixed-width line of the report file."""

    line_no: int = Field(ge=1, description="Line number in file (1-indexed)")
    content: str = Field(description="Raw line content without line terminator")

    model_config = {"frozen": True}

    @property
    def kind(self) -> RecordKind | None:
        """Record kind derived from the identifier tag."""
        return RecordKind.detect(self.content)

    @property
    def width(self) -> int:
        """Number of characters in the record."""
        return len(self.content)


# =============================================================================
# Parse Result Model
# =============================================================================


class ReportFile(BaseModel, frozen=True):
    """
    A report file read fully into memory.

    The engine never performs I/O; it walks these records in order.
    """

    file_path: Path
    encoding: str
    detected_format: DetectedFormat = DetectedFormat.UNKNOWN
    records: list[Record] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def line_count(self) -> int:
        """Number of physical lines."""
        return len(self.records)

    @classmethod
    def from_lines(
        cls,
        lines: list[str],
        file_path: Path | str = "<lines>",
        encoding: str = "utf-8",
    ) -> ReportFile:
        """Build a report file from already materialized lines."""
        from .detector import detect_format_from_lines

        return cls(
            file_path=Path(file_path),
            encoding=encoding,
            detected_format=detect_format_from_lines(lines),
            records=[Record(line_no=i, content=line) for i, line in enumerate(lines, start=1)],
        )
