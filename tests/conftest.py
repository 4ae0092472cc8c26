"""
Pytest configuration and fixtures for tpar-lint tests.

Provides fixtures for:
- Building fixed-width records from the layout table
- A complete, valid TPAR file (as lines and on disk)
- A pinned "today" so financial-year checks are deterministic
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest

from tpar_lint.core.parser import RECORD_WIDTH, RecordKind
from tpar_lint.core.rules import get_registry, reset_registry

# Build a record line from a kind and field overrides
RecordBuilder = Callable[..., str]
FileBuilder = Callable[..., list[str]]

TODAY = date(2025, 7, 15)

# Known-valid ABNs (pass the modulus 89 check)
SENDER_ABN = "51824753556"
PAYEE_ABN = "53004085616"

# Field values for a well-formed record of each kind
DEFAULT_VALUES: dict[RecordKind, dict[str, str]] = {
    RecordKind.SENDER_1: {
        "sender_abn": SENDER_ABN,
        "run_type": "T",
        "report_end_date": "30062025",
        "data_type": "E",
        "report_type": "C",
        "format_media": "M",
        "version_number": "FPAIVV03.0",
    },
    RecordKind.SENDER_2: {
        "sender_name": "ACME PAYROLL SERVICES",
        "contact_name": "JANE CITIZEN",
        "contact_phone": "0299998888",
    },
    RecordKind.SENDER_3: {
        "street_address": "1 GEORGE STREET",
        "suburb": "SYDNEY",
        "state": "NSW",
        "postcode": "2000",
        "email": "jane@example.com",
    },
    RecordKind.IDENTITY: {
        "payer_abn": SENDER_ABN,
        "branch_number": "001",
        "financial_year": "2025",
        "payer_name": "ACME BUILDERS PTY LTD",
        "street_address": "10 MARKET STREET",
        "suburb": "SYDNEY",
        "state": "NSW",
        "postcode": "2000",
    },
    RecordKind.SOFTWARE: {
        "product_name": "TPAR EXPORT 1.0",
    },
    RecordKind.PAYEE: {
        "payee_abn": PAYEE_ABN,
        "business_name": "SPARKY ELECTRICAL",
        "street_address": "5 SMITH STREET",
        "suburb": "PARRAMATTA",
        "state": "NSW",
        "postcode": "2150",
        "gross_amount": "00000150000",
        "tax_withheld": "00000000000",
        "gst": "00000015000",
        "payment_type": "P",
        "grant_date": "00000000",
        "statement_by_supplier": "N",
        "amendment_indicator": "O",
    },
    RecordKind.FILE_TOTAL: {
        "record_count": "00000000",
    },
}


def _build_record(kind: RecordKind, **overrides: str) -> str:
    """Render one 996-character record; overrides are keyed by field id."""
    layout = get_registry().require_layout(kind)
    values = {"record_length": "996", "record_identifier": kind.tag}
    values.update(DEFAULT_VALUES[kind])
    values.update(overrides)

    unknown = set(values) - {spec.id for spec in layout.fields}
    if unknown:
        raise KeyError(f"Unknown fields for {kind.tag}: {sorted(unknown)}")

    line = [" "] * RECORD_WIDTH
    for spec in layout.fields:
        value = values.get(spec.id, "")
        # Values are written verbatim, padded with spaces to the field width
        padded = value.ljust(spec.length)[: spec.length]
        line[spec.start - 1 : spec.end] = list(padded)
    return "".join(line)


def _build_file(
    payees: int = 2,
    *,
    record_count: int | None = None,
) -> list[str]:
    """A valid file: three senders, one payer group, file total."""
    lines = [
        _build_record(RecordKind.SENDER_1),
        _build_record(RecordKind.SENDER_2),
        _build_record(RecordKind.SENDER_3),
        _build_record(RecordKind.IDENTITY),
        _build_record(RecordKind.SOFTWARE),
    ]
    lines.extend(_build_record(RecordKind.PAYEE) for _ in range(payees))
    count = len(lines) + 1 if record_count is None else record_count
    lines.append(_build_record(RecordKind.FILE_TOTAL, record_count=f"{count:08d}"))
    return lines


# =============================================================================
# Registry Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_registry() -> None:
    """Reset the rule registry before each test."""
    reset_registry()


@pytest.fixture
def today() -> date:
    """Pinned current date for financial-year checks."""
    return TODAY


# =============================================================================
# Builder Fixtures
# =============================================================================


@pytest.fixture
def build_record() -> RecordBuilder:
    """Return the record builder: build_record(kind, **field_overrides)."""
    return _build_record


@pytest.fixture
def build_file() -> FileBuilder:
    """Return the file builder: build_file(payees=2, record_count=None)."""
    return _build_file


@pytest.fixture
def valid_lines() -> list[str]:
    """Lines of a complete, valid TPAR file with two payees."""
    return _build_file()


@pytest.fixture
def valid_file(tmp_path: Path, valid_lines: list[str]) -> Path:
    """A complete, valid TPAR file on disk with CRLF line endings."""
    path = tmp_path / "TPAR2025.txt"
    path.write_bytes(("\r\n".join(valid_lines) + "\r\n").encode("ascii"))
    return path


@pytest.fixture
def invalid_file(tmp_path: Path, build_record: RecordBuilder) -> Path:
    """A TPAR file with a bad payee ABN and a wrong record count."""
    lines = [
        build_record(RecordKind.SENDER_1),
        build_record(RecordKind.SENDER_2),
        build_record(RecordKind.SENDER_3),
        build_record(RecordKind.IDENTITY),
        build_record(RecordKind.SOFTWARE),
        build_record(RecordKind.PAYEE, payee_abn="53004085617"),
        build_record(RecordKind.FILE_TOTAL, record_count="00000099"),
    ]
    path = tmp_path / "TPAR_bad.txt"
    path.write_bytes(("\r\n".join(lines) + "\r\n").encode("ascii"))
    return path
