"""
Primitive field validators.

Pure predicates over raw field values. Field checkers and record rules build
on these; nothing here knows about records or issues.
"""

from __future__ import annotations

import re
from datetime import date

# Weights of the ABN modulus 89 algorithm, one per digit
ABN_WEIGHTS: tuple[int, ...] = (10, 1, 3, 5, 7, 9, 11, 13, 15, 17, 19)
ABN_MODULUS = 89

STATE_CODES: frozenset[str] = frozenset(
    {"ACT", "NSW", "NT", "QLD", "SA", "TAS", "VIC", "WA", "OTH"}
)

# ASCII digits only; str.isdigit() would accept superscripts and other scripts
_DIGITS = re.compile(r"[0-9]+")


def is_digits(value: str) -> bool:
    """True if value is non-empty and only ASCII digits."""
    return bool(_DIGITS.fullmatch(value))


def is_blank(value: str) -> bool:
    """True if value is empty or whitespace only."""
    return not value.strip()


def is_valid_abn(value: str) -> bool:
    """
    Check an Australian Business Number.

    Subtract 1 from the first digit, multiply each digit by its weight and
    the sum must be divisible by 89. Anything but 11 digits is invalid.
    """
    if len(value) != 11 or not is_digits(value):
        return False

    digits = [int(c) for c in value]
    digits[0] -= 1
    total = sum(d * w for d, w in zip(digits, ABN_WEIGHTS))
    return total % ABN_MODULUS == 0


def parse_date(value: str) -> date | None:
    """
    Parse a DDMMYYYY value into a date.

    Calendar rules (month lengths, leap years) come from date() itself.

    Returns:
        The date, or None if value is not a real calendar date
    """
    if len(value) != 8 or not is_digits(value):
        return None

    day = int(value[0:2])
    month = int(value[2:4])
    year = int(value[4:8])

    try:
        return date(year, month, day)
    except ValueError:
        return None


def is_valid_date(value: str) -> bool:
    """True if value is a real DDMMYYYY calendar date."""
    return parse_date(value) is not None


def is_valid_postcode(value: str) -> bool:
    """True if value is exactly four digits (0000-9999)."""
    return len(value) == 4 and is_digits(value)


def is_valid_state(value: str) -> bool:
    """True if the trimmed value is a state or territory code."""
    return value.strip() in STATE_CODES


def is_valid_email(value: str) -> bool:
    """
    Check the shape of an optional email address.

    Blank is valid. Otherwise an '@' must appear somewhere other than the
    first or last character of the trimmed value.
    """
    email = value.strip()
    if not email:
        return True
    return "@" in email[1:-1]


def has_consecutive_spaces(value: str) -> bool:
    """True if the value has two or more adjacent spaces between its words."""
    return "  " in value.strip()
