"""
Field checker implementations.

Each field type has a corresponding checker. A checker looks at one extracted
value and returns every violation it finds, in a fixed order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from .models import FieldType
from .validators import (
    STATE_CODES,
    has_consecutive_spaces,
    is_blank,
    is_digits,
    is_valid_abn,
    is_valid_date,
    is_valid_email,
    is_valid_postcode,
    is_valid_state,
)

if TYPE_CHECKING:
    from .models import FieldSpec


class Violation(BaseModel, frozen=True):
    """A rule broken by a single field value."""

    code: str
    message: str
    context: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class FieldChecker(ABC):
    """Base class for field checkers."""

    @abstractmethod
    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        """
        Check a raw field value.

        Args:
            value: The extracted value, untrimmed
            spec: The field specification
            context: Scan context ("today", "records_processed")

        Returns:
            Violations in emission order, empty if valid
        """
        ...


class LiteralChecker(FieldChecker):
    """Value must equal the fixed literal exactly."""

    # Record-level markers report as structure issues
    STRUCTURE_CODES = {
        "record_length": "TPR-STR-001",
        "record_identifier": "TPR-STR-002",
    }

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        if value == spec.expected:
            return []
        code = self.STRUCTURE_CODES.get(spec.id, "TPR-FLD-006")
        return [
            Violation(
                code=code,
                message=f"{spec.label} must be '{spec.expected}', found '{value}'",
                context={"expected": spec.expected},
            )
        ]


class CodeChecker(FieldChecker):
    """Value must be one of the allowed codes."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        if not spec.required and is_blank(value):
            return []
        allowed = spec.values or []
        if value in allowed:
            return []
        return [
            Violation(
                code="TPR-FLD-007",
                message=f"{spec.label} '{value}' not in allowed values: {', '.join(allowed)}",
                context={"allowed": allowed},
            )
        ]


class AbnChecker(FieldChecker):
    """ABN checksum, skipped for the 'no ABN supplied' sentinel."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        if spec.sentinel is not None and value == spec.sentinel:
            return []
        if is_valid_abn(value):
            return []
        return [Violation(code="TPR-ABN-001", message=f"{spec.label} '{value}' is not a valid ABN")]


class DateChecker(FieldChecker):
    """DDMMYYYY calendar date."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        if is_valid_date(value):
            return []
        return [
            Violation(
                code="TPR-DATE-001",
                message=f"{spec.label} '{value}' is not a valid DDMMYYYY date",
            )
        ]


class YearChecker(FieldChecker):
    """Four-digit year between min_value and the current year."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        today: date = context.get("today") or date.today()
        lower = spec.min_value if spec.min_value is not None else 1
        upper = today.year

        if not is_digits(value):
            return [
                Violation(
                    code="TPR-YEAR-001",
                    message=f"{spec.label} '{value}' is not a year",
                )
            ]

        year = int(value)
        if lower <= year <= upper:
            return []
        return [
            Violation(
                code="TPR-YEAR-001",
                message=f"{spec.label} {year} must be between {lower} and {upper}",
                context={"min": lower, "max": upper},
            )
        ]


class StateChecker(FieldChecker):
    """State or territory code."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        if is_valid_state(value):
            return []
        allowed = ", ".join(sorted(STATE_CODES))
        return [
            Violation(
                code="TPR-ADDR-001",
                message=f"{spec.label} '{value.strip()}' is not one of {allowed}",
            )
        ]


class PostcodeChecker(FieldChecker):
    """Four-digit postcode."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        if is_valid_postcode(value):
            return []
        return [
            Violation(
                code="TPR-ADDR-002",
                message=f"{spec.label} '{value}' must be four digits",
            )
        ]


class EmailChecker(FieldChecker):
    """Optional email address."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        if is_valid_email(value):
            return []
        return [
            Violation(
                code="TPR-EMAIL-001",
                message=f"{spec.label} '{value.strip()}' is not a valid email address",
            )
        ]


class AlphaChecker(FieldChecker):
    """Mandatory text: not blank, no leading space."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        if is_blank(value):
            if not spec.required:
                return []
            return [Violation(code="TPR-FLD-001", message=f"{spec.label} is mandatory")]

        if value.startswith(" "):
            return [
                Violation(code="TPR-FLD-002", message=f"{spec.label} must not begin with a space")
            ]
        return []


class AlphanumericChecker(AlphaChecker):
    """Mandatory text that also warns about consecutive interior spaces."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        violations = super().check(value, spec, context)
        if not is_blank(value) and has_consecutive_spaces(value):
            violations.append(
                Violation(
                    code="TPR-FLD-003",
                    message=f"{spec.label} contains consecutive spaces: '{value.strip()}'",
                )
            )
        return violations


class NumericChecker(FieldChecker):
    """Digits only; zero rejected when the field disallows it."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        if not spec.required and is_blank(value):
            return []

        if not is_digits(value):
            return [
                Violation(
                    code="TPR-FLD-004",
                    message=f"{spec.label} '{value}' must contain digits only",
                )
            ]

        if not spec.allow_zero and int(value) == 0:
            return [Violation(code="TPR-FLD-005", message=f"{spec.label} must be greater than zero")]
        return []


class TextChecker(FieldChecker):
    """No field-level check; record rules decide."""

    def check(self, value: str, spec: FieldSpec, context: dict[str, Any]) -> list[Violation]:
        return []


# =============================================================================
# Checker Registry
# =============================================================================


class CheckerRegistry:
    """Registry of field checkers by field type."""

    _checkers: dict[FieldType, FieldChecker] = {}

    @classmethod
    def register(cls, field_type: FieldType, checker: FieldChecker) -> None:
        """Register a field checker."""
        cls._checkers[field_type] = checker

    @classmethod
    def get(cls, field_type: FieldType) -> FieldChecker | None:
        """Get checker for field type."""
        return cls._checkers.get(field_type)

    @classmethod
    def check(
        cls,
        value: str,
        spec: FieldSpec,
        context: dict[str, Any] | None = None,
    ) -> list[Violation]:
        """Check value against the field spec."""
        checker = cls.get(spec.type)
        if checker is None:
            raise KeyError(f"No checker registered for field type {spec.type.value!r}")
        return checker.check(value, spec, context or {})


# Register built-in checkers
CheckerRegistry.register(FieldType.LITERAL, LiteralChecker())
CheckerRegistry.register(FieldType.CODE, CodeChecker())
CheckerRegistry.register(FieldType.ABN, AbnChecker())
CheckerRegistry.register(FieldType.DATE, DateChecker())
CheckerRegistry.register(FieldType.YEAR, YearChecker())
CheckerRegistry.register(FieldType.STATE, StateChecker())
CheckerRegistry.register(FieldType.POSTCODE, PostcodeChecker())
CheckerRegistry.register(FieldType.EMAIL, EmailChecker())
CheckerRegistry.register(FieldType.ALPHA, AlphaChecker())
CheckerRegistry.register(FieldType.ALPHANUMERIC, AlphanumericChecker())
CheckerRegistry.register(FieldType.NUMERIC, NumericChecker())
CheckerRegistry.register(FieldType.TEXT, TextChecker())
