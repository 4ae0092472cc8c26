"""
Rule Engine data models.

Core models for layouts, rules, issues and summaries.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from tpar_lint.core.parser.models import RecordKind

# =============================================================================
# Enums
# =============================================================================


class Severity(Enum):
    """Issue severity levels."""

    ERROR = "error"  # Specification violation, file will be rejected
    WARN = "warn"  # Soft compliance issue


class Category(Enum):
    """Rule categories."""

    LENGTH = "Length"
    STRUCTURE = "Structure"
    ORDER = "Order"
    FIELD = "Field"
    RECORD_COUNT = "RecordCount"
    NAME = "Name"
    GRANT = "Grant"


class Verdict(Enum):
    """Overall outcome, derived from issue counts only."""

    PASSED = "passed"
    PASSED_WITH_WARNINGS = "passed_with_warnings"
    FAILED = "failed"

    @property
    def label(self) -> str:
        return {
            Verdict.PASSED: "Passed",
            Verdict.PASSED_WITH_WARNINGS: "Passed with warnings",
            Verdict.FAILED: "Failed",
        }[self]


class FieldType(Enum):
    """Semantic field types, each backed by a field checker."""

    LITERAL = "literal"
    CODE = "code"
    ABN = "abn"
    DATE = "date"
    YEAR = "year"
    STATE = "state"
    POSTCODE = "postcode"
    EMAIL = "email"
    ALPHA = "alpha"
    ALPHANUMERIC = "alphanumeric"
    NUMERIC = "numeric"
    TEXT = "text"


# =============================================================================
# Layout Models
# =============================================================================


class FieldSpec(BaseModel, frozen=True):
    """Position and type of one field within a record."""

    id: str = Field(description="Field identifier, e.g., payee_abn")
    label: str = Field(description="Human-readable field name")
    start: int = Field(ge=1, description="1-based start column")
    length: int = Field(ge=1, description="Field width in characters")
    type: FieldType
    required: bool = Field(default=True, description="Blank value is a defect")

    # Type-specific parameters
    expected: str | None = Field(default=None, description="Fixed value for literal")
    values: list[str] | None = Field(default=None, description="Allowed codes")
    sentinel: str | None = Field(default=None, description="Value that skips the check")
    allow_zero: bool = Field(default=True, description="Numeric zero accepted")
    min_value: int | None = Field(default=None, description="Lower bound for year")

    model_config = {"frozen": True}

    @property
    def end(self) -> int:
        """Last column occupied (1-based, inclusive)."""
        return self.start + self.length - 1

    @model_validator(mode="after")
    def _check_parameters(self) -> FieldSpec:
        if self.type == FieldType.LITERAL:
            if self.expected is None:
                raise ValueError(f"literal field {self.id!r} needs 'expected'")
            if len(self.expected) != self.length:
                raise ValueError(f"literal for {self.id!r} does not fill its {self.length} columns")
        if self.type == FieldType.CODE and not self.values:
            raise ValueError(f"code field {self.id!r} needs 'values'")
        return self


class RecordLayout(BaseModel, frozen=True):
    """Field table for one record kind."""

    kind: RecordKind
    label: str
    fields: list[FieldSpec]

    model_config = {"frozen": True}

    def get_field(self, field_id: str) -> FieldSpec | None:
        """Get field spec by ID."""
        for spec in self.fields:
            if spec.id == field_id:
                return spec
        return None

    @property
    def width(self) -> int:
        """Last column used by any declared field."""
        return max(spec.end for spec in self.fields)


# =============================================================================
# Rule Model
# =============================================================================


class Rule(BaseModel, frozen=True):
    """Rule catalog entry."""

    id: str = Field(pattern=r"^TPR-[A-Z]{2,5}-\d{3}$", description="Rule code, e.g., TPR-ABN-001")
    title: str
    category: Category
    severity: Severity
    message: str
    description: str | None = None

    model_config = {"frozen": True}


# =============================================================================
# Issue Model
# =============================================================================


class Issue(BaseModel, frozen=True):
    """
    One defect found in the file.

    Issues are never mutated; their order is the scan order.
    """

    code: str = Field(description="Rule code that produced this issue")
    category: Category
    severity: Severity
    line_no: int = Field(ge=1, description="Line the issue refers to (1-indexed)")
    record_kind: RecordKind | None = Field(
        default=None,
        description="Record kind the line was validated as, None if unrecognised",
    )
    field: str | None = Field(default=None, description="Field label")
    message: str
    context: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def record_tag(self) -> str | None:
        """Literal tag of the record kind."""
        return self.record_kind.tag if self.record_kind else None

    def __str__(self) -> str:
        parts = [f"line {self.line_no}"]
        if self.record_kind:
            parts.append(self.record_kind.tag)
        if self.field:
            parts.append(self.field)
        where = ", ".join(parts)
        return f"[{self.code}] {self.severity.value.upper()} ({where}): {self.message}"


# =============================================================================
# Summary Model
# =============================================================================


class ValidationSummary(BaseModel):
    """Summary of a validation run."""

    file: str
    encoding: str
    line_count: int
    records_processed: int
    payee_count: int

    engine_version: str
    layout_version: str

    error_count: int = 0
    warn_count: int = 0

    verdict: Verdict
    stopped_at_line: int | None = None

    top_codes: list[tuple[str, int]] = Field(default_factory=list)
    duration_ms: int = 0

    @property
    def total_issues(self) -> int:
        """Total number of issues."""
        return self.error_count + self.warn_count

    @property
    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return self.error_count > 0
