"""
Record-type validators.

One validator per record kind. Each extracts its declared fields by fixed
offsets, runs the field checker for every field, then applies the rules that
span several fields of the record. No check is skipped because another field
failed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from tpar_lint.core.parser.extract import extract_field
from tpar_lint.core.parser.models import RecordKind

from .checks import CheckerRegistry
from .validators import is_blank, is_digits, is_valid_date

if TYPE_CHECKING:
    from tpar_lint.core.parser.models import Record

    from .models import RecordLayout
    from .registry import RuleRegistry
    from .report import ValidationReport

# Payee grant date placeholder for non-grant payments
NO_GRANT_DATE = "00000000"


class RecordValidator:
    """Generic layout-driven validator; subclasses add record rules."""

    kind: ClassVar[RecordKind]

    def __init__(self, registry: RuleRegistry) -> None:
        self.registry = registry
        self.layout: RecordLayout = registry.require_layout(self.kind)

    def extract(self, record: Record) -> dict[str, str]:
        """Extract every declared field of the record."""
        return {
            spec.id: extract_field(record.content, spec.start, spec.length)
            for spec in self.layout.fields
        }

    def validate(
        self,
        record: Record,
        report: ValidationReport,
        context: dict[str, Any],
    ) -> dict[str, str]:
        """
        Validate one record, appending issues to the report.

        Returns:
            The extracted field values
        """
        values = self.extract(record)

        for spec in self.layout.fields:
            value = values[spec.id]
            for violation in CheckerRegistry.check(value, spec, context):
                report.report(
                    self.registry.require_rule(violation.code),
                    record.line_no,
                    violation.message,
                    record_kind=self.kind,
                    field=spec.label,
                    context={"raw_value": value, "column": spec.start, **violation.context},
                )

        self.check_record(record, values, report, context)
        return values

    def check_record(
        self,
        record: Record,
        values: dict[str, str],
        report: ValidationReport,
        context: dict[str, Any],
    ) -> None:
        """Cross-field rules; none by default."""

    def _report(
        self,
        report: ValidationReport,
        code: str,
        record: Record,
        field_id: str | None,
        message: str,
        **context: Any,
    ) -> None:
        label = None
        if field_id is not None:
            spec = self.layout.get_field(field_id)
            label = spec.label if spec else field_id
        report.report(
            self.registry.require_rule(code),
            record.line_no,
            message,
            record_kind=self.kind,
            field=label,
            context=context,
        )


class Sender1Validator(RecordValidator):
    kind = RecordKind.SENDER_1


class Sender2Validator(RecordValidator):
    kind = RecordKind.SENDER_2


class Sender3Validator(RecordValidator):
    kind = RecordKind.SENDER_3


class IdentityValidator(RecordValidator):
    kind = RecordKind.IDENTITY


class SoftwareValidator(RecordValidator):
    kind = RecordKind.SOFTWARE


class PayeeValidator(RecordValidator):
    """
    Payee (DPAIVS) record.

    Adds the payee name rule and the grant rules, which depend on the
    payment type.
    """

    kind = RecordKind.PAYEE

    def check_record(
        self,
        record: Record,
        values: dict[str, str],
        report: ValidationReport,
        context: dict[str, Any],
    ) -> None:
        self._check_name(record, values, report)
        self._check_grant(record, values, report)

    def _check_name(
        self,
        record: Record,
        values: dict[str, str],
        report: ValidationReport,
    ) -> None:
        has_business = not is_blank(values["business_name"])
        has_person = not is_blank(values["surname"]) and not is_blank(values["first_name"])
        if has_business or has_person:
            return

        self._report(
            report,
            "TPR-NAME-001",
            record,
            "business_name",
            "Payee needs a business name, or both a surname and a first given name",
            surname=values["surname"].strip(),
            first_name=values["first_name"].strip(),
        )

    def _check_grant(
        self,
        record: Record,
        values: dict[str, str],
        report: ValidationReport,
    ) -> None:
        payment_type = values["payment_type"]
        grant_date = values["grant_date"]
        grant_name = values["grant_name"]

        if payment_type == "G":
            if not is_valid_date(grant_date):
                self._report(
                    report,
                    "TPR-GRANT-001",
                    record,
                    "grant_date",
                    f"Grant paid date '{grant_date}' is not a valid DDMMYYYY date",
                    raw_value=grant_date,
                )
            if is_blank(grant_name):
                self._report(
                    report,
                    "TPR-GRANT-002",
                    record,
                    "grant_name",
                    "Grant name is mandatory for grant payments",
                )

        elif payment_type == "P":
            if grant_date != NO_GRANT_DATE:
                self._report(
                    report,
                    "TPR-GRANT-003",
                    record,
                    "grant_date",
                    f"Grant paid date should be {NO_GRANT_DATE} for payment type P, "
                    f"found '{grant_date}'",
                    raw_value=grant_date,
                )
            if not is_blank(grant_name):
                self._report(
                    report,
                    "TPR-GRANT-004",
                    record,
                    "grant_name",
                    f"Grant name should be blank for payment type P, found '{grant_name.strip()}'",
                    raw_value=grant_name,
                )


class FileTotalValidator(RecordValidator):
    """File-Total record: reconciles the embedded record count."""

    kind = RecordKind.FILE_TOTAL

    def check_record(
        self,
        record: Record,
        values: dict[str, str],
        report: ValidationReport,
        context: dict[str, Any],
    ) -> None:
        raw_count = values["record_count"]
        processed = context["records_processed"]

        if not is_digits(raw_count):
            self._report(
                report,
                "TPR-CNT-001",
                record,
                "record_count",
                f"Number of records '{raw_count}' is not numeric, {processed} records processed",
                raw_value=raw_count,
                actual=processed,
            )
            return

        declared = int(raw_count)
        if declared != processed:
            self._report(
                report,
                "TPR-CNT-001",
                record,
                "record_count",
                f"Number of records is {declared}, but {processed} records were processed",
                raw_value=raw_count,
                declared=declared,
                actual=processed,
            )


VALIDATOR_CLASSES: tuple[type[RecordValidator], ...] = (
    Sender1Validator,
    Sender2Validator,
    Sender3Validator,
    IdentityValidator,
    SoftwareValidator,
    PayeeValidator,
    FileTotalValidator,
)


def build_validators(registry: RuleRegistry) -> dict[RecordKind, RecordValidator]:
    """Instantiate one validator per record kind."""
    return {cls.kind: cls(registry) for cls in VALIDATOR_CLASSES}
