"""Builds normalized documents from operator drafts.

Assembly is pure: it validates the draft, computes the total once and
snapshots the customer's name and identity-card number. Numbering and
persistence happen afterwards in ``DocumentService``.
"""

from __future__ import annotations

from decimal import Decimal

from cekap_app.core.errors import ValidationError
from cekap_app.core.validation import (
    normalize_service_charge,
    parse_amount,
    validate_amount,
    validate_required_text,
)
from cekap_app.models.customer import Customer, OthersCategory, VehicleType
from cekap_app.models.document import (
    Coverage,
    Document,
    DocumentDraft,
    MotorCoverage,
    OthersEntriesCoverage,
    OthersEntry,
    OthersSingleCoverage,
    coverage_total,
)
from cekap_app.models.staff import StaffContext

DEFAULT_NOTES = "Standard policy terms apply."


def resolve_notes(suggestion: str | None) -> str:
    """Use a generated note when one arrived, otherwise the static default."""
    text = (suggestion or "").strip()
    return text or DEFAULT_NOTES


def _parse_category(value: OthersCategory | str | None) -> OthersCategory:
    if isinstance(value, OthersCategory):
        return value
    if not value:
        raise ValidationError("Each entry needs a category.")
    try:
        return OthersCategory(value)
    except ValueError as error:
        raise ValidationError(f"Unknown category: {value}") from error


def _build_coverage(draft: DocumentDraft, customer: Customer) -> Coverage:
    if draft.vehicle_type == VehicleType.MOTOR:
        insurance_type = draft.insurance_type or customer.insurance_type
        if insurance_type is None:
            raise ValidationError("Policy type is required for motor insurance.")
        amount = validate_amount(parse_amount(draft.amount, "Amount"))
        return MotorCoverage(insurance_type=insurance_type, amount=amount)

    if draft.others_entries:
        entries: list[OthersEntry] = []
        for category, amount in draft.others_entries:
            entries.append(
                OthersEntry(
                    category=_parse_category(category),
                    amount=validate_amount(parse_amount(amount, "Entry amount"), "Entry amount"),
                )
            )
        return OthersEntriesCoverage(entries=tuple(entries))

    if draft.others_category is not None:
        amount = validate_amount(parse_amount(draft.amount, "Amount"))
        return OthersSingleCoverage(category=_parse_category(draft.others_category), amount=amount)

    raise ValidationError("At least one category with an amount is required.")


def assemble(
    draft: DocumentDraft,
    customer: Customer,
    staff: StaffContext,
    suggested_notes: str | None = None,
) -> Document:
    """Validate a draft and return an unnumbered, unsaved document."""
    issued_company = validate_required_text(draft.issued_company, "Insurance company")
    coverage = _build_coverage(draft, customer)
    service_charge = normalize_service_charge(draft.service_charge)
    total = validate_amount(coverage_total(coverage) + service_charge, "Total amount")

    if draft.use_suggested_notes:
        notes = resolve_notes(suggested_notes)
    else:
        notes = draft.insurance_details.strip()

    return Document(
        id="",
        doc_number="",
        doc_type=draft.doc_type,
        customer_id=customer.id,
        customer_name=customer.name,
        customer_ic=customer.ic,
        issued_company=issued_company,
        date=draft.issue_date.isoformat(),
        amount=total,
        insurance_details=notes,
        remarks=draft.remarks.strip(),
        staff_id=staff.id,
        staff_name=staff.name,
        vehicle_type=draft.vehicle_type,
        coverage=coverage,
        service_charge=service_charge if service_charge > Decimal("0") else None,
    )
