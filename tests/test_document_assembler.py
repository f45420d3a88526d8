"""Tests for turning drafts into documents."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from cekap_app.core.errors import ValidationError
from cekap_app.models.customer import Customer, InsuranceType, OthersCategory, VehicleType
from cekap_app.models.document import (
    DocType,
    DocumentDraft,
    MotorCoverage,
    OthersEntriesCoverage,
    OthersSingleCoverage,
)
from cekap_app.models.staff import StaffContext, StaffRole
from cekap_app.services.document_assembler import DEFAULT_NOTES, assemble, resolve_notes

STAFF = StaffContext(id="aina@cekapguard.com", name="aina", role=StaffRole.STAFF)
CUSTOMER = Customer(
    id="c-1",
    name="John Tan",
    phone="+6012-3456789",
    ic="900101-10-1234",
    email="",
    is_company=False,
    vehicle_type=VehicleType.MOTOR,
    vehicle_reg_no="WXY 1234",
    insurance_type=InsuranceType.COMPREHENSIVE,
    others_category=None,
    last_updated="2024-05-01T09:30:00+00:00",
)


def draft(**overrides) -> DocumentDraft:
    values = {
        "doc_type": DocType.INVOICE,
        "issued_company": "Allianz",
        "issue_date": date(2024, 5, 1),
        "vehicle_type": VehicleType.MOTOR,
        "amount": "1200",
        "insurance_type": InsuranceType.COMPREHENSIVE,
        "service_charge": "50",
    }
    values.update(overrides)
    return DocumentDraft(**values)


def test_motor_total_includes_service_charge() -> None:
    document = assemble(draft(), CUSTOMER, STAFF)

    assert document.amount == Decimal("1250.00")
    assert document.service_charge == Decimal("50.00")
    assert document.coverage == MotorCoverage(InsuranceType.COMPREHENSIVE, Decimal("1200.00"))
    assert document.customer_name == "John Tan"
    assert document.customer_ic == "900101-10-1234"
    assert document.date == "2024-05-01"
    assert document.staff_id == STAFF.id
    assert document.id == ""
    assert document.doc_number == ""


def test_others_entries_are_summed() -> None:
    document = assemble(
        draft(
            vehicle_type=VehicleType.OTHERS,
            amount=None,
            insurance_type=None,
            service_charge=None,
            others_entries=[
                ("Public Liability", "500"),
                (OthersCategory.BOND, Decimal("300")),
            ],
        ),
        CUSTOMER,
        STAFF,
    )

    assert document.amount == Decimal("800.00")
    assert isinstance(document.coverage, OthersEntriesCoverage)
    assert [entry.category for entry in document.coverage.entries] == [
        OthersCategory.PUBLIC_LIABILITY,
        OthersCategory.BOND,
    ]
    assert document.service_charge is None


def test_single_others_category() -> None:
    document = assemble(
        draft(
            vehicle_type=VehicleType.OTHERS,
            insurance_type=None,
            others_category=OthersCategory.CONTRACTOR_ALL_RISK,
            amount="2000",
            service_charge="",
        ),
        CUSTOMER,
        STAFF,
    )

    assert document.coverage == OthersSingleCoverage(
        OthersCategory.CONTRACTOR_ALL_RISK, Decimal("2000.00")
    )
    assert document.amount == Decimal("2000.00")


def test_entry_without_category_is_rejected() -> None:
    with pytest.raises(ValidationError):
        assemble(
            draft(vehicle_type=VehicleType.OTHERS, others_entries=[(None, "500")]),
            CUSTOMER,
            STAFF,
        )


def test_others_without_any_category_is_rejected() -> None:
    with pytest.raises(ValidationError):
        assemble(draft(vehicle_type=VehicleType.OTHERS, insurance_type=None), CUSTOMER, STAFF)


def test_zero_service_charge_is_omitted() -> None:
    document = assemble(draft(service_charge="0"), CUSTOMER, STAFF)

    assert document.service_charge is None
    assert document.amount == Decimal("1200.00")


@pytest.mark.parametrize("amount", ["", "abc", "-5", "100000001", "1e26", "1e30"])
def test_invalid_amounts_are_rejected(amount: str) -> None:
    with pytest.raises(ValidationError):
        assemble(draft(amount=amount), CUSTOMER, STAFF)


def test_insurance_company_is_required() -> None:
    with pytest.raises(ValidationError):
        assemble(draft(issued_company="  "), CUSTOMER, STAFF)


def test_motor_needs_a_policy_type() -> None:
    customer = replace(CUSTOMER, insurance_type=None)
    with pytest.raises(ValidationError):
        assemble(draft(insurance_type=None), customer, STAFF)


def test_suggested_notes_fall_back_to_default() -> None:
    document = assemble(draft(use_suggested_notes=True), CUSTOMER, STAFF, suggested_notes=None)
    assert document.insurance_details == DEFAULT_NOTES

    document = assemble(
        draft(use_suggested_notes=True),
        CUSTOMER,
        STAFF,
        suggested_notes="Covers own damage and third party liability.",
    )
    assert document.insurance_details == "Covers own damage and third party liability."


def test_typed_notes_are_kept() -> None:
    document = assemble(draft(insurance_details="  NCD 55%  "), CUSTOMER, STAFF)
    assert document.insurance_details == "NCD 55%"


def test_resolve_notes() -> None:
    assert resolve_notes("   ") == DEFAULT_NOTES
    assert resolve_notes(" Valid for 12 months. ") == "Valid for 12 months."
