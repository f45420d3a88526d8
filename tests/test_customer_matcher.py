"""Tests for duplicate detection and customer resolution."""

from datetime import datetime, timezone

import pytest

from cekap_app.core.errors import InvalidStateError, ValidationError
from cekap_app.models.customer import Customer, CustomerCandidate, InsuranceType, VehicleType
from cekap_app.services.customer_matcher import (
    duplicate_warning,
    find_duplicate,
    resolve_or_create,
)

NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def clock() -> datetime:
    return NOW


def make_customer(**overrides) -> Customer:
    values = {
        "id": "c-1",
        "name": "John Tan",
        "phone": "+6012-3456789",
        "ic": "900101-10-1234",
        "email": "",
        "is_company": False,
        "vehicle_type": VehicleType.MOTOR,
        "vehicle_reg_no": "WXY 1234",
        "insurance_type": InsuranceType.COMPREHENSIVE,
        "others_category": None,
        "last_updated": "2024-01-01T00:00:00+00:00",
    }
    values.update(overrides)
    return Customer(**values)


def test_warning_on_exact_ic_match() -> None:
    existing = [make_customer()]
    warning = duplicate_warning(CustomerCandidate(name="J", phone="", ic="900101-10-1234"), existing)

    assert warning is not None
    assert warning.reason == "ic"
    assert warning.customer.id == "c-1"


def test_partial_ic_does_not_warn() -> None:
    existing = [make_customer()]
    assert duplicate_warning(CustomerCandidate(name="Jo", phone="", ic="900101-10"), existing) is None


def test_warning_on_case_insensitive_name() -> None:
    existing = [make_customer()]
    warning = duplicate_warning(CustomerCandidate(name="john tan", phone="", ic=""), existing)

    assert warning is not None
    assert warning.reason == "name"


def test_short_names_do_not_warn() -> None:
    existing = [make_customer(name="Ali")]
    assert find_duplicate(CustomerCandidate(name="Ali", phone="", ic=""), existing) is None


def test_company_skips_ic_check() -> None:
    existing = [make_customer(ic="900101-10-1234")]
    candidate = CustomerCandidate(name="Maju Sdn Bhd", phone="", ic="900101-10-1234", is_company=True)
    assert duplicate_warning(candidate, existing) is None


def test_linked_candidate_is_not_screened() -> None:
    existing = [make_customer()]
    candidate = CustomerCandidate(name="John Tan", phone="", ic="", customer_id="c-1")
    assert duplicate_warning(candidate, existing) is None


def test_resolve_links_on_ic_and_refreshes_details() -> None:
    existing = [make_customer()]
    candidate = CustomerCandidate(
        name="John Tan Ah Kow",
        phone="+6019-8887777",
        ic="900101-10-1234",
        vehicle_reg_no="ABC 9",
        insurance_type=InsuranceType.THIRD_PARTY,
    )

    resolution = resolve_or_create(candidate, existing, clock)

    assert resolution.created is False
    assert resolution.customer.id == "c-1"
    assert resolution.customer.name == "John Tan Ah Kow"
    assert resolution.customer.phone == "+6019-8887777"
    assert resolution.customer.vehicle_reg_no == "ABC 9"
    assert resolution.customer.insurance_type == InsuranceType.THIRD_PARTY
    assert resolution.customer.last_updated == NOW.isoformat()


def test_resolve_links_on_name_and_phone() -> None:
    existing = [make_customer(ic="")]
    candidate = CustomerCandidate(name="JOHN TAN", phone="+6012-3456789", ic="")

    resolution = resolve_or_create(candidate, existing, clock)

    assert resolution.created is False
    assert resolution.customer.id == "c-1"


def test_same_name_different_phone_creates_new_customer() -> None:
    existing = [make_customer(ic="")]
    candidate = CustomerCandidate(name="John Tan", phone="+6011-1111111", ic="")

    resolution = resolve_or_create(candidate, existing, clock, id_factory=lambda: "c-2")

    assert resolution.created is True
    assert resolution.customer.id == "c-2"
    assert resolution.customer.last_updated == NOW.isoformat()


def test_selected_customer_must_exist() -> None:
    candidate = CustomerCandidate(name="John Tan", phone="", ic="", customer_id="gone")
    with pytest.raises(InvalidStateError):
        resolve_or_create(candidate, [make_customer()], clock)


def test_selected_customer_keeps_name() -> None:
    candidate = CustomerCandidate(
        name="Johnny",
        phone="+6012-0000000",
        ic="900101-10-1234",
        customer_id="c-1",
    )
    resolution = resolve_or_create(candidate, [make_customer()], clock)

    assert resolution.customer.name == "John Tan"
    assert resolution.customer.phone == "+6012-0000000"


def test_ic_match_wins_over_earlier_name_and_phone_match() -> None:
    existing = [
        make_customer(id="a"),
        make_customer(id="b", name="Mary Lee", phone="+6017-1234567", ic="850505-05-5555"),
    ]
    candidate = CustomerCandidate(name="John Tan", phone="+6012-3456789", ic="850505-05-5555")

    resolution = resolve_or_create(candidate, existing, clock)

    assert resolution.created is False
    assert resolution.customer.id == "b"
    assert resolution.customer.ic == "850505-05-5555"


def test_selected_customer_cannot_take_another_customers_ic() -> None:
    existing = [
        make_customer(id="a"),
        make_customer(id="b", name="Mary Lee", phone="+6017-1234567", ic="850505-05-5555"),
    ]
    candidate = CustomerCandidate(
        name="John Tan",
        phone="+6012-3456789",
        ic="850505-05-5555",
        customer_id="a",
    )

    with pytest.raises(ValidationError):
        resolve_or_create(candidate, existing, clock)
