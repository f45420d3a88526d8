"""Duplicate detection and resolution for customer identities.

Two checks run against the current customer list:

* ``find_duplicate`` is the advisory check used while the operator types.
  It returns the first plausible match so the UI can offer to link the
  existing record.
* ``resolve_or_create`` is the authoritative check at finalize time. It
  links on an exact identity-card match anywhere in the list, then on a
  case-insensitive name match together with an exact phone match, and
  otherwise creates a new record. An identity-card number never ends up on
  two customers.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Callable, Iterable

from cekap_app.core.clock import Clock
from cekap_app.core.errors import DuplicateIdentityWarning, InvalidStateError, ValidationError
from cekap_app.models.customer import Customer, CustomerCandidate, CustomerResolution

IC_MATCH_MIN_LENGTH = 12
NAME_MATCH_MIN_LENGTH = 4


def _same_name(left: str, right: str) -> bool:
    return left.strip().casefold() == right.strip().casefold()


def duplicate_warning(
    candidate: CustomerCandidate,
    existing: Iterable[Customer],
) -> DuplicateIdentityWarning | None:
    """Return an advisory warning for the first plausible match, if any."""
    if candidate.customer_id:
        return None

    customers = list(existing)
    if not candidate.is_company and len(candidate.ic) >= IC_MATCH_MIN_LENGTH:
        for customer in customers:
            if customer.ic == candidate.ic:
                return DuplicateIdentityWarning(customer, "ic")

    if len(candidate.name) >= NAME_MATCH_MIN_LENGTH:
        for customer in customers:
            if _same_name(customer.name, candidate.name):
                return DuplicateIdentityWarning(customer, "name")

    return None


def find_duplicate(candidate: CustomerCandidate, existing: Iterable[Customer]) -> Customer | None:
    """Return the existing customer the candidate most likely duplicates."""
    warning = duplicate_warning(candidate, existing)
    return warning.customer if warning else None


def _ic_owner(ic: str, customers: list[Customer]) -> Customer | None:
    if not ic:
        return None
    return next((c for c in customers if c.ic == ic), None)


def _strict_match(candidate: CustomerCandidate, customers: list[Customer]) -> Customer | None:
    # identity-card matches take precedence over name and phone
    owner = _ic_owner(candidate.ic, customers)
    if owner is not None:
        return owner
    for customer in customers:
        if _same_name(customer.name, candidate.name) and customer.phone == candidate.phone:
            return customer
    return None


def resolve_or_create(
    candidate: CustomerCandidate,
    existing: Iterable[Customer],
    clock: Clock,
    id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
) -> CustomerResolution:
    """Resolve the candidate to an updated existing customer or a new one.

    The returned customer carries the candidate's contact and policy details
    and a fresh ``last_updated`` timestamp; persisting it is the caller's job.
    """
    customers = list(existing)
    now = clock().isoformat()

    if candidate.customer_id:
        selected = next((c for c in customers if c.id == candidate.customer_id), None)
        if selected is None:
            raise InvalidStateError(f"Customer {candidate.customer_id} no longer exists.")
        owner = _ic_owner(candidate.ic, customers)
        if owner is not None and owner.id != selected.id:
            raise ValidationError(
                f"IC number {candidate.ic} already belongs to customer {owner.name}."
            )
        updated = replace(
            selected,
            phone=candidate.phone,
            ic=candidate.ic,
            vehicle_reg_no=candidate.vehicle_reg_no,
            insurance_type=candidate.insurance_type,
            others_category=candidate.others_category,
            last_updated=now,
        )
        return CustomerResolution(customer=updated, created=False)

    match = _strict_match(candidate, customers)
    if match is not None:
        updated = replace(
            match,
            name=candidate.name,
            phone=candidate.phone,
            ic=candidate.ic,
            vehicle_reg_no=candidate.vehicle_reg_no,
            insurance_type=candidate.insurance_type,
            others_category=candidate.others_category,
            last_updated=now,
        )
        return CustomerResolution(customer=updated, created=False)

    created = Customer(
        id=id_factory(),
        name=candidate.name,
        phone=candidate.phone,
        ic=candidate.ic,
        email=candidate.email,
        is_company=candidate.is_company,
        vehicle_type=candidate.vehicle_type,
        vehicle_reg_no=candidate.vehicle_reg_no,
        insurance_type=candidate.insurance_type,
        others_category=candidate.others_category,
        last_updated=now,
    )
    return CustomerResolution(customer=created, created=True)
