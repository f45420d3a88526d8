"""Customer service with validation, duplicate screening, and masking."""

from __future__ import annotations

import logging
from dataclasses import replace

from cekap_app.core.clock import Clock, utc_now
from cekap_app.core.crypto import mask_ic
from cekap_app.core.errors import DuplicateIdentityWarning, ValidationError
from cekap_app.core.validation import (
    IC_MIN_DIGITS,
    ic_digit_count,
    normalize_ic,
    normalize_phone,
    validate_email,
    validate_required_text,
)
from cekap_app.models.customer import Customer, CustomerCandidate, CustomerResolution, VehicleType
from cekap_app.repositories.customer_repository import CustomerRepository
from cekap_app.services.customer_matcher import duplicate_warning, resolve_or_create

logger = logging.getLogger(__name__)


class CustomerService:
    """Coordinates customer use cases."""

    def __init__(self, customer_repo: CustomerRepository, clock: Clock = utc_now):
        self._customer_repo = customer_repo
        self._clock = clock

    @staticmethod
    def _normalize(candidate: CustomerCandidate) -> CustomerCandidate:
        return replace(
            candidate,
            name=candidate.name.strip(),
            phone=normalize_phone(candidate.phone),
            ic=normalize_ic(candidate.ic),
            email=candidate.email.strip().lower(),
            vehicle_reg_no=candidate.vehicle_reg_no.strip().upper(),
        )

    @classmethod
    def _validate(cls, candidate: CustomerCandidate) -> CustomerCandidate:
        normalized = cls._normalize(candidate)
        validate_required_text(normalized.name, "Customer name")
        validate_required_text(normalized.phone, "Phone")
        validate_email(normalized.email)
        if not normalized.is_company:
            validate_required_text(normalized.ic, "IC number")
            if ic_digit_count(normalized.ic) < IC_MIN_DIGITS:
                raise ValidationError("IC number must have 12 digits.")

        if normalized.vehicle_type == VehicleType.MOTOR:
            if normalized.insurance_type is None:
                raise ValidationError("Policy type is required for motor insurance.")
            validate_required_text(normalized.vehicle_reg_no, "Vehicle registration number")
            return replace(normalized, others_category=None)

        validate_required_text(normalized.vehicle_reg_no, "Project name")
        return replace(normalized, insurance_type=None)

    def screen(self, candidate: CustomerCandidate) -> DuplicateIdentityWarning | None:
        """Return a duplicate warning for partially typed input, if any."""
        warning = duplicate_warning(self._normalize(candidate), self._customer_repo.list_customers())
        if warning:
            logger.info("Possible duplicate customer %s (%s)", warning.customer.id, warning.reason)
        return warning

    def prepare(self, candidate: CustomerCandidate) -> CustomerResolution:
        """Validate the candidate and decide which record it becomes, without writing."""
        validated = self._validate(candidate)
        return resolve_or_create(validated, self._customer_repo.list_customers(), self._clock)

    def resolve(self, candidate: CustomerCandidate) -> CustomerResolution:
        """Validate the candidate and persist it as a new or updated customer."""
        resolution = self.prepare(candidate)
        self.save(resolution)
        return resolution

    def save(self, resolution: CustomerResolution) -> None:
        if resolution.created:
            self._customer_repo.create_customer(resolution.customer)
            logger.info("Created customer %s", resolution.customer.id)
        else:
            self._customer_repo.update_customer(resolution.customer)
            logger.info("Updated customer %s", resolution.customer.id)

    def get_customer(self, customer_id: str) -> Customer | None:
        return self._customer_repo.get_customer(customer_id)

    def list_customers(self, reveal_sensitive: bool = False) -> list[Customer]:
        """List customers, masking IC numbers unless asked not to."""
        customers = self._customer_repo.list_customers()
        if reveal_sensitive:
            return customers
        return [replace(customer, ic=mask_ic(customer.ic)) for customer in customers]

    def search_customers(self, keyword: str, reveal_sensitive: bool = False) -> list[Customer]:
        """Match name, phone, IC, or registration number."""
        term = keyword.strip().casefold()
        if len(term) < 2:
            return []
        matches = [
            customer
            for customer in self._customer_repo.list_customers()
            if term in customer.name.casefold()
            or term in customer.phone
            or (customer.ic and term in customer.ic)
            or term in customer.vehicle_reg_no.casefold()
        ]
        if reveal_sensitive:
            return matches
        return [replace(customer, ic=mask_ic(customer.ic)) for customer in matches]

    def count_customers(self) -> int:
        return self._customer_repo.count_customers()
