"""Customer domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class VehicleType(str, Enum):
    MOTOR = "Motor"
    OTHERS = "Others"


class InsuranceType(str, Enum):
    COMPREHENSIVE = "Comprehensive"
    THIRD_PARTY = "Third Party"
    THEFT_AND_FIRE = "Theft & Fire"


class OthersCategory(str, Enum):
    PUBLIC_LIABILITY = "Public Liability"
    CONTRACTOR_ALL_RISK = "Contractor All Risk"
    WORKMENS_COMPENSATION = "Workmen's Compensation"
    BOND = "Bond"


@dataclass(frozen=True)
class Customer:
    """Stored identity record for a person or company."""

    id: str
    name: str
    phone: str
    ic: str
    email: str
    is_company: bool
    vehicle_type: VehicleType
    vehicle_reg_no: str
    insurance_type: InsuranceType | None
    others_category: OthersCategory | None
    last_updated: str


@dataclass(frozen=True)
class CustomerCandidate:
    """Customer details as entered by the operator for a new document.

    customer_id is set when the operator picked an existing record.
    """

    name: str
    phone: str
    ic: str
    email: str = ""
    is_company: bool = False
    vehicle_type: VehicleType = VehicleType.MOTOR
    vehicle_reg_no: str = ""
    insurance_type: InsuranceType | None = InsuranceType.COMPREHENSIVE
    others_category: OthersCategory | None = None
    customer_id: str | None = None


@dataclass(frozen=True)
class CustomerResolution:
    """Outcome of matching a candidate against the customer list."""

    customer: Customer
    created: bool
