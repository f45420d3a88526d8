"""Invoice and receipt domain models."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Union

from cekap_app.models.customer import InsuranceType, OthersCategory, VehicleType


class DocType(str, Enum):
    INVOICE = "Invoice"
    RECEIPT = "Receipt"


@dataclass(frozen=True)
class OthersEntry:
    """One category with its own insurance amount."""

    category: OthersCategory
    amount: Decimal


@dataclass(frozen=True)
class MotorCoverage:
    insurance_type: InsuranceType
    amount: Decimal


@dataclass(frozen=True)
class OthersSingleCoverage:
    category: OthersCategory
    amount: Decimal


@dataclass(frozen=True)
class OthersEntriesCoverage:
    entries: tuple[OthersEntry, ...]


Coverage = Union[MotorCoverage, OthersSingleCoverage, OthersEntriesCoverage]


def coverage_total(coverage: Coverage) -> Decimal:
    """Sum the coverage line items."""
    if isinstance(coverage, OthersEntriesCoverage):
        return sum((entry.amount for entry in coverage.entries), Decimal("0.00"))
    return coverage.amount


def coverage_vehicle_type(coverage: Coverage) -> VehicleType:
    if isinstance(coverage, MotorCoverage):
        return VehicleType.MOTOR
    return VehicleType.OTHERS


@dataclass(frozen=True)
class DocumentDraft:
    """Operator input for an invoice or receipt before assembly."""

    doc_type: DocType
    issued_company: str
    issue_date: date
    vehicle_type: VehicleType
    amount: str | Decimal | None = None
    insurance_type: InsuranceType | None = None
    others_category: OthersCategory | None = None
    others_entries: list[tuple[OthersCategory | str | None, str | Decimal | None]] = field(
        default_factory=list
    )
    service_charge: str | Decimal | None = None
    insurance_details: str = ""
    remarks: str = ""
    use_suggested_notes: bool = False


@dataclass(frozen=True)
class Document:
    """Issued business record. Only payment fields ever change after creation."""

    id: str
    doc_number: str
    doc_type: DocType
    customer_id: str
    customer_name: str
    customer_ic: str
    issued_company: str
    date: str
    amount: Decimal
    insurance_details: str
    remarks: str
    staff_id: str
    staff_name: str
    vehicle_type: VehicleType
    coverage: Coverage | None = None
    service_charge: Decimal | None = None
    attachment_url: str | None = None
    invoice_id: str | None = None
    paid_at: str | None = None
    receipt_id: str | None = None
    receipt_doc_number: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.paid_at is not None


@dataclass(frozen=True)
class PaymentPatch:
    """The complete set of document fields that may be written after issuance."""

    paid_at: str
    receipt_id: str
    receipt_doc_number: str


PAYMENT_FIELDS = frozenset(item.name for item in fields(PaymentPatch))
