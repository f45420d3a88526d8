"""Detects and repairs invoices left half-paid by an interrupted payment."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cekap_app.models.document import DocType, PaymentPatch
from cekap_app.repositories.document_repository import DocumentRepository
from cekap_app.services.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)

RECEIPT_WITHOUT_PAYMENT = "receipt_without_payment"
PAYMENT_WITHOUT_RECEIPT = "payment_without_receipt"


@dataclass(frozen=True)
class Drift:
    kind: str
    invoice_id: str
    invoice_doc_number: str
    receipt_id: str | None
    receipt_doc_number: str | None
    receipt_date: str | None = None

    @property
    def repairable(self) -> bool:
        return self.kind == RECEIPT_WITHOUT_PAYMENT


class ReconciliationService:
    def __init__(self, document_repo: DocumentRepository, activity_logger: ActivityLogger):
        self._document_repo = document_repo
        self._activity_logger = activity_logger

    def find_drift(self) -> list[Drift]:
        drift: list[Drift] = []
        for invoice in self._document_repo.list_documents(doc_type=DocType.INVOICE):
            if not invoice.is_paid:
                receipt = self._document_repo.find_settlement_receipt(invoice.id)
                if receipt is not None:
                    drift.append(
                        Drift(
                            kind=RECEIPT_WITHOUT_PAYMENT,
                            invoice_id=invoice.id,
                            invoice_doc_number=invoice.doc_number,
                            receipt_id=receipt.id,
                            receipt_doc_number=receipt.doc_number,
                            receipt_date=receipt.date,
                        )
                    )
            elif invoice.receipt_id and self._document_repo.get_document(invoice.receipt_id) is None:
                drift.append(
                    Drift(
                        kind=PAYMENT_WITHOUT_RECEIPT,
                        invoice_id=invoice.id,
                        invoice_doc_number=invoice.doc_number,
                        receipt_id=invoice.receipt_id,
                        receipt_doc_number=invoice.receipt_doc_number,
                    )
                )
        for item in drift:
            logger.warning("Payment drift %s on %s", item.kind, item.invoice_doc_number)
        return drift

    def repair(self, staff_name: str) -> list[Drift]:
        """Link orphaned settlement receipts to their invoices; return what was fixed.

        Invoices marked paid whose receipt is missing are only reported.
        """
        repaired: list[Drift] = []
        for item in self.find_drift():
            if not item.repairable:
                continue
            patch = PaymentPatch(
                paid_at=item.receipt_date or "",
                receipt_id=item.receipt_id or "",
                receipt_doc_number=item.receipt_doc_number or "",
            )
            if self._document_repo.update_payment(item.invoice_id, patch):
                repaired.append(item)
                self._activity_logger.record(
                    staff_name,
                    f"Repaired payment link ({item.receipt_doc_number})",
                    item.invoice_doc_number,
                )
        return repaired
