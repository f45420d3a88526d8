"""Open -> Paid transition for invoices.

Paying an invoice issues a settlement receipt for the invoice total and
stamps the invoice with the payment time and the receipt reference. The
receipt insert and the invoice update run inside one store transaction when
the store offers one; otherwise a failure between them is reported as a
``PartialEffectError`` so ``ReconciliationService`` can repair the drift.
The activity entry is written afterwards and never affects the outcome.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import nullcontext
from dataclasses import dataclass, replace
from typing import Callable, ContextManager, Protocol

from cekap_app.core.clock import Clock, utc_now
from cekap_app.core.errors import InvalidStateError, PartialEffectError, PersistenceError
from cekap_app.models.document import DocType, Document, PaymentPatch
from cekap_app.models.settings import SystemConfig
from cekap_app.models.staff import StaffContext
from cekap_app.repositories.document_repository import DocumentRepository
from cekap_app.services.activity_logger import ActivityLogger
from cekap_app.services.identifiers import generate_doc_number

logger = logging.getLogger(__name__)


class TransactionalStore(Protocol):
    supports_transactions: bool

    def transaction(self) -> ContextManager[None]:
        ...


@dataclass(frozen=True)
class PaymentPlan:
    receipt: Document
    patch: PaymentPatch
    paid_invoice: Document


def plan_payment(
    invoice: Document,
    staff: StaffContext,
    config: SystemConfig,
    clock: Clock,
    id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
) -> PaymentPlan:
    """Build the settlement receipt and payment patch without writing anything."""
    if invoice.doc_type != DocType.INVOICE:
        raise InvalidStateError(f"{invoice.doc_number} is not an invoice.")
    if invoice.is_paid:
        raise InvalidStateError(f"{invoice.doc_number} was already paid on {invoice.paid_at}.")

    now = clock()
    receipt = Document(
        id=id_factory(),
        doc_number=generate_doc_number(DocType.RECEIPT, config, lambda: now),
        doc_type=DocType.RECEIPT,
        customer_id=invoice.customer_id,
        customer_name=invoice.customer_name,
        customer_ic=invoice.customer_ic,
        issued_company=invoice.issued_company,
        date=now.date().isoformat(),
        amount=invoice.amount,
        insurance_details=invoice.insurance_details,
        remarks=f"Payment for {invoice.doc_number}",
        staff_id=staff.id,
        staff_name=staff.name,
        vehicle_type=invoice.vehicle_type,
        invoice_id=invoice.id,
    )
    patch = PaymentPatch(
        paid_at=now.isoformat(),
        receipt_id=receipt.id,
        receipt_doc_number=receipt.doc_number,
    )
    paid_invoice = replace(
        invoice,
        paid_at=patch.paid_at,
        receipt_id=patch.receipt_id,
        receipt_doc_number=patch.receipt_doc_number,
    )
    return PaymentPlan(receipt=receipt, patch=patch, paid_invoice=paid_invoice)


class InvoiceLifecycleManager:
    """Persists invoice payments."""

    def __init__(
        self,
        document_repo: DocumentRepository,
        store: TransactionalStore,
        activity_logger: ActivityLogger,
        clock: Clock = utc_now,
    ):
        self._document_repo = document_repo
        self._store = store
        self._activity_logger = activity_logger
        self._clock = clock

    def mark_paid(
        self,
        invoice_id: str,
        staff: StaffContext,
        config: SystemConfig,
    ) -> tuple[Document, Document]:
        """Pay an open invoice; return (paid invoice, new receipt)."""
        invoice = self._document_repo.get_document(invoice_id)
        if invoice is None:
            raise InvalidStateError(f"Invoice {invoice_id} does not exist.")

        plan = plan_payment(invoice, staff, config, self._clock)
        self._apply(plan)

        self._activity_logger.record(
            staff.name,
            f"Marked Invoice paid ({plan.receipt.doc_number} issued)",
            invoice.doc_number,
        )
        logger.info("Invoice %s paid with %s", invoice.doc_number, plan.receipt.doc_number)
        return plan.paid_invoice, plan.receipt

    def _apply(self, plan: PaymentPlan) -> None:
        atomic = getattr(self._store, "supports_transactions", False)
        completed: list[str] = []
        scope = self._store.transaction() if atomic else nullcontext()
        try:
            with scope:
                self._document_repo.create_document(plan.receipt)
                completed.append("receipt")
                updated = self._document_repo.update_payment(plan.paid_invoice.id, plan.patch)
                if not updated:
                    raise InvalidStateError(
                        f"{plan.paid_invoice.doc_number} was paid by another session."
                    )
                completed.append("invoice")
        except (PersistenceError, InvalidStateError) as error:
            if atomic or not completed:
                raise
            logger.error(
                "Payment of %s left partial state: completed=%s receipt=%s",
                plan.paid_invoice.doc_number,
                completed,
                plan.receipt.id,
            )
            raise PartialEffectError(
                f"Receipt {plan.receipt.doc_number} was saved but "
                f"{plan.paid_invoice.doc_number} was not marked paid.",
                completed=completed,
                refs={"invoice_id": plan.paid_invoice.id, "receipt_id": plan.receipt.id},
            ) from error
