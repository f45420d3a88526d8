"""Document issuance, listing, and dashboard figures."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

from cekap_app.core.clock import Clock, utc_now
from cekap_app.models.customer import CustomerCandidate
from cekap_app.models.document import DocType, Document, DocumentDraft
from cekap_app.models.settings import SystemConfig
from cekap_app.models.staff import StaffContext
from cekap_app.repositories.db_pool import ThreadLocalConnection
from cekap_app.repositories.document_repository import DocumentRepository
from cekap_app.services.activity_logger import ActivityLogger
from cekap_app.services.attachment_store import LocalAttachmentStore
from cekap_app.services.customer_service import CustomerService
from cekap_app.services.document_assembler import assemble
from cekap_app.services.identifiers import generate_doc_number

logger = logging.getLogger(__name__)

DASHBOARD_DAYS = 7


@dataclass(frozen=True)
class DashboardSummary:
    gross_revenue: Decimal
    invoice_count: int
    receipt_count: int
    customer_count: int
    daily_revenue: list[tuple[str, Decimal]]


class DocumentService:
    """Coordinates the issue-document use case and document queries."""

    def __init__(
        self,
        document_repo: DocumentRepository,
        customer_service: CustomerService,
        store: ThreadLocalConnection,
        activity_logger: ActivityLogger,
        attachment_store: LocalAttachmentStore | None = None,
        clock: Clock = utc_now,
    ):
        self._document_repo = document_repo
        self._customer_service = customer_service
        self._store = store
        self._activity_logger = activity_logger
        self._attachment_store = attachment_store
        self._clock = clock

    def issue(
        self,
        draft: DocumentDraft,
        candidate: CustomerCandidate,
        staff: StaffContext,
        config: SystemConfig,
        attachment_path: str | Path | None = None,
        suggested_notes: str | None = None,
    ) -> Document:
        """Resolve the customer, build, number, and store a new document.

        Every validation runs before the first write. The customer and the
        document are written in one transaction; the activity entry follows.
        """
        resolution = self._customer_service.prepare(candidate)
        assembled = assemble(draft, resolution.customer, staff, suggested_notes)
        document = replace(
            assembled,
            id=uuid.uuid4().hex,
            doc_number=generate_doc_number(draft.doc_type, config, self._clock),
        )

        if attachment_path and self._attachment_store is not None:
            document = replace(
                document,
                attachment_url=self._attachment_store.upload(attachment_path),
            )

        try:
            with self._store.transaction():
                self._customer_service.save(resolution)
                self._document_repo.create_document(document)
        except Exception:
            if document.attachment_url:
                self._attachment_store.discard(document.attachment_url)
            raise

        self._activity_logger.record(
            staff.name,
            f"Created {document.doc_type.value}",
            document.doc_number,
        )
        logger.info(
            "Issued %s %s for %s",
            document.doc_type.value,
            document.doc_number,
            document.customer_id,
        )
        return document

    def get_document(self, document_id: str) -> Document | None:
        return self._document_repo.get_document(document_id)

    def list_documents(
        self,
        staff: StaffContext,
        doc_type: DocType | None = None,
        search: str = "",
    ) -> list[Document]:
        """Owners see every document; staff see the ones they issued."""
        documents = self._document_repo.list_documents(
            staff_id=None if staff.is_owner else staff.id,
            doc_type=doc_type,
        )
        term = search.strip().casefold()
        if not term:
            return documents
        return [
            document
            for document in documents
            if term in document.customer_name.casefold()
            or term in document.doc_number.casefold()
            or (document.customer_ic and term in document.customer_ic)
        ]

    def dashboard_summary(self, staff: StaffContext, today: date | None = None) -> DashboardSummary:
        documents = self.list_documents(staff)
        # settlement receipts repeat their invoice total
        billed = [d for d in documents if d.invoice_id is None]
        today = today or self._clock().date()
        days = [
            (today - timedelta(days=offset)).isoformat()
            for offset in range(DASHBOARD_DAYS - 1, -1, -1)
        ]
        daily = {day: Decimal("0.00") for day in days}
        for document in billed:
            if document.date in daily:
                daily[document.date] += document.amount

        return DashboardSummary(
            gross_revenue=sum((d.amount for d in billed), Decimal("0.00")),
            invoice_count=sum(1 for d in documents if d.doc_type == DocType.INVOICE),
            receipt_count=sum(1 for d in documents if d.doc_type == DocType.RECEIPT),
            customer_count=self._customer_service.count_customers(),
            daily_revenue=[(day, daily[day]) for day in days],
        )
