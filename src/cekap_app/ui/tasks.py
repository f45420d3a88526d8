"""Background worker tasks used by the main GUI window."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, QRunnable, Signal

from cekap_app.core.errors import PartialEffectError

if TYPE_CHECKING:
    from cekap_app.models.customer import CustomerCandidate, InsuranceType, VehicleType
    from cekap_app.models.document import DocType, DocumentDraft
    from cekap_app.models.settings import SystemConfig
    from cekap_app.models.staff import StaffContext
    from cekap_app.repositories.activity_repository import ActivityRepository
    from cekap_app.services.customer_service import CustomerService
    from cekap_app.services.document_service import DocumentService
    from cekap_app.services.invoice_lifecycle import InvoiceLifecycleManager
    from cekap_app.services.suggestion_service import SuggestionService


class LoadSignals(QObject):
    """Signals for background loading tasks."""

    done = Signal(list)
    error = Signal(str)


class ResultSignals(QObject):
    """Signals for tasks that produce one result object."""

    done = Signal(object)
    error = Signal(str)
    partial = Signal(str)


class LoadDocumentsTask(QRunnable):
    """Load the document list without blocking the UI thread."""

    def __init__(
        self,
        document_service: DocumentService,
        staff: StaffContext,
        doc_type: DocType | None,
        search: str,
    ):
        super().__init__()
        self.document_service = document_service
        self.staff = staff
        self.doc_type = doc_type
        self.search = search
        self.signals = LoadSignals()

    def run(self) -> None:
        try:
            documents = self.document_service.list_documents(
                self.staff,
                doc_type=self.doc_type,
                search=self.search,
            )
            self.signals.done.emit(documents)
        except Exception as error:  # pylint: disable=broad-except
            # Worker boundary: convert any failure to a user-visible message.
            self.signals.error.emit(str(error))


class LoadCustomersTask(QRunnable):
    """Load or search customers with masked IC numbers."""

    def __init__(self, customer_service: CustomerService, keyword: str):
        super().__init__()
        self.customer_service = customer_service
        self.keyword = keyword
        self.signals = LoadSignals()

    def run(self) -> None:
        try:
            if self.keyword.strip():
                customers = self.customer_service.search_customers(self.keyword)
            else:
                customers = self.customer_service.list_customers()
            self.signals.done.emit(customers)
        except Exception as error:  # pylint: disable=broad-except
            # Worker boundary: convert any failure to a user-visible message.
            self.signals.error.emit(str(error))


class LoadActivityLogsTask(QRunnable):
    """Load activity logs in a background worker."""

    def __init__(
        self,
        activity_repo: ActivityRepository,
        limit: int,
        keyword: str | None,
        date_from: str | None,
        date_to: str | None,
    ):
        super().__init__()
        self.activity_repo = activity_repo
        self.limit = limit
        self.keyword = keyword
        self.date_from = date_from
        self.date_to = date_to
        self.signals = LoadSignals()

    def run(self) -> None:
        try:
            logs = self.activity_repo.list_logs(
                limit=self.limit,
                keyword=self.keyword,
                date_from=self.date_from,
                date_to=self.date_to,
            )
            self.signals.done.emit(logs)
        except Exception as error:  # pylint: disable=broad-except
            # Worker boundary: convert any failure to a user-visible message.
            self.signals.error.emit(str(error))


class IssueDocumentTask(QRunnable):
    """Finalize a draft into a stored document."""

    def __init__(
        self,
        document_service: DocumentService,
        draft: DocumentDraft,
        candidate: CustomerCandidate,
        staff: StaffContext,
        config: SystemConfig,
        attachment_path: Path | None,
        suggested_notes: str | None,
    ):
        super().__init__()
        self.document_service = document_service
        self.draft = draft
        self.candidate = candidate
        self.staff = staff
        self.config = config
        self.attachment_path = attachment_path
        self.suggested_notes = suggested_notes
        self.signals = ResultSignals()

    def run(self) -> None:
        try:
            document = self.document_service.issue(
                self.draft,
                self.candidate,
                self.staff,
                self.config,
                attachment_path=self.attachment_path,
                suggested_notes=self.suggested_notes,
            )
            self.signals.done.emit(document)
        except Exception as error:  # pylint: disable=broad-except
            # Worker boundary: convert any failure to a user-visible message.
            self.signals.error.emit(str(error))


class MarkPaidTask(QRunnable):
    """Pay an invoice and create its receipt."""

    def __init__(
        self,
        lifecycle_manager: InvoiceLifecycleManager,
        invoice_id: str,
        staff: StaffContext,
        config: SystemConfig,
    ):
        super().__init__()
        self.lifecycle_manager = lifecycle_manager
        self.invoice_id = invoice_id
        self.staff = staff
        self.config = config
        self.signals = ResultSignals()

    def run(self) -> None:
        try:
            _, receipt = self.lifecycle_manager.mark_paid(self.invoice_id, self.staff, self.config)
            self.signals.done.emit(receipt)
        except PartialEffectError as error:
            self.signals.partial.emit(str(error))
        except Exception as error:  # pylint: disable=broad-except
            # Worker boundary: convert any failure to a user-visible message.
            self.signals.error.emit(str(error))


class SuggestNotesTask(QRunnable):
    """Fetch a policy note suggestion; the service never raises."""

    def __init__(
        self,
        suggestion_service: SuggestionService,
        vehicle_type: VehicleType,
        insurance_type: InsuranceType | None,
    ):
        super().__init__()
        self.suggestion_service = suggestion_service
        self.vehicle_type = vehicle_type
        self.insurance_type = insurance_type
        self.signals = ResultSignals()

    def run(self) -> None:
        self.signals.done.emit(
            self.suggestion_service.suggest(self.vehicle_type, self.insurance_type)
        )
