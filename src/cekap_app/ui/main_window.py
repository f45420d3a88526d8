"""Main GUI window for issuing and tracking invoices and receipts."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from pathlib import Path

from PySide6.QtCore import QObject, QThreadPool, Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from cekap_app.core.container import ServiceContainer
from cekap_app.models.customer import (
    Customer,
    CustomerCandidate,
    InsuranceType,
    OthersCategory,
    VehicleType,
)
from cekap_app.models.document import DocType, Document, DocumentDraft
from cekap_app.models.staff import StaffContext, StaffRole
from cekap_app.repositories.change_feed import ACTIVITY_LOGS, CUSTOMERS, DOCUMENTS, SETTINGS, STAFF
from cekap_app.ui.tasks import (
    IssueDocumentTask,
    LoadActivityLogsTask,
    LoadCustomersTask,
    LoadDocumentsTask,
    MarkPaidTask,
    SuggestNotesTask,
)

INSURANCE_COMPANIES = [
    "Takaful Ikhlas",
    "Etiqa Takaful",
    "Zurich Takaful",
    "Pacific",
    "Allianz",
    "Syarikat Takaful Malaysia",
]
ENTRY_ROWS = 4


class FeedBridge(QObject):
    """Re-emits store change notifications on the GUI thread."""

    changed = Signal(str)


class MainWindow(QMainWindow):
    """GUI for document issuance and tracking."""

    def __init__(self, container: ServiceContainer, staff: StaffContext):
        super().__init__()
        self.container = container
        self.staff = staff
        self.thread_pool = QThreadPool.globalInstance()
        self.system_config = container.settings_service.get_config()

        self.activity_limit = 300
        self._selected_customer_id: str | None = None
        self._duplicate: Customer | None = None
        self._attachment_path: Path | None = None
        self._suggested_notes: str | None = None
        self._documents: list[Document] = []
        self._customers: list[Customer] = []
        self._staff_members: list = []

        self.setWindowTitle(f"{self.system_config.company_name} - {staff.name} ({staff.role.value})")
        self.resize(1400, 900)

        self.tabs = QTabWidget()
        self._build_issue_tab()
        self._build_documents_tab()
        self._build_customers_tab()
        if staff.is_owner:
            self._build_activity_tab()
            self._build_staff_tab()
            self._build_settings_tab()
        self.setCentralWidget(self.tabs)

        self.feed_bridge = FeedBridge()
        self.feed_bridge.changed.connect(self._on_collection_changed)
        self._unsubscribers = [
            container.feed.watch(collection, self.feed_bridge.changed.emit)
            for collection in (DOCUMENTS, CUSTOMERS, ACTIVITY_LOGS, SETTINGS, STAFF)
        ]

        self.refresh_documents()
        self.refresh_customers()
        if staff.is_owner:
            self.refresh_activity_logs()
            self.refresh_staff()

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        super().closeEvent(event)

    def _build_issue_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        form = QFormLayout()

        self.doc_type_input = QComboBox()
        self.doc_type_input.addItems([item.value for item in DocType])

        self.customer_selector = QComboBox()
        self.customer_selector.setEditable(True)
        self.customer_selector.lineEdit().setPlaceholderText("Search existing customer")
        self.customer_selector.activated.connect(self._on_customer_selected)

        self.name_input = QLineEdit()
        self.phone_input = QLineEdit()
        self.phone_input.setPlaceholderText("+6012-3456789")
        self.ic_input = QLineEdit()
        self.ic_input.setPlaceholderText("900101-10-1234")
        self.email_input = QLineEdit()
        self.company_checkbox = QCheckBox("Company customer")
        for widget in [self.name_input, self.phone_input, self.ic_input]:
            widget.textEdited.connect(self._on_identity_edited)
        self.company_checkbox.toggled.connect(lambda _checked: self._on_identity_edited(""))

        self.duplicate_label = QLabel("")
        self.use_existing_button = QPushButton("Link existing customer")
        self.use_existing_button.setVisible(False)
        self.use_existing_button.clicked.connect(self._use_duplicate)

        self.vehicle_type_input = QComboBox()
        self.vehicle_type_input.addItems([item.value for item in VehicleType])
        self.vehicle_type_input.currentIndexChanged.connect(self._on_vehicle_type_changed)
        self.reg_no_input = QLineEdit()
        self.insurance_type_input = QComboBox()
        self.insurance_type_input.addItems([item.value for item in InsuranceType])

        self.entries_table = QTableWidget(ENTRY_ROWS, 2)
        self.entries_table.setHorizontalHeaderLabels(["Category", "Amount"])
        for row in range(ENTRY_ROWS):
            selector = QComboBox()
            selector.addItems([""] + [item.value for item in OthersCategory])
            self.entries_table.setCellWidget(row, 0, selector)
            self.entries_table.setItem(row, 1, QTableWidgetItem(""))

        self.issued_company_input = QComboBox()
        self.issued_company_input.setEditable(True)
        self.issued_company_input.addItems(INSURANCE_COMPANIES)
        self.date_input = QLineEdit(date.today().isoformat())
        self.date_input.setPlaceholderText("YYYY-MM-DD")
        self.amount_input = QLineEdit()
        self.service_charge_input = QLineEdit()
        self.service_charge_input.setPlaceholderText("optional")
        self.details_input = QPlainTextEdit()
        self.details_input.setFixedHeight(60)
        self.suggest_button = QPushButton("Suggest notes")
        self.suggest_button.clicked.connect(self.suggest_notes)
        self.remarks_input = QLineEdit()
        self.attachment_label = QLabel("No contract attached")
        attach_button = QPushButton("Attach contract")
        attach_button.clicked.connect(self.choose_attachment)

        form.addRow("Document type", self.doc_type_input)
        form.addRow("Find customer", self.customer_selector)
        form.addRow("Name", self.name_input)
        form.addRow("Phone (+60)", self.phone_input)
        form.addRow("IC number", self.ic_input)
        form.addRow("Email (optional)", self.email_input)
        form.addRow("", self.company_checkbox)
        form.addRow(self.duplicate_label, self.use_existing_button)
        form.addRow("Asset class", self.vehicle_type_input)
        form.addRow("Registration / project", self.reg_no_input)
        form.addRow("Policy type", self.insurance_type_input)
        form.addRow("Categories (Others)", self.entries_table)
        form.addRow("Insurance company", self.issued_company_input)
        form.addRow("Date", self.date_input)
        form.addRow("Amount (Motor)", self.amount_input)
        form.addRow("Service charge", self.service_charge_input)
        form.addRow("Policy details", self.details_input)
        form.addRow("", self.suggest_button)
        form.addRow("Remarks", self.remarks_input)
        form.addRow(self.attachment_label, attach_button)

        buttons = QHBoxLayout()
        finalize_button = QPushButton("Finalize document")
        finalize_button.clicked.connect(self.finalize_document)
        clear_button = QPushButton("Clear")
        clear_button.clicked.connect(self.clear_issue_form)
        buttons.addWidget(finalize_button)
        buttons.addWidget(clear_button)

        layout.addLayout(form)
        layout.addLayout(buttons)
        self._on_vehicle_type_changed(0)
        self.tabs.addTab(tab, "New document")

    def _build_documents_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)

        controls = QHBoxLayout()
        self.document_search_input = QLineEdit()
        self.document_search_input.setPlaceholderText("Customer, doc number, or IC")
        self.document_search_input.returnPressed.connect(self.refresh_documents)
        self.document_type_filter = QComboBox()
        self.document_type_filter.addItems(["All"] + [item.value for item in DocType])
        self.document_type_filter.currentIndexChanged.connect(lambda _index: self.refresh_documents())
        refresh_button = QPushButton("Refresh")
        refresh_button.clicked.connect(self.refresh_documents)
        pay_button = QPushButton("Mark invoice paid")
        pay_button.clicked.connect(self.mark_selected_paid)
        export_button = QPushButton("Export CSV")
        export_button.clicked.connect(self.export_documents_csv)
        for widget in [
            self.document_search_input,
            self.document_type_filter,
            refresh_button,
            pay_button,
            export_button,
        ]:
            controls.addWidget(widget)

        self.documents_table = QTableWidget(0, 8)
        self.documents_table.setHorizontalHeaderLabels(
            ["Doc number", "Type", "Customer", "Company", "Date", "Amount", "Staff", "Status"]
        )
        self.dashboard_label = QLabel("")
        layout.addWidget(self.dashboard_label)
        layout.addLayout(controls)
        layout.addWidget(self.documents_table)
        self.tabs.addTab(tab, "Documents")

    def _build_customers_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        controls = QHBoxLayout()
        self.customer_search_input = QLineEdit()
        self.customer_search_input.setPlaceholderText("Name, phone, IC, or registration")
        self.customer_search_input.returnPressed.connect(self.refresh_customers)
        search_button = QPushButton("Search")
        search_button.clicked.connect(self.refresh_customers)
        controls.addWidget(self.customer_search_input)
        controls.addWidget(search_button)

        self.customers_table = QTableWidget(0, 6)
        self.customers_table.setHorizontalHeaderLabels(
            ["Name", "Phone", "IC", "Asset", "Registration / project", "Updated"]
        )
        layout.addLayout(controls)
        layout.addWidget(QLabel("Customer list (IC numbers masked)"))
        layout.addWidget(self.customers_table)
        self.tabs.addTab(tab, "Customers")

    def _build_activity_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        controls = QHBoxLayout()
        self.activity_keyword_input = QLineEdit()
        self.activity_keyword_input.setPlaceholderText("Action or doc number")
        self.activity_from_input = QLineEdit()
        self.activity_from_input.setPlaceholderText("From YYYY-MM-DD")
        self.activity_to_input = QLineEdit()
        self.activity_to_input.setPlaceholderText("To YYYY-MM-DD")
        filter_button = QPushButton("Filter")
        filter_button.clicked.connect(self.refresh_activity_logs)
        repair_button = QPushButton("Repair payment links")
        repair_button.clicked.connect(self.repair_payments)
        for widget in [
            self.activity_keyword_input,
            self.activity_from_input,
            self.activity_to_input,
            filter_button,
            repair_button,
        ]:
            controls.addWidget(widget)

        self.activity_table = QTableWidget(0, 4)
        self.activity_table.setHorizontalHeaderLabels(["Time", "Staff", "Action", "Document"])
        layout.addLayout(controls)
        layout.addWidget(self.activity_table)
        self.tabs.addTab(tab, "Activity log")

    def _build_staff_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        form = QFormLayout()
        self.staff_name_input = QLineEdit()
        self.staff_email_input = QLineEdit()
        self.staff_role_input = QComboBox()
        self.staff_role_input.addItems([item.value for item in StaffRole])
        self.staff_role_input.setCurrentText(StaffRole.STAFF.value)
        form.addRow("Name", self.staff_name_input)
        form.addRow("Email", self.staff_email_input)
        form.addRow("Role", self.staff_role_input)

        buttons = QHBoxLayout()
        add_button = QPushButton("Register staff")
        add_button.clicked.connect(self.add_staff)
        remove_button = QPushButton("Remove selected")
        remove_button.clicked.connect(self.remove_selected_staff)
        buttons.addWidget(add_button)
        buttons.addWidget(remove_button)

        self.staff_table = QTableWidget(0, 4)
        self.staff_table.setHorizontalHeaderLabels(["Name", "Email", "Role", "Registered"])
        layout.addLayout(form)
        layout.addLayout(buttons)
        layout.addWidget(self.staff_table)
        self.tabs.addTab(tab, "Staff")

    def _build_settings_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        form = QFormLayout()
        self.settings_inputs: dict[str, QLineEdit] = {}
        labels = {
            "company_name": "Company name",
            "address": "Address",
            "contact": "Contact",
            "logo": "Logo URL",
            "footer_notes": "Footer notes",
            "invoice_prefix": "Invoice prefix",
            "receipt_prefix": "Receipt prefix",
        }
        for field_name, label in labels.items():
            widget = QLineEdit(getattr(self.system_config, field_name))
            self.settings_inputs[field_name] = widget
            form.addRow(label, widget)
        save_button = QPushButton("Save settings")
        save_button.clicked.connect(self.save_settings)
        layout.addLayout(form)
        layout.addWidget(save_button)
        layout.addStretch()
        self.tabs.addTab(tab, "Settings")

    def _candidate_from_form(self) -> CustomerCandidate:
        vehicle_type = VehicleType(self.vehicle_type_input.currentText())
        entries = self._entries_from_table()
        others_category = None
        if vehicle_type == VehicleType.OTHERS and len(entries) == 1 and entries[0][0]:
            others_category = OthersCategory(entries[0][0])
        return CustomerCandidate(
            name=self.name_input.text(),
            phone=self.phone_input.text(),
            ic=self.ic_input.text(),
            email=self.email_input.text(),
            is_company=self.company_checkbox.isChecked(),
            vehicle_type=vehicle_type,
            vehicle_reg_no=self.reg_no_input.text(),
            insurance_type=(
                InsuranceType(self.insurance_type_input.currentText())
                if vehicle_type == VehicleType.MOTOR
                else None
            ),
            others_category=others_category,
            customer_id=self._selected_customer_id,
        )

    def _entries_from_table(self) -> list[tuple[str, str]]:
        entries: list[tuple[str, str]] = []
        for row in range(self.entries_table.rowCount()):
            selector = self.entries_table.cellWidget(row, 0)
            item = self.entries_table.item(row, 1)
            category = selector.currentText() if selector else ""
            amount = item.text().strip() if item else ""
            if category or amount:
                entries.append((category, amount))
        return entries

    def _draft_from_form(self) -> DocumentDraft:
        vehicle_type = VehicleType(self.vehicle_type_input.currentText())
        try:
            issue_date = datetime.strptime(self.date_input.text().strip(), "%Y-%m-%d").date()
        except ValueError as error:
            raise ValueError("Date must be YYYY-MM-DD.") from error
        return DocumentDraft(
            doc_type=DocType(self.doc_type_input.currentText()),
            issued_company=self.issued_company_input.currentText(),
            issue_date=issue_date,
            vehicle_type=vehicle_type,
            amount=self.amount_input.text(),
            insurance_type=(
                InsuranceType(self.insurance_type_input.currentText())
                if vehicle_type == VehicleType.MOTOR
                else None
            ),
            others_entries=self._entries_from_table() if vehicle_type == VehicleType.OTHERS else [],
            service_charge=self.service_charge_input.text(),
            insurance_details=self.details_input.toPlainText(),
            remarks=self.remarks_input.text(),
            use_suggested_notes=self._suggested_notes is not None
            and self.details_input.toPlainText().strip() == self._suggested_notes,
        )

    def _on_vehicle_type_changed(self, _index: int) -> None:
        is_motor = self.vehicle_type_input.currentText() == VehicleType.MOTOR.value
        self.insurance_type_input.setEnabled(is_motor)
        self.amount_input.setEnabled(is_motor)
        self.entries_table.setEnabled(not is_motor)

    def _on_identity_edited(self, _text: str) -> None:
        self._selected_customer_id = None
        warning = self.container.customer_service.screen(self._candidate_from_form())
        self._duplicate = warning.customer if warning else None
        self.duplicate_label.setText(str(warning) if warning else "")
        self.use_existing_button.setVisible(warning is not None)

    def _use_duplicate(self) -> None:
        if self._duplicate is not None:
            self._fill_customer(self._duplicate)

    def _on_customer_selected(self, index: int) -> None:
        customer_id = self.customer_selector.itemData(index)
        customer = self.container.customer_service.get_customer(customer_id) if customer_id else None
        if customer is not None:
            self._fill_customer(customer)

    def _fill_customer(self, customer: Customer) -> None:
        self.name_input.setText(customer.name)
        self.phone_input.setText(customer.phone)
        self.ic_input.setText(customer.ic)
        self.email_input.setText(customer.email)
        self.company_checkbox.blockSignals(True)
        self.company_checkbox.setChecked(customer.is_company)
        self.company_checkbox.blockSignals(False)
        self.vehicle_type_input.setCurrentText(customer.vehicle_type.value)
        self.reg_no_input.setText(customer.vehicle_reg_no)
        if customer.insurance_type:
            self.insurance_type_input.setCurrentText(customer.insurance_type.value)
        if customer.others_category:
            selector = self.entries_table.cellWidget(0, 0)
            selector.setCurrentText(customer.others_category.value)
        self._selected_customer_id = customer.id
        self._duplicate = None
        self.duplicate_label.setText("")
        self.use_existing_button.setVisible(False)

    def choose_attachment(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Contract file", "", "Documents (*.pdf *.png *.jpg)")
        if file_path:
            self._attachment_path = Path(file_path)
            self.attachment_label.setText(self._attachment_path.name)

    def suggest_notes(self) -> None:
        vehicle_type = VehicleType(self.vehicle_type_input.currentText())
        insurance_type = (
            InsuranceType(self.insurance_type_input.currentText())
            if vehicle_type == VehicleType.MOTOR
            else None
        )
        self.suggest_button.setEnabled(False)
        task = SuggestNotesTask(self.container.suggestion_service, vehicle_type, insurance_type)
        task.signals.done.connect(self._apply_suggestion)
        self.thread_pool.start(task)

    def _apply_suggestion(self, text: str) -> None:
        self._suggested_notes = text
        self.details_input.setPlainText(text)
        self.suggest_button.setEnabled(True)

    def finalize_document(self) -> None:
        try:
            task = IssueDocumentTask(
                self.container.document_service,
                self._draft_from_form(),
                self._candidate_from_form(),
                self.staff,
                self.system_config,
                self._attachment_path,
                self._suggested_notes,
            )
        except ValueError as error:
            QMessageBox.critical(self, "Error", str(error))
            return
        task.signals.done.connect(self._on_document_issued)
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def _on_document_issued(self, document: Document) -> None:
        QMessageBox.information(
            self,
            "Done",
            f"{document.doc_type.value} {document.doc_number} issued: RM {document.amount:,.2f}",
        )
        self.clear_issue_form()
        self.tabs.setCurrentIndex(1)

    def clear_issue_form(self) -> None:
        for widget in [
            self.name_input,
            self.phone_input,
            self.ic_input,
            self.email_input,
            self.reg_no_input,
            self.amount_input,
            self.service_charge_input,
            self.remarks_input,
        ]:
            widget.clear()
        self.details_input.clear()
        for row in range(ENTRY_ROWS):
            self.entries_table.cellWidget(row, 0).setCurrentIndex(0)
            self.entries_table.item(row, 1).setText("")
        self.company_checkbox.setChecked(False)
        self.date_input.setText(date.today().isoformat())
        self._selected_customer_id = None
        self._duplicate = None
        self._attachment_path = None
        self._suggested_notes = None
        self.attachment_label.setText("No contract attached")
        self.duplicate_label.setText("")
        self.use_existing_button.setVisible(False)

    def _selected_document(self) -> Document | None:
        row = self.documents_table.currentRow()
        if row < 0 or row >= len(self._documents):
            return None
        return self._documents[row]

    def mark_selected_paid(self) -> None:
        document = self._selected_document()
        if document is None:
            QMessageBox.information(self, "Notice", "Select an invoice first.")
            return
        confirm = QMessageBox.question(
            self,
            "Confirm payment",
            f"Mark {document.doc_number} (RM {document.amount:,.2f}) as paid and issue a receipt?",
        )
        if confirm != QMessageBox.StandardButton.Yes:
            return
        task = MarkPaidTask(
            self.container.lifecycle_manager,
            document.id,
            self.staff,
            self.system_config,
        )
        task.signals.done.connect(
            lambda receipt: QMessageBox.information(self, "Done", f"Receipt {receipt.doc_number} issued.")
        )
        task.signals.partial.connect(
            lambda message: QMessageBox.warning(
                self,
                "Payment incomplete",
                f"{message}\nRun 'Repair payment links' from the activity log tab.",
            )
        )
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def export_documents_csv(self) -> None:
        if not self._documents:
            QMessageBox.information(self, "Notice", "There are no documents to export.")
            return
        default_name = f"records_{date.today().isoformat()}.csv"
        file_path, _ = QFileDialog.getSaveFileName(self, "Export CSV", default_name, "CSV (*.csv)")
        if not file_path:
            return
        try:
            count = self.container.csv_export_service.export_documents(self._documents, file_path)
            QMessageBox.information(self, "Done", f"Exported {count} rows to {file_path}")
        except OSError as error:
            QMessageBox.critical(self, "Export error", str(error))

    def repair_payments(self) -> None:
        drift = self.container.reconciliation_service.find_drift()
        if not drift:
            QMessageBox.information(self, "Reconciliation", "All invoices are consistent.")
            return
        repaired = self.container.reconciliation_service.repair(self.staff.name)
        unresolved = [item.invoice_doc_number for item in drift if not item.repairable]
        message = f"Repaired {len(repaired)} invoice(s)."
        if unresolved:
            message += f"\nPaid without receipt (manual check): {', '.join(unresolved)}"
        QMessageBox.information(self, "Reconciliation", message)

    def refresh_staff(self) -> None:
        try:
            self._staff_members = self.container.staff_service.list_staff(self.staff)
        except Exception as error:  # pylint: disable=broad-except
            QMessageBox.critical(self, "Error", str(error))
            return
        self._fill_table(
            self.staff_table,
            [
                [member.name, member.email, member.role.value, member.created_at]
                for member in self._staff_members
            ],
        )

    def add_staff(self) -> None:
        try:
            self.container.staff_service.add_staff(
                self.staff,
                self.staff_name_input.text(),
                self.staff_email_input.text(),
                StaffRole(self.staff_role_input.currentText()),
            )
        except Exception as error:  # pylint: disable=broad-except
            QMessageBox.critical(self, "Error", str(error))
            return
        self.staff_name_input.clear()
        self.staff_email_input.clear()

    def remove_selected_staff(self) -> None:
        row = self.staff_table.currentRow()
        if row < 0 or row >= len(self._staff_members):
            return
        member = self._staff_members[row]
        confirm = QMessageBox.question(self, "Remove staff", f"Revoke access for {member.email}?")
        if confirm != QMessageBox.StandardButton.Yes:
            return
        try:
            self.container.staff_service.remove_staff(self.staff, member.id)
        except Exception as error:  # pylint: disable=broad-except
            QMessageBox.critical(self, "Error", str(error))

    def refresh_dashboard(self) -> None:
        summary = self.container.document_service.dashboard_summary(self.staff)
        week = ", ".join(f"{day[5:]}: {amount:,.0f}" for day, amount in summary.daily_revenue)
        self.dashboard_label.setText(
            f"Revenue RM {summary.gross_revenue:,.2f} | Invoices {summary.invoice_count} | "
            f"Receipts {summary.receipt_count} | Customers {summary.customer_count}\nLast 7 days: {week}"
        )

    def save_settings(self) -> None:
        try:
            config = replace(
                self.system_config,
                **{name: widget.text().strip() for name, widget in self.settings_inputs.items()},
            )
            self.system_config = self.container.settings_service.update_config(config, self.staff)
            QMessageBox.information(self, "Done", "Settings saved.")
        except Exception as error:  # pylint: disable=broad-except
            QMessageBox.critical(self, "Error", str(error))

    def _on_collection_changed(self, collection: str) -> None:
        if collection == DOCUMENTS:
            self.refresh_documents()
        elif collection == CUSTOMERS:
            self.refresh_customers()
        elif collection == ACTIVITY_LOGS and self.staff.is_owner:
            self.refresh_activity_logs()
        elif collection == STAFF and self.staff.is_owner:
            self.refresh_staff()
        elif collection == SETTINGS:
            self.system_config = self.container.settings_service.get_config()

    def refresh_documents(self) -> None:
        selected_type = self.document_type_filter.currentText()
        task = LoadDocumentsTask(
            self.container.document_service,
            self.staff,
            None if selected_type == "All" else DocType(selected_type),
            self.document_search_input.text(),
        )
        task.signals.done.connect(self._render_documents)
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def refresh_customers(self) -> None:
        task = LoadCustomersTask(self.container.customer_service, self.customer_search_input.text())
        task.signals.done.connect(self._render_customers)
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def refresh_activity_logs(self) -> None:
        task = LoadActivityLogsTask(
            self.container.activity_repo,
            self.activity_limit,
            self.activity_keyword_input.text().strip() or None,
            self.activity_from_input.text().strip() or None,
            self.activity_to_input.text().strip() or None,
        )
        task.signals.done.connect(self._render_activity_logs)
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Log error", message))
        self.thread_pool.start(task)

    def _render_documents(self, documents: list) -> None:
        self._documents = documents
        rows = []
        for document in documents:
            if document.doc_type == DocType.INVOICE:
                status = f"Paid ({document.receipt_doc_number})" if document.is_paid else "Open"
            else:
                status = "Settlement" if document.invoice_id else "Issued"
            rows.append(
                [
                    document.doc_number,
                    document.doc_type.value,
                    document.customer_name,
                    document.issued_company,
                    document.date,
                    f"{document.amount:,.2f}",
                    document.staff_name,
                    status,
                ]
            )
        self._fill_table(self.documents_table, rows)
        try:
            self.refresh_dashboard()
        except Exception as error:  # pylint: disable=broad-except
            self.dashboard_label.setText(f"Dashboard unavailable: {error}")

    def _render_customers(self, customers: list) -> None:
        self._customers = customers
        self._fill_table(
            self.customers_table,
            [
                [
                    customer.name,
                    customer.phone,
                    customer.ic,
                    customer.vehicle_type.value,
                    customer.vehicle_reg_no,
                    customer.last_updated[:10],
                ]
                for customer in customers
            ],
        )
        self.customer_selector.blockSignals(True)
        self.customer_selector.clear()
        self.customer_selector.addItem("", None)
        for customer in customers:
            self.customer_selector.addItem(
                f"{customer.name} | {customer.phone} | {customer.vehicle_reg_no}",
                customer.id,
            )
        self.customer_selector.blockSignals(False)

    def _render_activity_logs(self, logs: list) -> None:
        self._fill_table(
            self.activity_table,
            [
                [log.timestamp[:19].replace("T", " "), log.staff_name, log.action, log.doc_id or ""]
                for log in logs
            ],
        )

    @staticmethod
    def _fill_table(table: QTableWidget, rows: list[list[str]]) -> None:
        table.setRowCount(len(rows))
        for row_index, row in enumerate(rows):
            for column_index, value in enumerate(row):
                table.setItem(row_index, column_index, QTableWidgetItem(str(value)))
        table.resizeColumnsToContents()
