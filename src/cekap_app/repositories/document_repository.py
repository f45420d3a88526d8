"""Invoice and receipt repository."""

from __future__ import annotations

import json
import sqlite3
from decimal import Decimal
from typing import Any

from cekap_app.core.crypto import CryptoService
from cekap_app.models.customer import InsuranceType, OthersCategory, VehicleType
from cekap_app.models.document import (
    Coverage,
    DocType,
    Document,
    MotorCoverage,
    OthersEntriesCoverage,
    OthersEntry,
    OthersSingleCoverage,
    PaymentPatch,
)
from cekap_app.repositories.change_feed import DOCUMENTS, ChangeFeed
from cekap_app.repositories.db_pool import ThreadLocalConnection

DOCUMENT_COLUMNS = """
    id,
    doc_number,
    doc_type,
    customer_id,
    customer_name,
    customer_ic_encrypted,
    issued_company,
    date,
    amount,
    insurance_details,
    remarks,
    staff_id,
    staff_name,
    vehicle_type,
    insurance_type,
    others_category,
    others_entries,
    base_amount,
    service_charge,
    attachment_url,
    invoice_id,
    paid_at,
    receipt_id,
    receipt_doc_number
"""


def _coverage_columns(coverage: Coverage | None) -> dict[str, Any]:
    columns: dict[str, Any] = {
        "insurance_type": None,
        "others_category": None,
        "others_entries": None,
        "base_amount": None,
    }
    if isinstance(coverage, MotorCoverage):
        columns["insurance_type"] = coverage.insurance_type.value
        columns["base_amount"] = str(coverage.amount)
    elif isinstance(coverage, OthersSingleCoverage):
        columns["others_category"] = coverage.category.value
        columns["base_amount"] = str(coverage.amount)
    elif isinstance(coverage, OthersEntriesCoverage):
        columns["others_entries"] = json.dumps(
            [
                {"category": entry.category.value, "amount": str(entry.amount)}
                for entry in coverage.entries
            ],
            ensure_ascii=False,
        )
    return columns


def _coverage_from_row(row: sqlite3.Row) -> Coverage | None:
    if row["insurance_type"]:
        return MotorCoverage(
            insurance_type=InsuranceType(row["insurance_type"]),
            amount=Decimal(row["base_amount"]),
        )
    if row["others_category"]:
        return OthersSingleCoverage(
            category=OthersCategory(row["others_category"]),
            amount=Decimal(row["base_amount"]),
        )
    if row["others_entries"]:
        return OthersEntriesCoverage(
            entries=tuple(
                OthersEntry(category=OthersCategory(item["category"]), amount=Decimal(item["amount"]))
                for item in json.loads(row["others_entries"])
            )
        )
    return None


class DocumentRepository:
    """Handles document persistence. Issued fields are written once."""

    def __init__(
        self,
        pool: ThreadLocalConnection,
        crypto_service: CryptoService,
        feed: ChangeFeed | None = None,
    ):
        self._pool = pool
        self._crypto = crypto_service
        self._feed = feed

    def _to_document(self, row: sqlite3.Row) -> Document:
        return Document(
            id=row["id"],
            doc_number=row["doc_number"],
            doc_type=DocType(row["doc_type"]),
            customer_id=row["customer_id"],
            customer_name=row["customer_name"],
            customer_ic=self._crypto.decrypt_text(row["customer_ic_encrypted"]),
            issued_company=row["issued_company"],
            date=row["date"],
            amount=Decimal(row["amount"]),
            insurance_details=row["insurance_details"] or "",
            remarks=row["remarks"] or "",
            staff_id=row["staff_id"],
            staff_name=row["staff_name"],
            vehicle_type=VehicleType(row["vehicle_type"]),
            coverage=_coverage_from_row(row),
            service_charge=Decimal(row["service_charge"]) if row["service_charge"] else None,
            attachment_url=row["attachment_url"],
            invoice_id=row["invoice_id"],
            paid_at=row["paid_at"],
            receipt_id=row["receipt_id"],
            receipt_doc_number=row["receipt_doc_number"],
        )

    def _publish(self) -> None:
        if self._feed is not None:
            self._pool.after_commit(lambda: self._feed.publish(DOCUMENTS))

    def create_document(self, document: Document) -> str:
        """Insert an issued document and return its id."""
        coverage = _coverage_columns(document.coverage)
        self._pool.execute(
            """
            INSERT INTO documents (
                id,
                doc_number,
                doc_type,
                customer_id,
                customer_name,
                customer_ic_encrypted,
                issued_company,
                date,
                amount,
                insurance_details,
                remarks,
                staff_id,
                staff_name,
                vehicle_type,
                insurance_type,
                others_category,
                others_entries,
                base_amount,
                service_charge,
                attachment_url,
                invoice_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                document.id,
                document.doc_number,
                document.doc_type.value,
                document.customer_id,
                document.customer_name,
                self._crypto.encrypt_text(document.customer_ic),
                document.issued_company,
                document.date,
                str(document.amount),
                document.insurance_details,
                document.remarks,
                document.staff_id,
                document.staff_name,
                document.vehicle_type.value,
                coverage["insurance_type"],
                coverage["others_category"],
                coverage["others_entries"],
                coverage["base_amount"],
                str(document.service_charge) if document.service_charge is not None else None,
                document.attachment_url,
                document.invoice_id,
            ),
        )
        self._publish()
        return document.id

    def update_payment(self, document_id: str, patch: PaymentPatch) -> int:
        """Attach payment fields to an unpaid invoice; return affected row count."""
        cursor = self._pool.execute(
            """
            UPDATE documents
            SET
                paid_at = ?,
                receipt_id = ?,
                receipt_doc_number = ?
            WHERE id = ? AND doc_type = ? AND paid_at IS NULL
            """,
            (
                patch.paid_at,
                patch.receipt_id,
                patch.receipt_doc_number,
                document_id,
                DocType.INVOICE.value,
            ),
        )
        if cursor.rowcount:
            self._publish()
        return cursor.rowcount

    def get_document(self, document_id: str) -> Document | None:
        row = self._pool.fetchone(
            f"SELECT {DOCUMENT_COLUMNS} FROM documents WHERE id = ?",
            (document_id,),
        )
        return self._to_document(row) if row else None

    def find_settlement_receipt(self, invoice_id: str) -> Document | None:
        """Return the receipt created for an invoice's payment, if any."""
        row = self._pool.fetchone(
            f"""
            SELECT {DOCUMENT_COLUMNS}
            FROM documents
            WHERE invoice_id = ? AND doc_type = ?
            ORDER BY created_at
            LIMIT 1
            """,
            (invoice_id, DocType.RECEIPT.value),
        )
        return self._to_document(row) if row else None

    def list_documents(
        self,
        staff_id: str | None = None,
        doc_type: DocType | None = None,
    ) -> list[Document]:
        """List documents newest first with optional staff and type filters."""
        where_clauses: list[str] = []
        params: list[Any] = []
        if staff_id:
            where_clauses.append("staff_id = ?")
            params.append(staff_id)
        if doc_type:
            where_clauses.append("doc_type = ?")
            params.append(doc_type.value)

        where_sql = f"WHERE {' AND '.join(where_clauses)}" if where_clauses else ""
        rows = self._pool.fetchall(
            f"""
            SELECT {DOCUMENT_COLUMNS}
            FROM documents
            {where_sql}
            ORDER BY date DESC, created_at DESC
            """,
            tuple(params),
        )
        return [self._to_document(row) for row in rows]
