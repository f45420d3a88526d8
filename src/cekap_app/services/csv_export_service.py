"""CSV export of document lists."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from cekap_app.models.document import Document

DOCUMENT_CSV_HEADERS = [
    "Doc Number",
    "Type",
    "Customer",
    "IC Number",
    "Date",
    "Amount",
    "Staff",
]


class CsvExportService:
    """Writes a read-only projection of documents to delimited text."""

    @staticmethod
    def document_rows(documents: Iterable[Document]) -> list[list[str]]:
        return [
            [
                document.doc_number,
                document.doc_type.value,
                document.customer_name,
                document.customer_ic,
                document.date,
                f"{document.amount:.2f}",
                document.staff_name,
            ]
            for document in documents
        ]

    def export_documents(self, documents: Iterable[Document], file_path: str | Path) -> int:
        """Write documents to file_path and return the number of data rows."""
        rows = self.document_rows(documents)
        with open(file_path, "w", encoding="utf-8-sig", newline="") as csv_file:
            writer = csv.writer(csv_file)
            writer.writerow(DOCUMENT_CSV_HEADERS)
            writer.writerows(rows)
        return len(rows)
