"""Tests for CSV export."""

import csv
from decimal import Decimal

from cekap_app.models.customer import VehicleType
from cekap_app.models.document import DocType, Document
from cekap_app.services.csv_export_service import DOCUMENT_CSV_HEADERS, CsvExportService


def make_document(doc_number: str, doc_type: DocType, amount: str) -> Document:
    return Document(
        id=doc_number.lower(),
        doc_number=doc_number,
        doc_type=doc_type,
        customer_id="c-1",
        customer_name="John Tan",
        customer_ic="900101-10-1234",
        issued_company="Allianz",
        date="2024-05-01",
        amount=Decimal(amount),
        insurance_details="",
        remarks="",
        staff_id="aina@cekapguard.com",
        staff_name="aina",
        vehicle_type=VehicleType.MOTOR,
    )


def test_export_documents(tmp_path) -> None:
    target = tmp_path / "records.csv"
    documents = [
        make_document("INV-800000", DocType.INVOICE, "1250"),
        make_document("REC-800007", DocType.RECEIPT, "99.5"),
    ]

    count = CsvExportService().export_documents(documents, target)

    assert count == 2
    with target.open("r", encoding="utf-8-sig", newline="") as csv_file:
        rows = list(csv.reader(csv_file))
    assert rows[0] == DOCUMENT_CSV_HEADERS
    assert rows[1] == [
        "INV-800000",
        "Invoice",
        "John Tan",
        "900101-10-1234",
        "2024-05-01",
        "1250.00",
        "aina",
    ]
    assert rows[2][5] == "99.50"


def test_export_empty_list_writes_header_only(tmp_path) -> None:
    target = tmp_path / "empty.csv"
    assert CsvExportService().export_documents([], target) == 0
    assert target.read_text(encoding="utf-8-sig").strip() == ",".join(DOCUMENT_CSV_HEADERS)
