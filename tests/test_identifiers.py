"""Tests for document number generation."""

import re
from dataclasses import replace
from datetime import datetime, timezone

from cekap_app.core.clock import utc_now
from cekap_app.models.document import DocType
from cekap_app.models.settings import DEFAULT_SYSTEM_CONFIG
from cekap_app.services.identifiers import generate_doc_number


def test_invoice_number_uses_prefix_and_six_digits() -> None:
    number = generate_doc_number(DocType.INVOICE, DEFAULT_SYSTEM_CONFIG, utc_now)
    assert re.fullmatch(r"INV-\d{6}", number)


def test_suffix_is_last_six_digits_of_epoch_millis() -> None:
    # 2024-05-01T09:30:00Z is 1714555800000 ms
    clock = lambda: datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)  # noqa: E731

    assert generate_doc_number(DocType.INVOICE, DEFAULT_SYSTEM_CONFIG, clock) == "INV-800000"
    assert generate_doc_number(DocType.RECEIPT, DEFAULT_SYSTEM_CONFIG, clock) == "REC-800000"


def test_suffix_is_zero_padded() -> None:
    clock = lambda: datetime(2024, 5, 1, 9, 33, 20, tzinfo=timezone.utc)  # noqa: E731
    assert generate_doc_number(DocType.INVOICE, DEFAULT_SYSTEM_CONFIG, clock) == "INV-000000"


def test_configured_prefixes_are_used() -> None:
    config = replace(DEFAULT_SYSTEM_CONFIG, invoice_prefix="CG/I/", receipt_prefix="CG/R/")
    clock = lambda: datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)  # noqa: E731

    assert generate_doc_number(DocType.INVOICE, config, clock).startswith("CG/I/")
    assert generate_doc_number(DocType.RECEIPT, config, clock).startswith("CG/R/")
