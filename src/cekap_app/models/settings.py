"""Business identity settings shown on issued documents."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SystemConfig:
    company_name: str
    address: str
    contact: str
    logo: str
    footer_notes: str
    invoice_prefix: str
    receipt_prefix: str


DEFAULT_SYSTEM_CONFIG = SystemConfig(
    company_name="Cekap Guard Insurance Solutions",
    address="123 Business Avenue, Suite 400, Financial District",
    contact="+60 3-9876 5432 | contact@cekapguard.com",
    logo="",
    footer_notes="Thank you for choosing Cekap Guard. This is a computer-generated document.",
    invoice_prefix="INV-",
    receipt_prefix="REC-",
)
