"""Human-readable document numbers."""

from __future__ import annotations

from cekap_app.core.clock import Clock
from cekap_app.models.document import DocType
from cekap_app.models.settings import SystemConfig

SUFFIX_DIGITS = 6


def generate_doc_number(kind: DocType, config: SystemConfig, clock: Clock) -> str:
    """Return prefix + last six digits of the current epoch milliseconds.

    Numbers are not guaranteed unique: two documents of the same kind issued
    10**6 ms apart, or within the same millisecond, can collide.
    """
    prefix = config.invoice_prefix if kind == DocType.INVOICE else config.receipt_prefix
    epoch_millis = int(clock().timestamp() * 1000)
    return f"{prefix}{epoch_millis % 10**SUFFIX_DIGITS:0{SUFFIX_DIGITS}d}"
