"""Input normalization and validation rules for customers and documents."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from cekap_app.core.errors import ValidationError

NON_DIGIT_PATTERN = re.compile(r"\D")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("100000000")
PHONE_MAX_LENGTH = 15
IC_MAX_LENGTH = 14
IC_MIN_DIGITS = 12


def normalize_phone(phone: str) -> str:
    """Normalize a Malaysian number to +60XX-XXXXXXX form."""
    digits = NON_DIGIT_PATTERN.sub("", phone)
    if digits.startswith("60"):
        digits = digits[2:]
    elif digits.startswith("0"):
        digits = digits[1:]
    if not digits:
        return ""

    formatted = "+60" + digits
    if len(formatted) > 5:
        formatted = formatted[:5] + "-" + formatted[5:]
    return formatted[:PHONE_MAX_LENGTH]


def normalize_ic(ic: str) -> str:
    """Normalize an identity-card number to YYMMDD-PB-#### form."""
    digits = NON_DIGIT_PATTERN.sub("", ic)
    formatted = digits
    if len(digits) > 6:
        formatted = digits[:6] + "-" + digits[6:]
    if len(formatted) > 9:
        formatted = formatted[:9] + "-" + formatted[9:]
    return formatted[:IC_MAX_LENGTH]


def ic_digit_count(ic: str) -> int:
    return len(NON_DIGIT_PATTERN.sub("", ic))


def validate_required_text(value: str | None, field_name: str) -> str:
    """Validate non-empty text fields."""
    normalized = (value or "").strip()
    if not normalized:
        raise ValidationError(f"{field_name} is required.")
    return normalized


def validate_email(email: str | None) -> str:
    """Validate an optional email address."""
    normalized = (email or "").strip().lower()
    if normalized and not EMAIL_PATTERN.match(normalized):
        raise ValidationError("Email address is not valid.")
    return normalized


def parse_amount(value: str | Decimal | int | float | None, field_name: str) -> Decimal:
    """Convert form input into a two-place Decimal."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required.")
    try:
        amount = Decimal(str(value).strip().replace(",", ""))
    except InvalidOperation as error:
        raise ValidationError(f"{field_name} must be a number.") from error
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number.")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field_name} exceeds the upper limit (100,000,000).")
    if amount < -MAX_AMOUNT:
        raise ValidationError(f"{field_name} cannot be negative.")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def validate_amount(amount: Decimal, field_name: str = "Amount") -> Decimal:
    """Validate a coverage amount range."""
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative.")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field_name} exceeds the upper limit (100,000,000).")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def normalize_service_charge(value: str | Decimal | None) -> Decimal:
    """Return the service charge, treating blank or non-positive input as zero."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal("0.00")
    charge = parse_amount(value, "Service charge")
    if charge <= 0:
        return Decimal("0.00")
    return validate_amount(charge, "Service charge")
