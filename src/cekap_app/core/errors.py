"""Exception hierarchy for agency business rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cekap_app.models.customer import Customer


class AgencyError(Exception):
    """Base exception for all cekap errors."""


class ValidationError(AgencyError, ValueError):
    """Raised when input is missing or malformed."""


class InvalidStateError(AgencyError):
    """Raised when a record is in the wrong state for the operation."""


class AccessDeniedError(AgencyError):
    """Raised when the current identity may not perform an action."""


class PersistenceError(AgencyError):
    """Raised when the storage layer fails."""


class PartialEffectError(PersistenceError):
    """Raised when a multi-write operation stopped after some writes landed."""

    def __init__(self, message: str, completed: list[str], refs: dict[str, str]):
        super().__init__(message)
        self.completed = completed
        self.refs = refs


class DuplicateIdentityWarning(UserWarning):
    """Advisory signal that a candidate customer matches an existing one.

    Returned to the caller rather than raised.
    """

    def __init__(self, customer: Customer, reason: str):
        super().__init__(f"Customer already exists ({reason}): {customer.name}")
        self.customer = customer
        self.reason = reason
