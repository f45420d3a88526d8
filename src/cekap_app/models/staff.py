"""Staff identity models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StaffRole(str, Enum):
    OWNER = "Owner"
    STAFF = "Staff"


@dataclass(frozen=True)
class StaffContext:
    """Identity of the signed-in staff member, passed into every operation."""

    id: str
    name: str
    role: StaffRole

    @property
    def is_owner(self) -> bool:
        return self.role == StaffRole.OWNER


@dataclass(frozen=True)
class StaffMember:
    """Entry in the staff registry."""

    id: int
    name: str
    email: str
    role: StaffRole
    created_at: str
