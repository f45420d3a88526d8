"""Session authorization and the staff registry."""

from __future__ import annotations

import logging

from cekap_app.core.config import AuthConfig
from cekap_app.core.errors import AccessDeniedError, ValidationError
from cekap_app.core.validation import validate_email, validate_required_text
from cekap_app.models.staff import StaffContext, StaffMember, StaffRole
from cekap_app.repositories.staff_repository import StaffRepository
from cekap_app.services.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)


class AuthService:
    """Turns an authenticated identity into a staff context."""

    def __init__(self, auth_config: AuthConfig, staff_repo: StaffRepository):
        self._owner_emails = set(auth_config.owner_emails)
        self._staff_repo = staff_repo

    def open_session(self, uid: str, email: str) -> StaffContext:
        """Authorize a signed-in user once at session start.

        Owners are listed in configuration; everyone else must be present in
        the staff registry.
        """
        normalized = email.strip().lower()
        display_name = normalized.split("@")[0] or "Unknown User"
        if normalized in self._owner_emails:
            return StaffContext(id=uid, name=display_name, role=StaffRole.OWNER)

        member = self._staff_repo.find_by_email(normalized)
        if member is None:
            logger.warning("Access revoked: %s is not in the staff registry", normalized)
            raise AccessDeniedError("Access revoked: not found in staff registry.")
        return StaffContext(id=uid, name=member.name or display_name, role=member.role)


class StaffService:
    """Owner-only management of the staff registry."""

    def __init__(self, staff_repo: StaffRepository, activity_logger: ActivityLogger):
        self._staff_repo = staff_repo
        self._activity_logger = activity_logger

    @staticmethod
    def _require_owner(actor: StaffContext) -> None:
        if not actor.is_owner:
            raise AccessDeniedError("Only the owner can manage staff.")

    def list_staff(self, actor: StaffContext) -> list[StaffMember]:
        self._require_owner(actor)
        return self._staff_repo.list_members()

    def add_staff(
        self,
        actor: StaffContext,
        name: str,
        email: str,
        role: StaffRole = StaffRole.STAFF,
    ) -> int:
        self._require_owner(actor)
        name = validate_required_text(name, "Name")
        email = validate_required_text(validate_email(email), "Email")
        if self._staff_repo.find_by_email(email):
            raise ValidationError(f"{email} is already registered.")
        member_id = self._staff_repo.add_member(name, email, role)
        self._activity_logger.record(actor.name, f"Registered staff {email}")
        return member_id

    def remove_staff(self, actor: StaffContext, member_id: int) -> None:
        self._require_owner(actor)
        if self._staff_repo.remove_member(member_id) == 0:
            raise ValidationError("Staff member not found.")
        self._activity_logger.record(actor.name, f"Removed staff #{member_id}")
