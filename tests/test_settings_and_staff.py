"""Tests for system settings, session authorization and the staff registry."""

from dataclasses import replace

import pytest

from cekap_app.core.config import AuthConfig
from cekap_app.core.errors import AccessDeniedError, ValidationError
from cekap_app.models.settings import DEFAULT_SYSTEM_CONFIG
from cekap_app.models.staff import StaffRole
from cekap_app.services.staff_service import AuthService, StaffService

from conftest import OWNER, STAFF_AINA


def test_first_load_stores_defaults(services) -> None:
    assert services.settings_service.get_config() == DEFAULT_SYSTEM_CONFIG
    assert services.settings_service.get_config().invoice_prefix == "INV-"
    assert services.pool.fetchone("SELECT COUNT(*) AS total FROM settings")["total"] == 1


def test_owner_updates_settings(services) -> None:
    updated = replace(DEFAULT_SYSTEM_CONFIG, company_name="Cekap Guard (KL)", invoice_prefix="KL-INV-")

    services.settings_service.update_config(updated, OWNER)

    assert services.settings_service.get_config() == updated
    assert services.activity_repo.list_logs()[0].action == "Updated system settings"


def test_staff_cannot_update_settings(services) -> None:
    with pytest.raises(AccessDeniedError):
        services.settings_service.update_config(DEFAULT_SYSTEM_CONFIG, STAFF_AINA)


def test_prefix_is_required(services) -> None:
    with pytest.raises(ValidationError):
        services.settings_service.update_config(
            replace(DEFAULT_SYSTEM_CONFIG, receipt_prefix=" "), OWNER
        )


def auth_service(services) -> AuthService:
    return AuthService(AuthConfig(owner_emails=("owner@cekapguard.com",)), services.staff_repo)


def test_configured_owner_opens_owner_session(services) -> None:
    staff = auth_service(services).open_session("uid-1", "Owner@CekapGuard.com")
    assert staff.role == StaffRole.OWNER
    assert staff.name == "owner"
    assert staff.id == "uid-1"


def test_registered_staff_opens_staff_session(services) -> None:
    StaffService(services.staff_repo, services.activity_logger).add_staff(
        OWNER, "Aina Zulkifli", "aina@cekapguard.com"
    )

    staff = auth_service(services).open_session("uid-2", "aina@cekapguard.com")
    assert staff.role == StaffRole.STAFF
    assert staff.name == "Aina Zulkifli"


def test_unregistered_email_is_denied(services) -> None:
    with pytest.raises(AccessDeniedError):
        auth_service(services).open_session("uid-3", "owner.fan@example.com")


def test_staff_registry_is_owner_only(services) -> None:
    staff_service = StaffService(services.staff_repo, services.activity_logger)

    with pytest.raises(AccessDeniedError):
        staff_service.add_staff(STAFF_AINA, "Raj", "raj@cekapguard.com")
    with pytest.raises(AccessDeniedError):
        staff_service.list_staff(STAFF_AINA)


def test_staff_registry_add_list_remove(services) -> None:
    staff_service = StaffService(services.staff_repo, services.activity_logger)
    member_id = staff_service.add_staff(OWNER, "Raj Kumar", "Raj@CekapGuard.com")

    with pytest.raises(ValidationError):
        staff_service.add_staff(OWNER, "Raj Again", "raj@cekapguard.com")
    assert [member.email for member in staff_service.list_staff(OWNER)] == ["raj@cekapguard.com"]

    staff_service.remove_staff(OWNER, member_id)
    assert staff_service.list_staff(OWNER) == []
    with pytest.raises(ValidationError):
        staff_service.remove_staff(OWNER, member_id)
