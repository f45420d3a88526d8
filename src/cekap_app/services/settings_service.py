"""Business identity settings."""

from __future__ import annotations

import logging

from cekap_app.core.errors import AccessDeniedError
from cekap_app.core.validation import validate_required_text
from cekap_app.models.settings import DEFAULT_SYSTEM_CONFIG, SystemConfig
from cekap_app.models.staff import StaffContext
from cekap_app.repositories.settings_repository import SettingsRepository
from cekap_app.services.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, settings_repo: SettingsRepository, activity_logger: ActivityLogger):
        self._settings_repo = settings_repo
        self._activity_logger = activity_logger

    def get_config(self) -> SystemConfig:
        """Return stored settings, writing the defaults on first load."""
        config = self._settings_repo.load()
        if config is None:
            logger.info("No system settings found; storing defaults")
            self._settings_repo.save(DEFAULT_SYSTEM_CONFIG)
            return DEFAULT_SYSTEM_CONFIG
        return config

    def update_config(self, config: SystemConfig, staff: StaffContext) -> SystemConfig:
        if not staff.is_owner:
            raise AccessDeniedError("Only the owner can change system settings.")
        validate_required_text(config.company_name, "Company name")
        validate_required_text(config.invoice_prefix, "Invoice prefix")
        validate_required_text(config.receipt_prefix, "Receipt prefix")
        self._settings_repo.save(config)
        self._activity_logger.record(staff.name, "Updated system settings")
        return config
