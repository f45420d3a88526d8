"""Application dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cekap_app.core.config import (
    AppConfig,
    ensure_runtime_keys,
    get_optional_env,
    get_required_env,
    load_config,
)
from cekap_app.core.crypto import CryptoService
from cekap_app.repositories.activity_repository import ActivityRepository
from cekap_app.repositories.change_feed import ChangeFeed
from cekap_app.repositories.customer_repository import CustomerRepository
from cekap_app.repositories.db_pool import ThreadLocalConnection
from cekap_app.repositories.document_repository import DocumentRepository
from cekap_app.repositories.schema import initialize_schema
from cekap_app.repositories.settings_repository import SettingsRepository
from cekap_app.repositories.staff_repository import StaffRepository
from cekap_app.services.activity_logger import ActivityLogger
from cekap_app.services.attachment_store import LocalAttachmentStore
from cekap_app.services.csv_export_service import CsvExportService
from cekap_app.services.customer_service import CustomerService
from cekap_app.services.document_service import DocumentService
from cekap_app.services.invoice_lifecycle import InvoiceLifecycleManager
from cekap_app.services.reconciliation_service import ReconciliationService
from cekap_app.services.settings_service import SettingsService
from cekap_app.services.staff_service import AuthService, StaffService
from cekap_app.services.suggestion_service import SuggestionService


@dataclass
class ServiceContainer:
    """Wires repositories and services."""

    config: AppConfig
    feed: ChangeFeed
    activity_repo: ActivityRepository
    customer_service: CustomerService
    document_service: DocumentService
    lifecycle_manager: InvoiceLifecycleManager
    reconciliation_service: ReconciliationService
    settings_service: SettingsService
    auth_service: AuthService
    staff_service: StaffService
    suggestion_service: SuggestionService
    csv_export_service: CsvExportService


def build_container(config_path: Path | None = None) -> ServiceContainer:
    """Build dependencies and initialize schema."""
    config = load_config(config_path)
    ensure_runtime_keys(config.database.path)
    crypto = CryptoService.from_base64_key(get_required_env(config.encryption.key_env))

    pool = ThreadLocalConnection(config)
    initialize_schema(pool)
    feed = ChangeFeed()

    activity_repo = ActivityRepository(pool, feed)
    customer_repo = CustomerRepository(pool, crypto, feed)
    document_repo = DocumentRepository(pool, crypto, feed)
    staff_repo = StaffRepository(pool, feed)
    activity_logger = ActivityLogger(activity_repo)

    customer_service = CustomerService(customer_repo)
    document_service = DocumentService(
        document_repo,
        customer_service,
        pool,
        activity_logger,
        LocalAttachmentStore(config.attachments.directory),
    )

    return ServiceContainer(
        config=config,
        feed=feed,
        activity_repo=activity_repo,
        customer_service=customer_service,
        document_service=document_service,
        lifecycle_manager=InvoiceLifecycleManager(document_repo, pool, activity_logger),
        reconciliation_service=ReconciliationService(document_repo, activity_logger),
        settings_service=SettingsService(SettingsRepository(pool, feed), activity_logger),
        auth_service=AuthService(config.auth, staff_repo),
        staff_service=StaffService(staff_repo, activity_logger),
        suggestion_service=SuggestionService(
            config.suggestions,
            get_optional_env(config.suggestions.api_key_env),
        ),
        csv_export_service=CsvExportService(),
    )
