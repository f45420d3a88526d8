"""Shared fixtures: a throwaway SQLite store wired like the application."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

import pytest

from cekap_app.core.config import (
    AppConfig,
    AttachmentConfig,
    AuthConfig,
    DatabaseConfig,
    EncryptionConfig,
    LoggingConfig,
    SuggestionConfig,
)
from cekap_app.core.crypto import CryptoService
from cekap_app.models.customer import CustomerCandidate, InsuranceType, VehicleType
from cekap_app.models.document import DocType, DocumentDraft
from cekap_app.models.settings import DEFAULT_SYSTEM_CONFIG
from cekap_app.models.staff import StaffContext, StaffRole
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
from cekap_app.services.customer_service import CustomerService
from cekap_app.services.document_service import DocumentService
from cekap_app.services.invoice_lifecycle import InvoiceLifecycleManager
from cekap_app.services.reconciliation_service import ReconciliationService
from cekap_app.services.settings_service import SettingsService

FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
OWNER = StaffContext(id="owner@cekapguard.com", name="owner", role=StaffRole.OWNER)
STAFF_AINA = StaffContext(id="aina@cekapguard.com", name="aina", role=StaffRole.STAFF)
STAFF_RAJ = StaffContext(id="raj@cekapguard.com", name="raj", role=StaffRole.STAFF)


def ticking_clock(start: datetime = FIXED_NOW, step: timedelta = timedelta(milliseconds=7)):
    """Clock that advances a little on every call so document numbers differ."""
    counter = itertools.count()
    return lambda: start + step * next(counter)


def make_config(tmp_path) -> AppConfig:
    return AppConfig(
        database=DatabaseConfig(
            path=str(tmp_path / "test.db"),
            key_env="CEKAP_DB_KEY",
            allow_sqlite_fallback=True,
        ),
        encryption=EncryptionConfig(key_env="CEKAP_ENCRYPTION_KEY"),
        logging=LoggingConfig(level="INFO", format="standard"),
        attachments=AttachmentConfig(directory=str(tmp_path / "attachments")),
        suggestions=SuggestionConfig(
            api_key_env="CEKAP_GEMINI_API_KEY",
            model="gemini-2.0-flash",
            timeout_seconds=1,
        ),
        auth=AuthConfig(owner_emails=("owner@cekapguard.com",)),
    )


@dataclass
class Services:
    pool: ThreadLocalConnection
    crypto: CryptoService
    feed: ChangeFeed
    activity_repo: ActivityRepository
    customer_repo: CustomerRepository
    document_repo: DocumentRepository
    staff_repo: StaffRepository
    activity_logger: ActivityLogger
    customer_service: CustomerService
    document_service: DocumentService
    lifecycle: InvoiceLifecycleManager
    reconciliation: ReconciliationService
    settings_service: SettingsService


def build_services(tmp_path, clock=None) -> Services:
    clock = clock or ticking_clock()
    config = make_config(tmp_path)
    pool = ThreadLocalConnection(config)
    initialize_schema(pool)

    crypto = CryptoService.from_base64_key(CryptoService.generate_base64_key())
    feed = ChangeFeed()
    activity_repo = ActivityRepository(pool, feed)
    customer_repo = CustomerRepository(pool, crypto, feed)
    document_repo = DocumentRepository(pool, crypto, feed)
    activity_logger = ActivityLogger(activity_repo, clock)
    customer_service = CustomerService(customer_repo, clock)
    document_service = DocumentService(
        document_repo,
        customer_service,
        pool,
        activity_logger,
        LocalAttachmentStore(config.attachments.directory),
        clock,
    )
    return Services(
        pool=pool,
        crypto=crypto,
        feed=feed,
        activity_repo=activity_repo,
        customer_repo=customer_repo,
        document_repo=document_repo,
        staff_repo=StaffRepository(pool, feed),
        activity_logger=activity_logger,
        customer_service=customer_service,
        document_service=document_service,
        lifecycle=InvoiceLifecycleManager(document_repo, pool, activity_logger, clock),
        reconciliation=ReconciliationService(document_repo, activity_logger),
        settings_service=SettingsService(SettingsRepository(pool, feed), activity_logger),
    )


@pytest.fixture
def services(tmp_path) -> Services:
    built = build_services(tmp_path)
    yield built
    built.pool.close_connection()


@pytest.fixture
def system_config():
    return DEFAULT_SYSTEM_CONFIG


def motor_candidate(**overrides) -> CustomerCandidate:
    values = {
        "name": "John Tan",
        "phone": "012-3456789",
        "ic": "900101101234",
        "vehicle_type": VehicleType.MOTOR,
        "vehicle_reg_no": "wxy 1234",
        "insurance_type": InsuranceType.COMPREHENSIVE,
    }
    values.update(overrides)
    return CustomerCandidate(**values)


def motor_draft(**overrides) -> DocumentDraft:
    values = {
        "doc_type": DocType.INVOICE,
        "issued_company": "Allianz",
        "issue_date": date(2024, 5, 1),
        "vehicle_type": VehicleType.MOTOR,
        "amount": "1200",
        "insurance_type": InsuranceType.COMPREHENSIVE,
        "service_charge": "50",
    }
    values.update(overrides)
    return DocumentDraft(**values)
