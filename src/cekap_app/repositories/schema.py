"""Database schema management."""

from __future__ import annotations

from cekap_app.repositories.db_pool import ThreadLocalConnection


def initialize_schema(pool: ThreadLocalConnection) -> None:
    """Create required tables, indexes, and immutability triggers if missing."""
    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS customers (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            phone TEXT NOT NULL,
            ic_encrypted BLOB NOT NULL,
            ic_hash TEXT,
            email TEXT NOT NULL DEFAULT '',
            is_company INTEGER NOT NULL DEFAULT 0,
            vehicle_type TEXT NOT NULL,
            vehicle_reg_no TEXT NOT NULL DEFAULT '',
            insurance_type TEXT,
            others_category TEXT,
            last_updated TEXT NOT NULL
        )
        """
    )

    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS documents (
            id TEXT PRIMARY KEY,
            doc_number TEXT NOT NULL,
            doc_type TEXT NOT NULL,
            customer_id TEXT NOT NULL,
            customer_name TEXT NOT NULL,
            customer_ic_encrypted BLOB NOT NULL,
            issued_company TEXT NOT NULL,
            date TEXT NOT NULL,
            amount TEXT NOT NULL,
            insurance_details TEXT NOT NULL DEFAULT '',
            remarks TEXT NOT NULL DEFAULT '',
            staff_id TEXT NOT NULL,
            staff_name TEXT NOT NULL,
            vehicle_type TEXT NOT NULL,
            insurance_type TEXT,
            others_category TEXT,
            others_entries TEXT,
            base_amount TEXT,
            service_charge TEXT,
            attachment_url TEXT,
            invoice_id TEXT,
            paid_at TEXT,
            receipt_id TEXT,
            receipt_doc_number TEXT,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (customer_id) REFERENCES customers(id) ON DELETE RESTRICT
        )
        """
    )

    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS activity_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            timestamp TEXT NOT NULL,
            staff_name TEXT NOT NULL,
            action TEXT NOT NULL,
            doc_id TEXT
        )
        """
    )

    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS settings (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            payload TEXT NOT NULL,
            updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
    )

    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS staff (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            role TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
    )

    pool.execute("CREATE INDEX IF NOT EXISTS idx_customers_name ON customers(name)")
    pool.execute("CREATE INDEX IF NOT EXISTS idx_customers_ic_hash ON customers(ic_hash)")
    pool.execute("CREATE INDEX IF NOT EXISTS idx_documents_date ON documents(date)")
    pool.execute("CREATE INDEX IF NOT EXISTS idx_documents_invoice ON documents(invoice_id)")
    pool.execute(
        "CREATE INDEX IF NOT EXISTS idx_activity_logs_timestamp ON activity_logs(timestamp)"
    )

    pool.execute(
        """
        CREATE TRIGGER IF NOT EXISTS activity_logs_no_update
        BEFORE UPDATE ON activity_logs
        BEGIN
            SELECT RAISE(ABORT, 'activity logs are append-only');
        END
        """
    )
    pool.execute(
        """
        CREATE TRIGGER IF NOT EXISTS activity_logs_no_delete
        BEFORE DELETE ON activity_logs
        BEGIN
            SELECT RAISE(ABORT, 'activity logs are append-only');
        END
        """
    )
    pool.execute(
        """
        CREATE TRIGGER IF NOT EXISTS documents_financial_fields_fixed
        BEFORE UPDATE OF doc_type, doc_number, customer_id, date, amount ON documents
        BEGIN
            SELECT RAISE(ABORT, 'issued document fields are immutable');
        END
        """
    )
