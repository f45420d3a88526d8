"""Customer repository with encrypted identity-card numbers."""

from __future__ import annotations

import sqlite3

from cekap_app.core.crypto import CryptoService
from cekap_app.models.customer import Customer, InsuranceType, OthersCategory, VehicleType
from cekap_app.repositories.change_feed import CUSTOMERS, ChangeFeed
from cekap_app.repositories.db_pool import ThreadLocalConnection

CUSTOMER_COLUMNS = """
    id,
    name,
    phone,
    ic_encrypted,
    email,
    is_company,
    vehicle_type,
    vehicle_reg_no,
    insurance_type,
    others_category,
    last_updated
"""


class CustomerRepository:
    """Handles customer persistence and retrieval."""

    def __init__(
        self,
        pool: ThreadLocalConnection,
        crypto_service: CryptoService,
        feed: ChangeFeed | None = None,
    ):
        self._pool = pool
        self._crypto = crypto_service
        self._feed = feed

    def _ic_hash(self, ic: str) -> str | None:
        return self._crypto.lookup_hash(ic) if ic else None

    def _to_customer(self, row: sqlite3.Row) -> Customer:
        return Customer(
            id=row["id"],
            name=row["name"],
            phone=row["phone"],
            ic=self._crypto.decrypt_text(row["ic_encrypted"]),
            email=row["email"] or "",
            is_company=bool(row["is_company"]),
            vehicle_type=VehicleType(row["vehicle_type"]),
            vehicle_reg_no=row["vehicle_reg_no"] or "",
            insurance_type=InsuranceType(row["insurance_type"]) if row["insurance_type"] else None,
            others_category=(
                OthersCategory(row["others_category"]) if row["others_category"] else None
            ),
            last_updated=row["last_updated"],
        )

    def _publish(self) -> None:
        if self._feed is not None:
            self._pool.after_commit(lambda: self._feed.publish(CUSTOMERS))

    def create_customer(self, customer: Customer) -> str:
        """Insert a customer and return its id."""
        self._pool.execute(
            """
            INSERT INTO customers (
                id,
                name,
                phone,
                ic_encrypted,
                ic_hash,
                email,
                is_company,
                vehicle_type,
                vehicle_reg_no,
                insurance_type,
                others_category,
                last_updated
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                customer.id,
                customer.name,
                customer.phone,
                self._crypto.encrypt_text(customer.ic),
                self._ic_hash(customer.ic),
                customer.email,
                int(customer.is_company),
                customer.vehicle_type.value,
                customer.vehicle_reg_no,
                customer.insurance_type.value if customer.insurance_type else None,
                customer.others_category.value if customer.others_category else None,
                customer.last_updated,
            ),
        )
        self._publish()
        return customer.id

    def update_customer(self, customer: Customer) -> int:
        """Write the mutable contact and policy fields; return affected row count."""
        cursor = self._pool.execute(
            """
            UPDATE customers
            SET
                name = ?,
                phone = ?,
                ic_encrypted = ?,
                ic_hash = ?,
                vehicle_reg_no = ?,
                insurance_type = ?,
                others_category = ?,
                last_updated = ?
            WHERE id = ?
            """,
            (
                customer.name,
                customer.phone,
                self._crypto.encrypt_text(customer.ic),
                self._ic_hash(customer.ic),
                customer.vehicle_reg_no,
                customer.insurance_type.value if customer.insurance_type else None,
                customer.others_category.value if customer.others_category else None,
                customer.last_updated,
                customer.id,
            ),
        )
        if cursor.rowcount:
            self._publish()
        return cursor.rowcount

    def get_customer(self, customer_id: str) -> Customer | None:
        row = self._pool.fetchone(
            f"SELECT {CUSTOMER_COLUMNS} FROM customers WHERE id = ?",
            (customer_id,),
        )
        return self._to_customer(row) if row else None

    def find_by_ic(self, ic: str) -> Customer | None:
        """Exact identity-card lookup through the keyed hash column."""
        if not ic:
            return None
        row = self._pool.fetchone(
            f"SELECT {CUSTOMER_COLUMNS} FROM customers WHERE ic_hash = ? LIMIT 1",
            (self._ic_hash(ic),),
        )
        return self._to_customer(row) if row else None

    def list_customers(self) -> list[Customer]:
        """Return all customers, most recently updated first."""
        rows = self._pool.fetchall(
            f"SELECT {CUSTOMER_COLUMNS} FROM customers ORDER BY last_updated DESC, name"
        )
        return [self._to_customer(row) for row in rows]

    def count_customers(self) -> int:
        row = self._pool.fetchone("SELECT COUNT(*) AS total FROM customers")
        return int(row["total"]) if row else 0
