"""Staff registry repository."""

from __future__ import annotations

import sqlite3

from cekap_app.models.staff import StaffMember, StaffRole
from cekap_app.repositories.change_feed import STAFF, ChangeFeed
from cekap_app.repositories.db_pool import ThreadLocalConnection


class StaffRepository:
    """Handles the registry of staff allowed to sign in."""

    def __init__(self, pool: ThreadLocalConnection, feed: ChangeFeed | None = None):
        self._pool = pool
        self._feed = feed

    @staticmethod
    def _to_member(row: sqlite3.Row) -> StaffMember:
        return StaffMember(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            role=StaffRole(row["role"]),
            created_at=row["created_at"],
        )

    def _publish(self) -> None:
        if self._feed is not None:
            self._pool.after_commit(lambda: self._feed.publish(STAFF))

    def add_member(self, name: str, email: str, role: StaffRole) -> int:
        cursor = self._pool.execute(
            "INSERT INTO staff (name, email, role) VALUES (?, ?, ?)",
            (name, email, role.value),
        )
        self._publish()
        return int(cursor.lastrowid)

    def find_by_email(self, email: str) -> StaffMember | None:
        row = self._pool.fetchone(
            "SELECT id, name, email, role, created_at FROM staff WHERE email = ?",
            (email,),
        )
        return self._to_member(row) if row else None

    def list_members(self) -> list[StaffMember]:
        rows = self._pool.fetchall(
            "SELECT id, name, email, role, created_at FROM staff ORDER BY name"
        )
        return [self._to_member(row) for row in rows]

    def remove_member(self, member_id: int) -> int:
        """Delete a registry entry and return affected row count."""
        cursor = self._pool.execute("DELETE FROM staff WHERE id = ?", (member_id,))
        if cursor.rowcount:
            self._publish()
        return cursor.rowcount
