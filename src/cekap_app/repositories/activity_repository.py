"""Activity log repository. Entries are append-only."""

from __future__ import annotations

from typing import Any

from cekap_app.models.activity import ActivityLog
from cekap_app.repositories.change_feed import ACTIVITY_LOGS, ChangeFeed
from cekap_app.repositories.db_pool import ThreadLocalConnection


class ActivityRepository:
    """Persists and lists staff activity records."""

    def __init__(self, pool: ThreadLocalConnection, feed: ChangeFeed | None = None):
        self._pool = pool
        self._feed = feed

    def append_log(self, timestamp: str, staff_name: str, action: str, doc_id: str | None) -> int:
        """Insert an activity record and return its id."""
        cursor = self._pool.execute(
            """
            INSERT INTO activity_logs (timestamp, staff_name, action, doc_id)
            VALUES (?, ?, ?, ?)
            """,
            (timestamp, staff_name, action, doc_id),
        )
        if self._feed is not None:
            self._pool.after_commit(lambda: self._feed.publish(ACTIVITY_LOGS))
        return int(cursor.lastrowid)

    def list_logs(
        self,
        limit: int = 200,
        offset: int = 0,
        staff_name: str | None = None,
        keyword: str | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> list[ActivityLog]:
        """List activity records newest first with optional filters."""
        where_clauses: list[str] = []
        params: list[Any] = []

        if staff_name:
            where_clauses.append("staff_name = ?")
            params.append(staff_name)
        if keyword:
            where_clauses.append("(action LIKE ? OR doc_id LIKE ?)")
            params.extend([f"%{keyword.strip()}%", f"%{keyword.strip()}%"])
        if date_from:
            where_clauses.append("date(timestamp) >= date(?)")
            params.append(date_from.strip())
        if date_to:
            where_clauses.append("date(timestamp) <= date(?)")
            params.append(date_to.strip())

        where_sql = ""
        if where_clauses:
            where_sql = "WHERE " + " AND ".join(where_clauses)

        rows = self._pool.fetchall(
            f"""
            SELECT id, timestamp, staff_name, action, doc_id
            FROM activity_logs
            {where_sql}
            ORDER BY timestamp DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            tuple(params + [limit, offset]),
        )
        return [
            ActivityLog(
                id=row["id"],
                timestamp=row["timestamp"],
                staff_name=row["staff_name"],
                action=row["action"],
                doc_id=row["doc_id"],
            )
            for row in rows
        ]
