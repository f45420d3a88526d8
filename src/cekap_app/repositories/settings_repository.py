"""System configuration repository (single row)."""

from __future__ import annotations

import json
from dataclasses import asdict

from cekap_app.models.settings import SystemConfig
from cekap_app.repositories.change_feed import SETTINGS, ChangeFeed
from cekap_app.repositories.db_pool import ThreadLocalConnection


class SettingsRepository:
    def __init__(self, pool: ThreadLocalConnection, feed: ChangeFeed | None = None):
        self._pool = pool
        self._feed = feed

    def load(self) -> SystemConfig | None:
        row = self._pool.fetchone("SELECT payload FROM settings WHERE id = 1")
        if not row:
            return None
        return SystemConfig(**json.loads(row["payload"]))

    def save(self, config: SystemConfig) -> None:
        self._pool.execute(
            """
            INSERT INTO settings (id, payload) VALUES (1, ?)
            ON CONFLICT(id) DO UPDATE SET
                payload = excluded.payload,
                updated_at = CURRENT_TIMESTAMP
            """,
            (json.dumps(asdict(config), ensure_ascii=False),),
        )
        if self._feed is not None:
            self._pool.after_commit(lambda: self._feed.publish(SETTINGS))
