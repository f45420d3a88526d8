"""Best-effort writer for the staff activity log."""

from __future__ import annotations

import logging

from cekap_app.core.clock import Clock, utc_now
from cekap_app.repositories.activity_repository import ActivityRepository

logger = logging.getLogger(__name__)


class ActivityLogger:
    """Appends audit records without ever failing the calling operation."""

    def __init__(self, activity_repo: ActivityRepository, clock: Clock = utc_now):
        self._activity_repo = activity_repo
        self._clock = clock

    def record(self, staff_name: str, action: str, related_doc_id: str | None = None) -> bool:
        """Append one entry; return False when the write failed."""
        try:
            self._activity_repo.append_log(
                self._clock().isoformat(),
                staff_name,
                action,
                related_doc_id,
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "Activity log write failed: staff=%s action=%s doc=%s",
                staff_name,
                action,
                related_doc_id,
            )
            return False
        return True
