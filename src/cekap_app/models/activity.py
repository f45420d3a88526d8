"""Activity log model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ActivityLog:
    """Append-only audit record of a staff action."""

    id: int
    timestamp: str
    staff_name: str
    action: str
    doc_id: str | None
