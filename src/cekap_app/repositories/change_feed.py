"""Push notifications for collection changes."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Callable

logger = logging.getLogger(__name__)

CUSTOMERS = "customers"
DOCUMENTS = "documents"
ACTIVITY_LOGS = "activity_logs"
SETTINGS = "settings"
STAFF = "staff"

Listener = Callable[[str], None]


class ChangeFeed:
    """Notifies subscribers after a collection has been written."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def watch(self, collection: str, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        with self._lock:
            self._listeners[collection].append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners[collection]:
                    self._listeners[collection].remove(listener)

        return unsubscribe

    def publish(self, collection: str) -> None:
        with self._lock:
            listeners = list(self._listeners[collection])
        for listener in listeners:
            try:
                listener(collection)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Change listener failed for %s", collection)
