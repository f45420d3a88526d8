"""Application entry point."""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication, QInputDialog, QMessageBox

from cekap_app.core.container import build_container
from cekap_app.core.errors import AccessDeniedError
from cekap_app.core.logging import setup_logging
from cekap_app.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def run() -> None:
    """Launch the GUI application."""
    container = build_container()
    setup_logging(container.config.logging.level, container.config.logging.format)

    drift = container.reconciliation_service.find_drift()
    if drift:
        logger.warning("%d invoice(s) need payment reconciliation", len(drift))

    app = QApplication(sys.argv)
    email, accepted = QInputDialog.getText(None, "Sign in", "Staff email")
    if not accepted:
        sys.exit(0)
    try:
        staff = container.auth_service.open_session(email.strip().lower(), email)
    except AccessDeniedError as error:
        QMessageBox.critical(None, "Access denied", str(error))
        sys.exit(1)

    window = MainWindow(container, staff)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    run()
