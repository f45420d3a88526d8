"""Local file store for contract attachments."""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from cekap_app.core.errors import PersistenceError, ValidationError

logger = logging.getLogger(__name__)


class LocalAttachmentStore:
    """Copies uploaded files into one directory and returns file URIs."""

    def __init__(self, directory: str | Path):
        self._directory = Path(directory)

    def upload(self, file_path: str | Path) -> str:
        source = Path(file_path)
        if not source.is_file():
            raise ValidationError(f"Attachment not found: {source}")

        target = self._directory / f"{uuid.uuid4().hex}_{source.name}"
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as error:
            raise PersistenceError(f"Attachment upload failed: {error}") from error
        return target.resolve().as_uri()

    def discard(self, url: str) -> None:
        """Remove a stored file whose document was never written."""
        target = Path(url2pathname(urlparse(url).path))
        try:
            target.unlink(missing_ok=True)
        except OSError:
            logger.exception("Could not remove orphaned attachment %s", target)
