# participium/services/storage_service.py
"""
Photo blob storage on the local filesystem.

Files live under ``UPLOAD_DIR/reports/<report_id>/`` and are served
from ``/uploads``.
"""

import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional

from participium.config import settings
from participium.errors import BadRequestError
from participium.services.photo_validation import parse_data_uri

logger = logging.getLogger(__name__)

EXTENSION_BY_MIME = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

PUBLIC_PREFIX = "/uploads"


class StorageService:
    def __init__(self, upload_dir: Optional[str] = None):
        self.root = Path(upload_dir or settings.UPLOAD_DIR)

    def _report_dir(self, report_id: int) -> Path:
        return self.root / "reports" / str(report_id)

    def upload_photo(self, data_uri: str, report_id: int) -> str:
        """Write one data URI to disk and return its public URL."""
        parsed = parse_data_uri(data_uri)
        if parsed is None or parsed[0] not in EXTENSION_BY_MIME:
            raise BadRequestError("Photo is not a valid image data URI")
        mime, raw = parsed

        target_dir = self._report_dir(report_id)
        target_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid.uuid4().hex}.{EXTENSION_BY_MIME[mime]}"
        (target_dir / filename).write_bytes(raw)

        logger.debug("Stored photo %s for report %s", filename, report_id)
        return f"{PUBLIC_PREFIX}/reports/{report_id}/{filename}"

    def delete_report_photos(self, report_id: int) -> None:
        target_dir = self._report_dir(report_id)
        if target_dir.exists():
            shutil.rmtree(target_dir)
            logger.info("Deleted stored photos for report %s", report_id)
