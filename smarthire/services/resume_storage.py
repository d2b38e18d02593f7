"""
Resume file storage.

Stores uploaded resumes on disk and hands back the path as the opaque
reference kept on an application. Only PDF uploads are accepted.
"""

import time
from pathlib import Path
from typing import Optional

from smarthire.core.exceptions import ValidationError
from smarthire.utils.config import get_settings
from smarthire.utils.constants import (
    RESUME_CONTENT_TYPES,
    RESUME_FILE_PREFIX,
    SUPPORTED_RESUME_FORMATS,
)
from smarthire.utils.logger import get_logger

logger = get_logger(__name__)


class ResumeStorage:
    """Filesystem store for resume uploads."""

    def __init__(self, upload_dir: Optional[Path] = None, max_bytes: Optional[int] = None):
        storage_settings = get_settings().storage
        self.upload_dir = Path(upload_dir or storage_settings.upload_dir)
        self.max_bytes = max_bytes or storage_settings.max_resume_bytes

    def validate(self, filename: str, content: bytes, content_type: Optional[str]) -> None:
        """
        Check an upload against the PDF-only policy.

        Both the file extension and the declared content type must say PDF.

        Raises:
            ValidationError: if the upload is not an acceptable PDF
        """
        suffix = Path(filename or "").suffix.lower()
        if suffix not in SUPPORTED_RESUME_FORMATS:
            raise ValidationError("PDFs only", field="resume", filename=filename)
        if (content_type or "").split(";")[0].strip().lower() not in RESUME_CONTENT_TYPES:
            raise ValidationError("PDFs only", field="resume", content_type=content_type)
        if not content:
            raise ValidationError("Resume file is empty", field="resume")
        if len(content) > self.max_bytes:
            raise ValidationError(
                f"Resume exceeds {self.max_bytes} bytes",
                field="resume",
                size=len(content),
            )

    def _target_path(self) -> Path:
        # Millisecond timestamp, bumped on collision
        stamp = int(time.time() * 1000)
        path = self.upload_dir / f"{RESUME_FILE_PREFIX}-{stamp}.pdf"
        while path.exists():
            stamp += 1
            path = self.upload_dir / f"{RESUME_FILE_PREFIX}-{stamp}.pdf"
        return path

    def save(self, filename: str, content: bytes, content_type: Optional[str] = "application/pdf") -> str:
        """
        Store a resume upload.

        Args:
            filename: Original file name, used only for its extension
            content: Raw file bytes
            content_type: Declared MIME type of the upload

        Returns:
            Path of the stored file, as a string
        """
        self.validate(filename, content, content_type)

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self._target_path()
        path.write_bytes(content)

        logger.info(f"Stored resume {filename} as {path.name} ({len(content)} bytes)")
        return str(path)

    def save_file(self, source: Path) -> str:
        """Store a resume from a local file (used by the CLI)."""
        source = Path(source)
        if not source.is_file():
            raise ValidationError(f"Resume file not found: {source}", field="resume")
        content_type = "application/pdf" if source.suffix.lower() == ".pdf" else None
        return self.save(source.name, source.read_bytes(), content_type)


# Singleton instance
_resume_storage: Optional[ResumeStorage] = None


def get_resume_storage() -> ResumeStorage:
    """Get the resume storage singleton instance."""
    global _resume_storage
    if _resume_storage is None:
        _resume_storage = ResumeStorage()
    return _resume_storage
