"""
Resume Storage Service

Stores uploaded resumes on the local filesystem under
UPLOAD_DIR/interviews/resumes. Files are named
user_{id}_{company}_{timestamp_ms}.{ext} so ownership can be checked from
the filename alone.
"""

import logging
import os
import shutil
import time
from pathlib import Path
from typing import Dict, Optional

from jobtrack.config import settings
from jobtrack.core.exceptions import NotFoundError, PermissionDeniedError, ValidationFailedError
from jobtrack.utils.constants import RESUME_CONTENT_TYPES, RESUME_EXTENSIONS
from jobtrack.utils.helpers import sanitize_company

logger = logging.getLogger(__name__)


class ResumeStorageService:
    """Save, copy and resolve resume files."""

    def __init__(self, upload_dir: Optional[str] = None):
        self.upload_dir = Path(upload_dir or settings.UPLOAD_DIR)
        self.resume_dir = self.upload_dir / settings.RESUME_SUBDIR
        os.makedirs(self.resume_dir, exist_ok=True)

    @staticmethod
    def build_filename(user_id: int, company: Optional[str], extension: str) -> str:
        timestamp_ms = int(time.time() * 1000)
        return f"user_{user_id}_{sanitize_company(company)}_{timestamp_ms}.{extension}"

    @staticmethod
    def relative_path(filename: str) -> str:
        return f"{settings.RESUME_SUBDIR}/{filename}"

    def validate_upload(self, content_type: Optional[str], size: int) -> str:
        """Return the file extension for an allowed upload, raise otherwise."""
        if content_type not in settings.ALLOWED_RESUME_MIME_TYPES or content_type not in RESUME_EXTENSIONS:
            raise ValidationFailedError("Invalid file type. Only PDF, DOC, and DOCX files are allowed.")
        if size > settings.MAX_RESUME_SIZE:
            raise ValidationFailedError("File size too large. Maximum size is 10MB.")
        return RESUME_EXTENSIONS[content_type]

    def save(
        self,
        user_id: int,
        company: Optional[str],
        content: bytes,
        content_type: Optional[str],
        original_name: Optional[str] = None,
    ) -> Dict:
        extension = self.validate_upload(content_type, len(content))
        filename = self.build_filename(user_id, company, extension)
        target = self.resume_dir / filename

        with open(target, "wb") as f:
            f.write(content)

        logger.info(f"Stored resume {filename} ({len(content)} bytes) for user {user_id}")
        return {
            "filePath": self.relative_path(filename),
            "fileName": filename,
            "originalName": original_name,
            "size": len(content),
        }

    @staticmethod
    def check_access(filename: str, user_id: int, is_admin: bool) -> None:
        """Reject path tricks and, for non-admins, files owned by someone else."""
        if ".." in filename or "/" in filename or "\\" in filename:
            raise ValidationFailedError("Invalid filename")
        if not is_admin and not filename.startswith(f"user_{user_id}_"):
            raise PermissionDeniedError("Access denied")

    def copy(self, user_id: int, source_path: Optional[str], company: Optional[str], is_admin: bool = False) -> Dict:
        """Copy an existing resume to a new name for another application."""
        if not source_path:
            raise ValidationFailedError("Source resume path is required")

        prefix = f"{settings.RESUME_SUBDIR}/"
        source_name = source_path[len(prefix):] if source_path.startswith(prefix) else source_path
        self.check_access(source_name, user_id, is_admin)

        source = self.resume_dir / source_name
        if not source.is_file():
            raise NotFoundError("Source resume file not found")

        extension = source.suffix.lstrip(".") or "pdf"
        filename = self.build_filename(user_id, company, extension)
        shutil.copyfile(source, self.resume_dir / filename)

        logger.info(f"Copied resume {source_name} to {filename}")
        return {
            "filePath": self.relative_path(filename),
            "fileName": filename,
        }

    def resolve(self, filename: str, user_id: int, is_admin: bool) -> Path:
        """Path of a stored resume the requester may read."""
        self.check_access(filename, user_id, is_admin)

        path = self.resume_dir / filename
        if not path.is_file():
            raise NotFoundError("File not found")
        return path

    @staticmethod
    def content_type_for(filename: str) -> str:
        return RESUME_CONTENT_TYPES.get(Path(filename).suffix.lower(), "application/octet-stream")


def get_resume_storage() -> ResumeStorageService:
    """Dependency returning the resume storage for the configured upload dir."""
    return ResumeStorageService()
