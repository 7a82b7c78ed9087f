"""
Resume blob storage.

Blobs are written once under an opaque, randomly generated name and are only
ever served back through the authorization-checked file endpoint.
"""
import logging
import mimetypes
import os
import uuid

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import storages
from django.http import FileResponse
from rest_framework import serializers

from .exceptions import BlobFailure, NotFound

logger = logging.getLogger(__name__)

MAX_RESUME_SIZE = 5 * 1024 * 1024  # 5MB in bytes
ALLOWED_RESUME_EXTENSIONS = {'.pdf', '.doc', '.docx', '.txt', '.rtf'}

_CONTENT_TYPES = {
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.txt': 'text/plain',
    '.rtf': 'application/rtf',
}
DEFAULT_CONTENT_TYPE = 'application/octet-stream'


def _guess_content_type(filename: str) -> str:
    ext = os.path.splitext(filename or '')[1].lower()
    if ext in _CONTENT_TYPES:
        return _CONTENT_TYPES[ext]
    guessed, _ = mimetypes.guess_type(filename or '')
    return guessed or DEFAULT_CONTENT_TYPE


def validate_resume(file_obj, max_size=None):
    """
    Validate an uploaded resume.

    Raises:
        rest_framework.serializers.ValidationError: empty, oversized, or
            unsupported file type
    """
    if max_size is None:
        max_size = getattr(settings, 'PORTAL_MAX_RESUME_BYTES', MAX_RESUME_SIZE)

    if file_obj is None:
        raise serializers.ValidationError('A resume file is required.')

    size = getattr(file_obj, 'size', None)
    if not size:
        raise serializers.ValidationError('The resume file is empty.')
    if size > max_size:
        size_mb = max_size / (1024 * 1024)
        raise serializers.ValidationError(f"File size exceeds maximum allowed size of {size_mb:g}MB")

    file_ext = os.path.splitext(file_obj.name or '')[1].lower()
    if file_ext not in ALLOWED_RESUME_EXTENSIONS:
        raise serializers.ValidationError(
            f"Invalid file type. Allowed types: {', '.join(sorted(ALLOWED_RESUME_EXTENSIONS))}"
        )
    return file_obj


class ResumeBlobGateway:
    """Stores and reads resume blobs through the ``resumes`` storage alias."""

    prefix = 'resumes'

    def __init__(self, storage=None):
        self._storage = storage

    @property
    def storage(self):
        # Resolved lazily so settings overrides in tests take effect
        return self._storage if self._storage is not None else storages['resumes']

    def store(self, data: bytes, original_name: str, mime: str = '') -> str:
        """Write ``data`` under a fresh opaque name and return its handle."""
        ext = os.path.splitext(original_name or '')[1].lower()
        name = f"{self.prefix}/{uuid.uuid4().hex}{ext}"
        try:
            handle = self.storage.save(name, ContentFile(data))
        except Exception as e:
            logger.error(f"Failed to store resume '{original_name}': {e}")
            raise BlobFailure() from e
        logger.info(f"Stored resume {handle} ({len(data)} bytes, {mime or 'unknown type'})")
        return handle

    def open(self, handle: str):
        if not handle:
            raise NotFound('Resume not found.')
        try:
            if not self.storage.exists(handle):
                raise NotFound('Resume not found.')
            return self.storage.open(handle, 'rb')
        except NotFound:
            raise
        except Exception as e:
            logger.error(f"Failed to open resume {handle}: {e}")
            raise BlobFailure() from e

    def detect_content_type(self, handle: str) -> str:
        return _guess_content_type(handle)


def resume_response(blobs, application, as_attachment=False):
    """
    Stream the application's resume.

    ``Content-Disposition`` is ``inline`` unless ``as_attachment`` is set. The
    stored content type wins over probing the handle.
    """
    file_obj = blobs.open(application.resume_handle)
    content_type = application.resume_content_type or blobs.detect_content_type(application.resume_handle)
    filename = application.resume_name or os.path.basename(application.resume_handle)
    return FileResponse(
        file_obj,
        as_attachment=as_attachment,
        filename=filename,
        content_type=content_type or DEFAULT_CONTENT_TYPE,
    )
