# =============================================================================
# core/services/storage_service.py - Supabase Storage Uploads
# =============================================================================
# Uploads product images and curriculum documents to public buckets and
# returns their public URLs. Buckets are world-readable once uploaded; no
# signed URLs are issued.
# =============================================================================

import logging
import re
import time
from urllib.parse import quote

from app.config import settings
from app.exceptions import FileTooLargeError, InvalidFileError, StorageUploadError
from lib.codec import decode_data_url
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

PUBLIC_OBJECT_SEGMENT = "/storage/v1/object/public/"
DEFAULT_FILE_NAME = "file"

_UNSAFE_CHARS_RE = re.compile(r"[^\w.\-]+")


def safe_file_name(name: str | None) -> str:
    """Replace runs of characters outside [A-Za-z0-9_.-] with a dash."""
    return _UNSAFE_CHARS_RE.sub("-", name or DEFAULT_FILE_NAME) or DEFAULT_FILE_NAME


def build_object_path(path_prefix: str, filename: str | None, now_ms: int | None = None) -> str:
    """
    Example:
        build_object_path("products", "kit photo.png", 1700000000000)
        # "products/1700000000000-kit-photo.png"
    """
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    prefix = path_prefix.strip("/")
    name = f"{stamp}-{safe_file_name(filename)}"
    return f"{prefix}/{name}" if prefix else name


def _encode_object_path(path: str) -> str:
    return "/".join(quote(segment, safe="") for segment in path.split("/"))


class StorageService:
    """
    Object uploads to Supabase Storage.

    Args:
        client: supabase-py client (defaults to the shared service client)
        max_bytes: Upload size limit
    """

    def __init__(self, client=None, max_bytes: int | None = None):
        self._client = client
        self.max_bytes = settings.max_upload_size_bytes if max_bytes is None else max_bytes

    @property
    def client(self):
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    def public_url(self, bucket: str, path: str) -> str:
        """
        Public URL for an object.

        Falls back to building the URL from SUPABASE_URL when the client
        returns something that is not a public-object URL.
        """
        url = self.client.storage.from_(bucket).get_public_url(path) or ""
        if PUBLIC_OBJECT_SEGMENT in url:
            return url

        base_url = settings.SUPABASE_URL.rstrip("/")
        if not base_url:
            return url
        return f"{base_url}{PUBLIC_OBJECT_SEGMENT}{bucket}/{_encode_object_path(path)}"

    def upload(
        self,
        bucket: str,
        path_prefix: str,
        filename: str | None,
        content: bytes,
        content_type: str | None = None,
    ) -> str:
        """
        Upload bytes and return the object's public URL.

        Raises:
            FileTooLargeError: If content exceeds the size limit
            StorageUploadError: If the upload fails
        """
        if len(content) > self.max_bytes:
            raise FileTooLargeError(len(content) / (1024 * 1024), self.max_bytes // (1024 * 1024))

        path = build_object_path(path_prefix, filename)
        file_options = {"upsert": "true"}
        if content_type:
            file_options["content-type"] = content_type

        try:
            self.client.storage.from_(bucket).upload(
                path=path,
                file=content,
                file_options=file_options,
            )
        except Exception as e:
            logger.error(f"Storage upload to {bucket}/{path} failed: {e}")
            raise StorageUploadError(str(e)) from e

        logger.info(f"Uploaded {len(content)} bytes to {bucket}/{path}")
        return self.public_url(bucket, path)

    def upload_data_url(self, bucket: str, path_prefix: str, data_url: str, filename: str) -> tuple[str, int]:
        """
        Upload a file submitted as a data URL (e.g. from an admin form).

        Returns:
            Tuple of (public URL, decoded size in bytes)

        Raises:
            InvalidFileError: If the value is not a well-formed data URL
        """
        try:
            content, mime = decode_data_url(data_url)
        except ValueError as e:
            raise InvalidFileError(filename, str(e)) from e
        return self.upload(bucket, path_prefix, filename, content, content_type=mime), len(content)
