# =============================================================================
# app/routers/uploads.py - Storage Uploads (admin)
# =============================================================================
# Uploads product images and curriculum files to their public buckets and
# returns the public URL, which the client then stores on the product or in
# the module's asset list.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile
from pydantic import BaseModel, Field

from app.auth import require_admin
from app.config import settings
from app.dependencies import StorageServiceDep
from app.exceptions import InvalidUploadTargetError
from core.access import Requester

logger = logging.getLogger(__name__)

router = APIRouter()

# Upload target -> (bucket setting, default path prefix)
UPLOAD_TARGETS: dict[str, tuple[str, str]] = {
    "product-images": ("PRODUCT_IMAGE_BUCKET", "products"),
    "curriculum": ("CURRICULUM_BUCKET", "modules"),
}


class UploadResponse(BaseModel):
    """Result of a storage upload."""
    bucket: str
    url: str = Field(..., description="Public URL of the uploaded object")
    filename: str
    size_bytes: int


class DataUrlUpload(BaseModel):
    """A file submitted inline as a base64 data URL."""
    data_url: str = Field(..., description="data:<mime>;base64,<payload>")
    filename: str = Field(..., min_length=1)
    path_prefix: str | None = Field(None, description="Folder inside the bucket")


def _resolve_target(target: str) -> tuple[str, str]:
    """Map an upload target to (bucket, default path prefix)."""
    if target not in UPLOAD_TARGETS:
        raise InvalidUploadTargetError(target, list(UPLOAD_TARGETS))
    setting_name, default_prefix = UPLOAD_TARGETS[target]
    return getattr(settings, setting_name), default_prefix


@router.post("/uploads/{target}", response_model=UploadResponse)
async def upload_file(
    target: Annotated[str, Path(description="product-images or curriculum")],
    file: Annotated[UploadFile, File(description="File to upload")],
    storage: StorageServiceDep,
    path_prefix: Annotated[str | None, Form(description="Folder inside the bucket")] = None,
    requester: Requester = Depends(require_admin),
):
    """
    Upload a file to a public bucket.

    The object is stored at `<prefix>/<epoch-ms>-<sanitized filename>`.
    """
    bucket, default_prefix = _resolve_target(target)
    filename = file.filename or "file"

    content = await file.read()
    logger.info(f"Upload to {bucket} by {requester.id}: {filename} ({len(content)} bytes)")

    url = storage.upload(
        bucket,
        path_prefix or default_prefix,
        filename,
        content,
        content_type=file.content_type,
    )
    return UploadResponse(bucket=bucket, url=url, filename=filename, size_bytes=len(content))


@router.post("/uploads/{target}/data-url", response_model=UploadResponse)
async def upload_data_url(
    target: Annotated[str, Path(description="product-images or curriculum")],
    body: DataUrlUpload,
    storage: StorageServiceDep,
    requester: Requester = Depends(require_admin),
):
    """
    Upload a file sent as a data URL in a JSON body.

    Admin forms that read files client-side post them this way; the
    content type comes from the data URL itself.
    """
    bucket, default_prefix = _resolve_target(target)
    logger.info(f"Data URL upload to {bucket} by {requester.id}: {body.filename}")

    url, size = storage.upload_data_url(
        bucket,
        body.path_prefix or default_prefix,
        body.data_url,
        body.filename,
    )
    return UploadResponse(bucket=bucket, url=url, filename=body.filename, size_bytes=size)
