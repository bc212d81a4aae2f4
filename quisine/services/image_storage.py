"""Object-storage collaborator for menu photos and shop branding.

Uploads go to an S3-compatible bucket (Cloudflare R2). Only the public URL
is ever persisted; bytes never reach the database.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from uuid import uuid4

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from quisine.core.config import MAX_UPLOAD_BYTES
from quisine.core.errors import ImageStorageError, ValidationError

logger = logging.getLogger(__name__)
IMAGE_STORAGE_PREFIX = "[IMAGE_STORAGE]"
ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


def _get_required_env(var_name: str) -> str:
    value = os.getenv(var_name, "").strip()
    if not value:
        logger.error("%s missing env var %s", IMAGE_STORAGE_PREFIX, var_name)
        raise ImageStorageError()
    return value


def _get_r2_client():
    r2_account_id = _get_required_env("R2_ACCOUNT_ID")
    r2_access_key_id = _get_required_env("R2_ACCESS_KEY_ID")
    r2_secret_access_key = _get_required_env("R2_SECRET_ACCESS_KEY")

    import boto3

    return boto3.client(
        "s3",
        endpoint_url=f"https://{r2_account_id}.r2.cloudflarestorage.com",
        aws_access_key_id=r2_access_key_id,
        aws_secret_access_key=r2_secret_access_key,
        region_name="auto",
    )


def _sanitize_key_part(part: str) -> str:
    return part.strip().strip("/")


def _check_upload(file: UploadFile) -> str:
    extension = Path(file.filename or "").suffix.lower()
    if extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise ValidationError("Unsupported image type")

    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    if size > MAX_UPLOAD_BYTES:
        raise ValidationError("Image too large")
    return extension


def upload_file(file: UploadFile, tenant_id: str, category: str) -> str:
    """Store ``file`` under ``tenants/<tenant>/<category>/`` and return its public URL."""
    extension = _check_upload(file)
    r2_bucket_name = _get_required_env("R2_BUCKET_NAME")
    r2_public_url = _get_required_env("R2_PUBLIC_URL").rstrip("/")

    object_key = "/".join(
        [
            "tenants",
            _sanitize_key_part(tenant_id),
            _sanitize_key_part(category),
            f"{uuid4().hex}{extension}",
        ]
    )

    try:
        _get_r2_client().upload_fileobj(file.file, r2_bucket_name, object_key)
    except (BotoCoreError, ClientError) as exc:
        logger.error("%s upload failed key=%s error=%s", IMAGE_STORAGE_PREFIX, object_key, exc)
        raise ImageStorageError() from exc

    logger.info("%s uploaded key=%s", IMAGE_STORAGE_PREFIX, object_key)
    return f"{r2_public_url}/{object_key}"
