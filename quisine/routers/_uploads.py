from __future__ import annotations

from typing import Callable, Optional

from fastapi import UploadFile

from quisine.services import image_storage


def make_uploader(upload: Optional[UploadFile], tenant_id: str, category: str) -> Optional[Callable[[], str]]:
    """Defer the upload so the service decides when (and whether) it happens.

    Browsers send an empty part for an untouched file input; that counts as no file.
    """
    if upload is None or not upload.filename:
        return None
    return lambda: image_storage.upload_file(upload, tenant_id=tenant_id, category=category)
