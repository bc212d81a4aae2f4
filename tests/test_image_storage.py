import io

import pytest
from botocore.exceptions import ClientError
from fastapi import UploadFile

from quisine.core.errors import ImageStorageError, ValidationError
from quisine.services import image_storage

R2_ENV = {
    "R2_ACCOUNT_ID": "acc",
    "R2_ACCESS_KEY_ID": "key",
    "R2_SECRET_ACCESS_KEY": "secret",
    "R2_BUCKET_NAME": "quisine-media",
    "R2_PUBLIC_URL": "https://cdn.quisine.tn/",
}


class _FakeR2:
    def __init__(self, error=None):
        self.uploads = []
        self.error = error

    def upload_fileobj(self, fileobj, bucket, key):
        if self.error is not None:
            raise self.error
        self.uploads.append((bucket, key, fileobj.read()))


def _upload(name="burger.png", data=b"png-bytes") -> UploadFile:
    return UploadFile(file=io.BytesIO(data), filename=name)


@pytest.fixture
def r2_env(monkeypatch):
    for key, value in R2_ENV.items():
        monkeypatch.setenv(key, value)


def test_upload_returns_public_url_under_tenant_prefix(r2_env, monkeypatch):
    fake = _FakeR2()
    monkeypatch.setattr(image_storage, "_get_r2_client", lambda: fake)

    url = image_storage.upload_file(_upload(), tenant_id="t1", category="items")

    bucket, key, data = fake.uploads[0]
    assert bucket == "quisine-media"
    assert key.startswith("tenants/t1/items/")
    assert key.endswith(".png")
    assert data == b"png-bytes"
    assert url == f"https://cdn.quisine.tn/{key}"


def test_upload_rejects_unknown_extension(r2_env):
    with pytest.raises(ValidationError) as exc:
        image_storage.upload_file(_upload(name="menu.pdf"), tenant_id="t1", category="items")

    assert exc.value.detail == "Unsupported image type"


def test_upload_rejects_oversized_file(r2_env, monkeypatch):
    monkeypatch.setattr(image_storage, "MAX_UPLOAD_BYTES", 4)

    with pytest.raises(ValidationError) as exc:
        image_storage.upload_file(_upload(data=b"12345"), tenant_id="t1", category="items")

    assert exc.value.detail == "Image too large"


def test_upload_without_configuration_fails_as_storage_error(monkeypatch):
    for key in R2_ENV:
        monkeypatch.delenv(key, raising=False)

    with pytest.raises(ImageStorageError) as exc:
        image_storage.upload_file(_upload(), tenant_id="t1", category="items")

    assert exc.value.status_code == 500


def test_upload_client_error_is_storage_error(r2_env, monkeypatch):
    error = ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")
    monkeypatch.setattr(image_storage, "_get_r2_client", lambda: _FakeR2(error=error))

    with pytest.raises(ImageStorageError):
        image_storage.upload_file(_upload(), tenant_id="t1", category="items")
