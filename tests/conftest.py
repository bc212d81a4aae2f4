"""Shared fixtures: in-memory SQLite, the full app with ``get_db`` overridden, signed-up shops."""

import os

os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quisine import main
from quisine.core.database import Base, get_db
from quisine.core.metrics import request_metrics
from quisine.services import image_storage
import quisine.models  # noqa: F401

from tests.fixtures_data import OWNER_PASSWORD, signup_payload

engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _make_client(db_session, monkeypatch, **client_kwargs):
    def override_get_db():
        yield db_session

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)
    main.app.dependency_overrides[get_db] = override_get_db
    return TestClient(main.app, **client_kwargs)


@pytest.fixture(scope="function")
def client(db_session, monkeypatch):
    with _make_client(db_session, monkeypatch) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()
    request_metrics.reset()


@pytest.fixture(scope="function")
def lenient_client(db_session, monkeypatch):
    """Client that returns 500 responses instead of re-raising server errors."""
    with _make_client(db_session, monkeypatch, raise_server_exceptions=False) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()
    request_metrics.reset()


@pytest.fixture
def uploads(monkeypatch):
    """Replace the object store; every upload is recorded and gets a fake CDN URL."""
    calls = []

    def _fake_upload(file, tenant_id, category):
        calls.append({"filename": file.filename, "tenant_id": tenant_id, "category": category})
        return f"https://cdn.quisine.tn/tenants/{tenant_id}/{category}/{len(calls)}-{file.filename}"

    monkeypatch.setattr(image_storage, "upload_file", _fake_upload)
    return calls


@pytest.fixture
def failing_upload(monkeypatch):
    from quisine.core.errors import ImageStorageError

    def _boom(file, tenant_id, category):
        raise ImageStorageError()

    monkeypatch.setattr(image_storage, "upload_file", _boom)


@pytest.fixture
def make_shop(client):
    """Sign up and log in a shop through the API; returns tenant id and auth headers."""

    def _make_shop(email: str = "owner@bunandbeef.tn", **overrides):
        payload = signup_payload(email=email, **overrides)
        signup = client.post("/auth/signup", json=payload)
        assert signup.status_code == 201, signup.text
        login = client.post("/auth/login", json={"email": email, "password": OWNER_PASSWORD})
        assert login.status_code == 200, login.text
        body = login.json()
        return {
            "tenant_id": body["tenant_id"],
            "token": body["token"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _make_shop


@pytest.fixture
def shop(make_shop):
    return make_shop()


@pytest.fixture
def other_shop(make_shop):
    return make_shop(email="chef@origami.tn", username="sushiadmin", shop_name="Origami Sushi Bar")
