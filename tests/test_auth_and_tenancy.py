import pytest
from jose import jwt

from quisine.core.config import JWT_ALGORITHM, JWT_SECRET_KEY
from quisine.models.menu import Menu
from quisine.models.shop import Shop
from quisine.schemas.auth import SignupPayload
from quisine.services import shops as shop_service
from quisine.services.auth import create_access_token, hash_password, verify_password

from tests.fixtures_data import OWNER_PASSWORD, TENANT_ACCESS_DENIED, signup_payload


def test_signup_creates_shop_and_empty_menu(client, db_session):
    response = client.post("/auth/signup", json=signup_payload())

    assert response.status_code == 201
    tenant_id = response.json()["tenant_id"]
    shop = db_session.query(Shop).filter(Shop.tenant_id == tenant_id).one()
    assert shop.email == "owner@bunandbeef.tn"
    assert shop.password_hash != OWNER_PASSWORD
    menu = db_session.query(Menu).filter(Menu.tenant_id == tenant_id).one()
    assert menu.categories == []


def test_signup_rejects_duplicate_email(client):
    client.post("/auth/signup", json=signup_payload())

    response = client.post("/auth/signup", json=signup_payload(email="OWNER@bunandbeef.tn", username="copycat"))

    assert response.status_code == 400
    assert response.json() == {"msg": "Email already exists"}


def test_signup_rejects_short_password(client):
    response = client.post("/auth/signup", json=signup_payload(password="123"))

    assert response.status_code == 400
    assert response.json()["msg"] == "Invalid request"


def test_signup_is_atomic_when_menu_creation_fails(db_session, monkeypatch):
    def _crash(db, tenant_id):
        raise RuntimeError("menu store unavailable")

    monkeypatch.setattr(shop_service, "create_empty_menu", _crash)

    with pytest.raises(RuntimeError):
        shop_service.signup(db_session, SignupPayload(**signup_payload()))

    assert db_session.query(Shop).count() == 0
    assert db_session.query(Menu).count() == 0


def test_login_returns_verifiable_token(client):
    signup = client.post("/auth/signup", json=signup_payload()).json()

    response = client.post("/auth/login", json={"email": "owner@bunandbeef.tn", "password": OWNER_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["tenant_id"] == signup["tenant_id"]
    assert body["email"] == "owner@bunandbeef.tn"
    assert body["token_type"] == "bearer"
    claims = jwt.decode(body["token"], JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    assert claims["tenant_id"] == signup["tenant_id"]
    assert "exp" in claims


@pytest.mark.parametrize(
    "email, password",
    [
        ("owner@bunandbeef.tn", "wrong-password"),
        ("nobody@bunandbeef.tn", OWNER_PASSWORD),
    ],
)
def test_login_rejects_bad_credentials(client, email, password):
    client.post("/auth/signup", json=signup_payload())

    response = client.post("/auth/login", json={"email": email, "password": password})

    assert response.status_code == 400
    assert response.json() == {"msg": "Invalid credentials"}


def test_token_endpoint_accepts_form_login(client):
    client.post("/auth/signup", json=signup_payload())

    response = client.post("/auth/token", data={"username": "owner@bunandbeef.tn", "password": OWNER_PASSWORD})

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"
    assert response.json()["access_token"]


def test_admin_routes_require_a_token(client, shop):
    response = client.get(f"/admin/menu/{shop['tenant_id']}")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_admin_routes_reject_forged_token(client, shop):
    forged = jwt.encode({"sub": "1", "tenant_id": shop["tenant_id"]}, "not-the-secret", algorithm="HS256")

    response = client.get(
        f"/admin/menu/{shop['tenant_id']}",
        headers={"Authorization": f"Bearer {forged}"},
    )

    assert response.status_code == 401


def test_token_for_deleted_shop_is_rejected(client, db_session):
    token = create_access_token(4242, "ghost-tenant")

    response = client.get("/admin/menu/ghost-tenant", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == {"msg": "Shop not found"}


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/admin/menu/{tenant}"),
        ("get", "/admin/info/{tenant}"),
        ("get", "/admin/orders/{tenant}"),
        ("get", "/admin/stats/{tenant}"),
        ("get", "/admin/expenses/{tenant}"),
        ("get", "/admin/staff/{tenant}"),
        ("delete", "/admin/staff/{tenant}/1"),
    ],
)
def test_path_tenant_must_match_token(client, shop, other_shop, method, path):
    response = getattr(client, method)(path.format(tenant=other_shop["tenant_id"]), headers=shop["headers"])

    assert response.status_code == TENANT_ACCESS_DENIED["expected_status_code"]
    assert response.json() == {"msg": TENANT_ACCESS_DENIED["expected_detail"]}


def test_body_tenant_must_match_token(client, shop, other_shop):
    response = client.post(
        "/admin/category",
        json={"tenant_id": other_shop["tenant_id"], "name": "Hijack"},
        headers=shop["headers"],
    )

    assert response.status_code == 403


def test_password_hashing_roundtrip():
    hashed = hash_password(OWNER_PASSWORD)

    assert verify_password(OWNER_PASSWORD, hashed)
    assert not verify_password("password124", hashed)
    assert not verify_password(OWNER_PASSWORD, "not-a-bcrypt-hash")
