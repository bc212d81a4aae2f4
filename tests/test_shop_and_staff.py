from quisine.models.staff_member import StaffMember
from quisine.services import shops as shop_service

from tests.fixtures_data import PNG_BYTES, STAFF_MANAGER, STAFF_WAITER


def test_get_shop_info_strips_credentials(client, shop):
    response = client.get(f"/admin/info/{shop['tenant_id']}", headers=shop["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["tenant_id"] == shop["tenant_id"]
    assert body["shop_name"] == "Bun & Beef"
    assert body["primary_color"] == "#000000"
    assert "password" not in body
    assert "password_hash" not in body


def test_update_shop_info_is_selective(client, shop, uploads):
    response = client.put(
        f"/admin/info/{shop['tenant_id']}",
        data={"address": "Rue du Lac Lochness, Tunis", "primary_color": "#ea580c"},
        files={"logo": ("logo.png", PNG_BYTES, "image/png")},
        headers=shop["headers"],
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["address"] == "Rue du Lac Lochness, Tunis"
    assert body["primary_color"] == "#ea580c"
    assert body["shop_name"] == "Bun & Beef"
    assert body["logo"].endswith("logo.png")
    assert body["cover"] is None
    assert uploads == [{"filename": "logo.png", "tenant_id": shop["tenant_id"], "category": "branding"}]


def test_update_shop_info_upload_failure_changes_nothing(client, shop, failing_upload):
    response = client.put(
        f"/admin/info/{shop['tenant_id']}",
        data={"shop_name": "Renamed"},
        files={"cover": ("cover.jpg", PNG_BYTES, "image/jpeg")},
        headers=shop["headers"],
    )

    assert response.status_code == 500
    assert response.json() == {"msg": "Image upload failed"}
    info = client.get(f"/admin/info/{shop['tenant_id']}", headers=shop["headers"]).json()
    assert info["shop_name"] == "Bun & Beef"


def test_staff_add_list_delete(client, shop):
    added = client.post("/admin/staff", json=STAFF_MANAGER, headers=shop["headers"])
    assert added.status_code == 200
    assert [member["name"] for member in added.json()] == ["Ahmed"]

    client.post("/admin/staff", json={**STAFF_WAITER, "tenant_id": shop["tenant_id"]}, headers=shop["headers"])
    listing = client.get(f"/admin/staff/{shop['tenant_id']}", headers=shop["headers"]).json()
    assert [(member["name"], member["role"]) for member in listing] == [("Ahmed", "Manager"), ("Sarah", "Waiter")]

    staff_id = listing[0]["id"]
    for _ in range(2):
        deleted = client.delete(f"/admin/staff/{shop['tenant_id']}/{staff_id}", headers=shop["headers"])
        assert deleted.status_code == 200
        assert deleted.json() == {"msg": "Staff deleted"}

    listing = client.get(f"/admin/staff/{shop['tenant_id']}", headers=shop["headers"]).json()
    assert [member["name"] for member in listing] == ["Sarah"]


def test_staff_pin_must_be_unique_per_shop(client, shop, other_shop):
    client.post("/admin/staff", json=STAFF_MANAGER, headers=shop["headers"])

    duplicate = client.post("/admin/staff", json={**STAFF_WAITER, "pin": "1234"}, headers=shop["headers"])
    elsewhere = client.post("/admin/staff", json=STAFF_MANAGER, headers=other_shop["headers"])

    assert duplicate.status_code == 400
    assert duplicate.json() == {"msg": "PIN already in use"}
    assert elsewhere.status_code == 200


def test_staff_pin_must_be_four_digits(client, shop):
    response = client.post("/admin/staff", json={**STAFF_MANAGER, "pin": "12a4"}, headers=shop["headers"])

    assert response.status_code == 400


def test_delete_staff_of_another_shop_is_ignored(client, db_session, shop, other_shop):
    client.post("/admin/staff", json=STAFF_MANAGER, headers=other_shop["headers"])
    victim = db_session.query(StaffMember).one()

    response = client.delete(f"/admin/staff/{shop['tenant_id']}/{victim.id}", headers=shop["headers"])

    assert response.status_code == 200
    assert db_session.query(StaffMember).count() == 1


def test_list_staff_for_missing_shop_is_empty(db_session):
    assert shop_service.list_staff(db_session, "no-such-tenant") == []


def test_storefront_hides_private_fields(client, shop):
    client.post("/admin/staff", json=STAFF_MANAGER, headers=shop["headers"])
    client.post("/admin/category", json={"name": "Gourmet Burgers"}, headers=shop["headers"])

    response = client.get(f"/shop/menu/{shop['tenant_id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["shop"]["shop_name"] == "Bun & Beef"
    for private in ("email", "password", "password_hash", "staff", "username"):
        assert private not in body["shop"]
    assert [category["name"] for category in body["menu"]["categories"]] == ["Gourmet Burgers"]


def test_storefront_for_unknown_shop(client):
    response = client.get("/shop/menu/nope")

    assert response.status_code == 404
    assert response.json() == {"msg": "Shop not found"}
