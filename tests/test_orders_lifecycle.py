from datetime import timedelta

import pytest

from quisine.core.clock import utcnow
from quisine.core.errors import NotFoundError, ValidationError
from quisine.models.order import Order
from quisine.models.order_item import OrderItem
from quisine.schemas.orders import LineItemIn, OrderStatus
from quisine.services import orders as order_service

from tests.fixtures_data import HAPPY_PATH_ORDER_TOTAL, order_payload


def test_place_order_passes_total_through_and_is_retrievable(client, shop):
    response = client.post(
        "/shop/order",
        json={
            "shop_id": shop["tenant_id"],
            "table": 7,
            "items": [{"name": "Couscous Royal", "qty": 2, "price": 35.0}],
            "total": 70.0,
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["total"] == 70.0
    assert body["table"] == 7
    assert body["items"] == [{"name": "Couscous Royal", "qty": 2, "price": 35.0, "modifiers": []}]

    receipt = client.get(f"/shop/order/{body['public_id']}")
    assert receipt.status_code == 200
    assert receipt.json()["id"] == body["id"]
    assert receipt.json()["status"] == "pending"


def test_place_order_does_not_recompute_total(client, shop):
    response = client.post("/shop/order", json=order_payload(shop["tenant_id"], total=1.0))

    assert response.status_code == 201
    assert response.json()["total"] == 1.0


def test_place_order_for_unknown_shop_is_not_found(client):
    response = client.post("/shop/order", json=order_payload("no-such-shop"))

    assert response.status_code == 404
    assert response.json() == {"msg": "Shop not found"}


def test_place_order_requires_items(client, shop):
    response = client.post("/shop/order", json=order_payload(shop["tenant_id"], items=[]))

    assert response.status_code == 400
    assert response.json()["msg"] == "Invalid request"


def test_get_unknown_order_is_not_found(client):
    response = client.get("/shop/order/0123456789abcdef0123456789abcdef")

    assert response.status_code == 404
    assert response.json() == {"msg": "Order not found"}


def test_receipt_is_not_addressable_by_sequential_id(client, shop, other_shop):
    first = client.post("/shop/order", json=order_payload(shop["tenant_id"])).json()
    second = client.post("/shop/order", json=order_payload(other_shop["tenant_id"])).json()

    assert first["public_id"] != second["public_id"]
    assert len(first["public_id"]) == 32
    assert client.get(f"/shop/order/{first['id']}").status_code == 404
    assert client.get(f"/shop/order/{second['id']}").status_code == 404
    assert client.get(f"/shop/order/{second['public_id']}").json()["tenant_id"] == other_shop["tenant_id"]


def test_whitespace_only_line_item_name_is_rejected(client, shop):
    payload = order_payload(shop["tenant_id"], items=[{"name": "   ", "qty": 1, "price": 4.5}])

    response = client.post("/shop/order", json=payload)

    assert response.status_code == 400
    assert response.json()["msg"] == "Invalid request"


def test_list_orders_newest_first_with_poll_hint(client, shop, db_session):
    earlier = client.post("/shop/order", json=order_payload(shop["tenant_id"], table=1)).json()
    later = client.post("/shop/order", json=order_payload(shop["tenant_id"], table=2)).json()
    backdated = client.post("/shop/order", json=order_payload(shop["tenant_id"], table=3)).json()
    db_session.query(Order).filter(Order.id == backdated["id"]).update(
        {Order.created_at: utcnow() - timedelta(hours=2)}, synchronize_session=False
    )
    db_session.commit()

    response = client.get(f"/admin/orders/{shop['tenant_id']}", headers=shop["headers"])

    assert response.status_code == 200
    assert response.headers["X-Poll-Interval"] == "10"
    assert [order["id"] for order in response.json()] == [later["id"], earlier["id"], backdated["id"]]


def test_orders_are_listed_per_tenant_only(client, shop, other_shop):
    client.post("/shop/order", json=order_payload(shop["tenant_id"]))
    client.post("/shop/order", json=order_payload(other_shop["tenant_id"]))

    response = client.get(f"/admin/orders/{other_shop['tenant_id']}", headers=other_shop["headers"])

    assert len(response.json()) == 1
    assert response.json()[0]["tenant_id"] == other_shop["tenant_id"]


@pytest.mark.parametrize(
    "path",
    [
        ["preparing", "ready", "completed"],
        ["cancelled"],
        ["preparing", "cancelled"],
    ],
)
def test_legal_status_paths(client, shop, path):
    order = client.post("/shop/order", json=order_payload(shop["tenant_id"])).json()

    for status in path:
        response = client.patch(
            f"/admin/order/{order['id']}/status",
            json={"status": status},
            headers=shop["headers"],
        )
        assert response.status_code == 200, response.text
        assert response.json()["status"] == status


@pytest.mark.parametrize(
    "setup, target",
    [
        ([], "ready"),
        ([], "completed"),
        (["preparing", "ready"], "pending"),
        (["preparing", "ready"], "cancelled"),
        (["cancelled"], "preparing"),
        (["preparing", "ready", "completed"], "pending"),
    ],
)
def test_illegal_status_transitions_are_rejected(client, shop, setup, target):
    order = client.post("/shop/order", json=order_payload(shop["tenant_id"])).json()
    for status in setup:
        client.patch(f"/admin/order/{order['id']}/status", json={"status": status}, headers=shop["headers"])

    response = client.patch(
        f"/admin/order/{order['id']}/status",
        json={"status": target},
        headers=shop["headers"],
    )

    assert response.status_code == 400
    assert response.json()["msg"].startswith("Illegal status transition")
    expected = setup[-1] if setup else "pending"
    assert client.get(f"/shop/order/{order['public_id']}").json()["status"] == expected


def test_unknown_status_value_is_rejected(client, shop):
    order = client.post("/shop/order", json=order_payload(shop["tenant_id"])).json()

    response = client.patch(
        f"/admin/order/{order['id']}/status",
        json={"status": "served"},
        headers=shop["headers"],
    )

    assert response.status_code == 400


def test_same_status_request_is_a_no_op():
    order_service.check_transition("pending", OrderStatus.PENDING)
    order_service.check_transition("ready", OrderStatus.READY)


def test_transition_table_is_closed():
    assert order_service.ALLOWED_TRANSITIONS[OrderStatus.COMPLETED] == frozenset()
    assert order_service.ALLOWED_TRANSITIONS[OrderStatus.CANCELLED] == frozenset()
    with pytest.raises(ValidationError):
        order_service.check_transition("ready", OrderStatus.PREPARING)
    with pytest.raises(ValidationError):
        order_service.check_transition("archived", OrderStatus.READY)


def test_status_update_on_foreign_order_is_not_found(client, shop, other_shop):
    order = client.post("/shop/order", json=order_payload(shop["tenant_id"])).json()

    response = client.patch(
        f"/admin/order/{order['id']}/status",
        json={"status": "preparing"},
        headers=other_shop["headers"],
    )

    assert response.status_code == 404
    assert client.get(f"/shop/order/{order['public_id']}").json()["status"] == "pending"


def test_delete_order_is_hard_and_idempotent(client, shop, db_session):
    order = client.post("/shop/order", json=order_payload(shop["tenant_id"])).json()

    first = client.delete(f"/admin/order/{order['id']}", headers=shop["headers"])
    second = client.delete(f"/admin/order/{order['id']}", headers=shop["headers"])

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json() == {"msg": "Order deleted"}
    assert client.get(f"/shop/order/{order['public_id']}").status_code == 404
    assert db_session.query(OrderItem).count() == 0


def test_line_items_are_snapshots(db_session, client, shop):
    order = order_service.place_order(
        db_session,
        shop["tenant_id"],
        None,
        [LineItemIn(name="  Brik à l'oeuf ", qty=3, price=4.5, modifiers=[{"name": "Extra Cheese", "price": 1.0}])],
        HAPPY_PATH_ORDER_TOTAL,
    )

    data = order_service.order_to_dict(order)
    assert data["table"] is None
    assert data["items"] == [
        {"name": "Brik à l'oeuf", "qty": 3, "price": 4.5, "modifiers": [{"name": "Extra Cheese", "price": 1.0}]}
    ]


def test_get_order_scoped_to_tenant(db_session, client, shop, other_shop):
    order = order_service.place_order(
        db_session, shop["tenant_id"], 2, [LineItemIn(name="Ojja Merguez", qty=1, price=18.0)], 18.0
    )

    assert order_service.get_order(db_session, order.id).id == order.id
    with pytest.raises(NotFoundError):
        order_service.get_order(db_session, order.id, tenant_id=other_shop["tenant_id"])
