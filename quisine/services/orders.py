from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import desc
from sqlalchemy.orm import Session, selectinload

from quisine.core.errors import NotFoundError, ValidationError
from quisine.models.order import Order
from quisine.models.order_item import OrderItem
from quisine.models.shop import Shop
from quisine.schemas.orders import LineItemIn, OrderStatus

logger = logging.getLogger(__name__)
ORDERS_PREFIX = "[ORDERS]"

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def _money(value) -> float:
    return float(value) if value is not None else 0.0


def order_item_to_dict(item: OrderItem) -> dict:
    return {
        "name": item.name,
        "qty": item.quantity,
        "price": _money(item.unit_price),
        "modifiers": item.modifiers or [],
    }


def order_to_dict(order: Order) -> dict:
    return {
        "id": order.id,
        "public_id": order.public_id,
        "tenant_id": order.tenant_id,
        "table": order.table_number,
        "items": [order_item_to_dict(item) for item in order.order_items],
        "total": _money(order.total),
        "status": order.status,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
    }


def _snapshot_items(tenant_id: str, items: list[LineItemIn]) -> list[OrderItem]:
    return [
        OrderItem(
            tenant_id=tenant_id,
            name=entry.name,
            quantity=entry.qty,
            unit_price=Decimal(str(entry.price)),
            modifiers=[modifier.model_dump() for modifier in entry.modifiers],
        )
        for entry in items
    ]


def place_order(
    db: Session,
    tenant_id: str,
    table: int | None,
    items: list[LineItemIn],
    total: float,
) -> Order:
    """Persist a checkout as a pending order.

    The client-computed total is stored as sent; line items are copied, so later
    menu edits never alter this order.
    """
    shop_exists = db.query(Shop.id).filter(Shop.tenant_id == tenant_id).first()
    if shop_exists is None:
        raise NotFoundError("Shop")

    order = Order(
        tenant_id=tenant_id,
        table_number=table,
        total=Decimal(str(total)),
        status=OrderStatus.PENDING.value,
    )
    order.order_items = _snapshot_items(tenant_id, items)
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info(
        "%s placed order_id=%s tenant_id=%s table=%s items=%s total=%s",
        ORDERS_PREFIX,
        order.id,
        tenant_id,
        table,
        len(items),
        total,
    )
    return order


def _orders_query(db: Session):
    return db.query(Order).options(selectinload(Order.order_items))


def list_orders(db: Session, tenant_id: str) -> list[Order]:
    return (
        _orders_query(db)
        .filter(Order.tenant_id == tenant_id)
        .order_by(desc(Order.created_at), desc(Order.id))
        .all()
    )


def get_order(db: Session, order_id: int, tenant_id: str | None = None) -> Order:
    query = _orders_query(db).filter(Order.id == order_id)
    if tenant_id is not None:
        query = query.filter(Order.tenant_id == tenant_id)
    order = query.first()
    if order is None:
        raise NotFoundError("Order")
    return order


def get_order_by_public_id(db: Session, public_id: str) -> Order:
    order = _orders_query(db).filter(Order.public_id == public_id).first()
    if order is None:
        raise NotFoundError("Order")
    return order


def check_transition(current: str, target: OrderStatus) -> None:
    try:
        current_status = OrderStatus(current)
    except ValueError as exc:
        raise ValidationError(f"Unknown current status: {current}") from exc

    if current_status == target:
        return
    if target not in ALLOWED_TRANSITIONS[current_status]:
        raise ValidationError(f"Illegal status transition: {current_status.value} -> {target.value}")


def update_status(db: Session, tenant_id: str, order_id: int, status: OrderStatus) -> Order:
    order = get_order(db, order_id, tenant_id=tenant_id)
    previous = order.status
    check_transition(previous, status)

    if previous != status.value:
        order.status = status.value
        db.commit()
        db.refresh(order)
        logger.info(
            "%s status order_id=%s tenant_id=%s %s -> %s",
            ORDERS_PREFIX,
            order.id,
            tenant_id,
            previous,
            status.value,
        )
    return order


def delete_order(db: Session, tenant_id: str, order_id: int) -> None:
    """Hard delete; deleting an order that is already gone is a no-op."""
    order = (
        db.query(Order)
        .filter(Order.id == order_id, Order.tenant_id == tenant_id)
        .first()
    )
    if order is None:
        return
    db.delete(order)
    db.commit()
    logger.info("%s deleted order_id=%s tenant_id=%s", ORDERS_PREFIX, order_id, tenant_id)
