from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from quisine.core.config import ORDER_POLL_INTERVAL_SECONDS
from quisine.core.database import get_db
from quisine.deps import current_tenant_id, require_tenant_access
from quisine.schemas.orders import OrderOut, StatusUpdate
from quisine.services import orders as order_service

router = APIRouter(prefix="/admin", tags=["admin-orders"])


@router.get("/orders/{tenant_id}", response_model=List[OrderOut])
def list_orders(
    response: Response,
    tenant_id: str = Depends(require_tenant_access),
    db: Session = Depends(get_db),
):
    # the kitchen display polls; the header carries the suggested interval
    response.headers["X-Poll-Interval"] = str(ORDER_POLL_INTERVAL_SECONDS)
    return [order_service.order_to_dict(order) for order in order_service.list_orders(db, tenant_id)]


@router.patch("/order/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: StatusUpdate,
    tenant_id: str = Depends(current_tenant_id),
    db: Session = Depends(get_db),
):
    order = order_service.update_status(db, tenant_id, order_id, payload.status)
    return order_service.order_to_dict(order)


@router.delete("/order/{order_id}")
def delete_order(
    order_id: int,
    tenant_id: str = Depends(current_tenant_id),
    db: Session = Depends(get_db),
):
    order_service.delete_order(db, tenant_id, order_id)
    return {"msg": "Order deleted"}
