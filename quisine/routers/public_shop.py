from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quisine.core.database import get_db
from quisine.schemas.orders import OrderCreate, OrderOut
from quisine.schemas.shop import StorefrontOut
from quisine.services import orders as order_service
from quisine.services import shops as shop_service

router = APIRouter(prefix="/shop", tags=["public"])


@router.get("/menu/{shop_id}", response_model=StorefrontOut)
def get_storefront(shop_id: str, db: Session = Depends(get_db)):
    return shop_service.storefront(db, shop_id)


@router.post("/order", response_model=OrderOut, status_code=201)
def place_order(payload: OrderCreate, db: Session = Depends(get_db)):
    order = order_service.place_order(
        db,
        tenant_id=payload.shop_id,
        table=payload.table,
        items=payload.items,
        total=payload.total,
    )
    return order_service.order_to_dict(order)


@router.get("/order/{order_id}", response_model=OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db)):
    """Receipt lookup by the order's public id, not its row id."""
    return order_service.order_to_dict(order_service.get_order_by_public_id(db, order_id))
