from __future__ import annotations

import json
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from quisine.core.database import get_db
from quisine.core.errors import ValidationError
from quisine.deps import current_tenant_id, ensure_same_tenant, get_current_shop, require_tenant_access
from quisine.models.shop import Shop
from quisine.routers._uploads import make_uploader
from quisine.schemas.menu import AvailabilityUpdate, CategoryCreate, ItemFields, MenuOut, ModifierIn
from quisine.services import menu as menu_service

router = APIRouter(prefix="/admin", tags=["admin-menu"])


def _parse_modifiers(raw: Optional[str]) -> Optional[List[ModifierIn]]:
    if raw is None or raw.strip() == "":
        return None
    try:
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError("modifiers must be a list")
        return [ModifierIn.model_validate(entry) for entry in data]
    except (ValueError, PydanticValidationError) as exc:
        raise ValidationError("Invalid modifiers") from exc


def _item_fields(
    name: Optional[str],
    base_price: Optional[float],
    description: Optional[str],
    prep_time: Optional[int],
    modifiers: Optional[str],
) -> ItemFields:
    try:
        return ItemFields(
            name=name,
            base_price=base_price,
            description=description,
            prep_time=prep_time,
            modifiers=_parse_modifiers(modifiers),
        )
    except PydanticValidationError as exc:
        raise ValidationError("Invalid item fields") from exc


# =========================
# MENU / CATEGORIES
# =========================
@router.get("/menu/{tenant_id}", response_model=MenuOut)
def get_menu(
    tenant_id: str = Depends(require_tenant_access),
    db: Session = Depends(get_db),
):
    return menu_service.menu_to_dict(menu_service.get_or_create_menu(db, tenant_id))


@router.post("/category", response_model=MenuOut)
def add_category(
    payload: CategoryCreate,
    request: Request,
    shop: Shop = Depends(get_current_shop),
    db: Session = Depends(get_db),
):
    tenant_id = ensure_same_tenant(shop, payload.tenant_id, request)
    menu = menu_service.add_category(db, tenant_id, payload.name, payload.description)
    return menu_service.menu_to_dict(menu)


@router.delete("/category/{category_id}")
def delete_category(
    category_id: int,
    tenant_id: str = Depends(current_tenant_id),
    db: Session = Depends(get_db),
):
    menu_service.delete_category(db, tenant_id, category_id)
    return {"msg": "Category deleted"}


# =========================
# ITEMS
# =========================
@router.post("/category/{category_id}/item")
def add_item(
    category_id: int,
    tenant_id: str = Depends(current_tenant_id),
    name: str = Form(...),
    base_price: float = Form(...),
    description: Optional[str] = Form(None),
    prep_time: Optional[int] = Form(None),
    modifiers: Optional[str] = Form(None),
    image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    fields = _item_fields(name, base_price, description, prep_time, modifiers)
    item = menu_service.add_item(
        db,
        tenant_id,
        category_id,
        fields,
        upload_image=make_uploader(image, tenant_id, "items"),
    )
    return {"msg": "Item added", "item": menu_service.item_to_dict(item)}


@router.put("/category/{category_id}/item/{item_id}")
def update_item(
    category_id: int,
    item_id: int,
    tenant_id: str = Depends(current_tenant_id),
    name: Optional[str] = Form(None),
    base_price: Optional[float] = Form(None),
    description: Optional[str] = Form(None),
    prep_time: Optional[int] = Form(None),
    modifiers: Optional[str] = Form(None),
    image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    fields = _item_fields(name, base_price, description, prep_time, modifiers)
    item = menu_service.update_item(
        db,
        tenant_id,
        category_id,
        item_id,
        fields,
        upload_image=make_uploader(image, tenant_id, "items"),
    )
    return {"msg": "Item updated", "item": menu_service.item_to_dict(item)}


@router.delete("/category/{category_id}/item/{item_id}")
def delete_item(
    category_id: int,
    item_id: int,
    tenant_id: str = Depends(current_tenant_id),
    db: Session = Depends(get_db),
):
    menu_service.delete_item(db, tenant_id, category_id, item_id)
    return {"msg": "Item deleted"}


@router.patch("/category/{category_id}/item/{item_id}/availability")
def set_availability(
    category_id: int,
    item_id: int,
    payload: AvailabilityUpdate,
    tenant_id: str = Depends(current_tenant_id),
    db: Session = Depends(get_db),
):
    item = menu_service.set_availability(db, tenant_id, category_id, item_id, payload.available)
    return {"msg": "Availability updated", "item": menu_service.item_to_dict(item)}
