from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.orm import Session

from quisine.core.database import get_db
from quisine.deps import ensure_same_tenant, get_current_shop, require_tenant_access
from quisine.models.shop import Shop
from quisine.routers._uploads import make_uploader
from quisine.schemas.shop import ShopOut, StaffCreate, StaffOut
from quisine.services import shops as shop_service

router = APIRouter(prefix="/admin", tags=["admin-shop"])


@router.get("/info/{tenant_id}", response_model=ShopOut)
def get_shop_info(
    tenant_id: str = Depends(require_tenant_access),
    db: Session = Depends(get_db),
):
    return shop_service.shop_to_dict(shop_service.get_shop(db, tenant_id))


@router.put("/info/{tenant_id}", response_model=ShopOut)
def update_shop_info(
    tenant_id: str = Depends(require_tenant_access),
    shop_name: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    contact_phone: Optional[str] = Form(None),
    primary_color: Optional[str] = Form(None),
    secondary_color: Optional[str] = Form(None),
    logo: UploadFile | None = File(None),
    cover: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    shop = shop_service.update_profile(
        db,
        tenant_id,
        {
            "shop_name": shop_name,
            "address": address,
            "contact_phone": contact_phone,
            "primary_color": primary_color,
            "secondary_color": secondary_color,
        },
        upload_logo=make_uploader(logo, tenant_id, "branding"),
        upload_cover=make_uploader(cover, tenant_id, "branding"),
    )
    return shop_service.shop_to_dict(shop)


# =========================
# STAFF
# =========================
@router.get("/staff/{tenant_id}", response_model=List[StaffOut])
def list_staff(
    tenant_id: str = Depends(require_tenant_access),
    db: Session = Depends(get_db),
):
    return [shop_service.staff_to_dict(member) for member in shop_service.list_staff(db, tenant_id)]


@router.post("/staff", response_model=List[StaffOut])
def add_staff(
    payload: StaffCreate,
    request: Request,
    shop: Shop = Depends(get_current_shop),
    db: Session = Depends(get_db),
):
    tenant_id = ensure_same_tenant(shop, payload.tenant_id, request)
    staff = shop_service.add_staff(db, tenant_id, payload)
    return [shop_service.staff_to_dict(member) for member in staff]


@router.delete("/staff/{tenant_id}/{staff_id}")
def delete_staff(
    staff_id: int,
    tenant_id: str = Depends(require_tenant_access),
    db: Session = Depends(get_db),
):
    shop_service.delete_staff(db, tenant_id, staff_id)
    return {"msg": "Staff deleted"}
