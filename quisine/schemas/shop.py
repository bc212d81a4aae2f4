from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from quisine.schemas.menu import MenuOut

StaffRole = Literal["Manager", "Kitchen", "Waiter"]


class StaffCreate(BaseModel):
    tenant_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    pin: str = Field(..., pattern=r"^\d{4}$")
    role: StaffRole = "Waiter"


class StaffOut(BaseModel):
    id: int
    name: str
    pin: str
    role: str
    created_at: Optional[datetime] = None


class ShopOut(BaseModel):
    tenant_id: str
    username: str
    email: str
    shop_name: Optional[str] = None
    address: Optional[str] = None
    contact_phone: Optional[str] = None
    logo: Optional[str] = None
    cover: Optional[str] = None
    primary_color: str
    secondary_color: str
    staff: List[StaffOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PublicShopOut(BaseModel):
    tenant_id: str
    shop_name: Optional[str] = None
    address: Optional[str] = None
    contact_phone: Optional[str] = None
    logo: Optional[str] = None
    cover: Optional[str] = None
    primary_color: str
    secondary_color: str


class StorefrontOut(BaseModel):
    shop: PublicShopOut
    menu: Optional[MenuOut] = None
