from typing import List, Optional

from pydantic import BaseModel, Field


class ModifierIn(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = 0
    on: bool = True


class ModifierOut(BaseModel):
    id: int
    name: str
    price: float
    on: bool


class MenuItemOut(BaseModel):
    id: int
    category_id: int
    name: str
    image_url: Optional[str] = None
    base_price: float
    description: Optional[str] = None
    prep_time: Optional[int] = None
    available: bool
    modifiers: List[ModifierOut] = []


class MenuCategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    items: List[MenuItemOut] = []


class MenuOut(BaseModel):
    id: int
    tenant_id: str
    categories: List[MenuCategoryOut] = []


class CategoryCreate(BaseModel):
    tenant_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class AvailabilityUpdate(BaseModel):
    available: bool


class ItemFields(BaseModel):
    """Text fields of an item form; ``None`` means "leave untouched" on update."""

    name: Optional[str] = Field(None, min_length=1)
    base_price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    prep_time: Optional[int] = Field(None, ge=0)
    modifiers: Optional[List[ModifierIn]] = None
