from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LineItemModifier(BaseModel):
    name: str
    price: float = 0


class LineItemIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    qty: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    modifiers: List[LineItemModifier] = []


class OrderCreate(BaseModel):
    shop_id: str = Field(..., min_length=1)
    table: Optional[int] = Field(None, ge=0)
    items: List[LineItemIn] = Field(..., min_length=1)
    total: float = Field(..., ge=0)


class StatusUpdate(BaseModel):
    status: OrderStatus


class LineItemOut(BaseModel):
    name: str
    qty: int
    price: float
    modifiers: List[LineItemModifier] = []


class OrderOut(BaseModel):
    id: int
    public_id: str
    tenant_id: str
    table: Optional[int] = None
    items: List[LineItemOut]
    total: float
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
