from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

ExpenseCategory = Literal["Supplies", "Rent", "Utilities", "Salaries", "Maintenance", "Other"]


class ExpenseCreate(BaseModel):
    tenant_id: Optional[str] = None
    title: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    category: ExpenseCategory = "Supplies"
    date: Optional[datetime] = None


class ExpenseOut(BaseModel):
    id: int
    tenant_id: str
    title: str
    amount: float
    category: str
    date: datetime


class StatsSummary(BaseModel):
    revenue: float
    expenses: float
    profit: float
    orders: int


class DailyRevenuePoint(BaseModel):
    date: str
    revenue: float


class ExpenseSlice(BaseModel):
    category: str
    value: float


class TopItem(BaseModel):
    name: str
    count: int
    sales: float


class DashboardStats(BaseModel):
    summary: StatsSummary
    chart_data: List[DailyRevenuePoint]
    expenses_pie: List[ExpenseSlice]
    top_items: List[TopItem]
