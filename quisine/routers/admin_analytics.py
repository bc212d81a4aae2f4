from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from quisine.core.database import get_db
from quisine.deps import ensure_same_tenant, get_current_shop, require_tenant_access
from quisine.models.shop import Shop
from quisine.schemas.analytics import DashboardStats, ExpenseCreate, ExpenseOut
from quisine.services import analytics as analytics_service

router = APIRouter(prefix="/admin", tags=["admin-analytics"])


@router.get("/stats/{tenant_id}", response_model=DashboardStats)
def get_stats(
    tenant_id: str = Depends(require_tenant_access),
    db: Session = Depends(get_db),
):
    return analytics_service.dashboard_stats(db, tenant_id)


@router.get("/expenses/{tenant_id}", response_model=List[ExpenseOut])
def list_expenses(
    tenant_id: str = Depends(require_tenant_access),
    db: Session = Depends(get_db),
):
    return [analytics_service.expense_to_dict(expense) for expense in analytics_service.list_expenses(db, tenant_id)]


@router.post("/expense", response_model=ExpenseOut)
def add_expense(
    payload: ExpenseCreate,
    request: Request,
    shop: Shop = Depends(get_current_shop),
    db: Session = Depends(get_db),
):
    tenant_id = ensure_same_tenant(shop, payload.tenant_id, request)
    expense = analytics_service.add_expense(db, tenant_id, payload)
    return analytics_service.expense_to_dict(expense)
