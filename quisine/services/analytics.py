"""Dashboard analytics, recomputed from raw orders and expenses on every call.

Cancelled orders never count towards revenue, order count, the daily series
or the top-items ranking.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from quisine.core.clock import to_naive_utc, utcnow
from quisine.core.config import ANALYTICS_WINDOW_DAYS, EXPENSES_LIST_LIMIT, TOP_ITEMS_LIMIT
from quisine.models.expense import Expense
from quisine.models.order import Order
from quisine.models.order_item import OrderItem
from quisine.schemas.analytics import ExpenseCreate
from quisine.schemas.orders import OrderStatus

logger = logging.getLogger(__name__)
ANALYTICS_PREFIX = "[ANALYTICS]"


def _amount(value: Any) -> float:
    return round(float(value or 0), 2)


def _day_key(value: Any) -> str:
    # func.date yields a date on Postgres and a string on SQLite
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)


def _counted_orders(tenant_id: str) -> tuple:
    return (
        Order.tenant_id == tenant_id,
        Order.status != OrderStatus.CANCELLED.value,
    )


def summary(db: Session, tenant_id: str) -> Dict[str, Any]:
    revenue, orders_count = (
        db.query(func.coalesce(func.sum(Order.total), 0), func.count(Order.id))
        .filter(*_counted_orders(tenant_id))
        .one()
    )
    expenses = (
        db.query(func.coalesce(func.sum(Expense.amount), 0))
        .filter(Expense.tenant_id == tenant_id)
        .scalar()
    )

    revenue = _amount(revenue)
    expenses = _amount(expenses)
    return {
        "revenue": revenue,
        "expenses": expenses,
        "profit": round(revenue - expenses, 2),
        "orders": int(orders_count or 0),
    }


def daily_revenue(
    db: Session,
    tenant_id: str,
    days: int = ANALYTICS_WINDOW_DAYS,
    now: datetime | None = None,
) -> List[Dict[str, Any]]:
    """Revenue per calendar day over the trailing window.

    Sparse: a day without orders has no entry at all.
    """
    since = (now or utcnow()) - timedelta(days=days)
    day = func.date(Order.created_at)
    rows = (
        db.query(day.label("day"), func.coalesce(func.sum(Order.total), 0).label("revenue"))
        .filter(*_counted_orders(tenant_id), Order.created_at >= since)
        .group_by(day)
        .order_by(day.asc())
        .all()
    )
    return [{"date": _day_key(row.day), "revenue": _amount(row.revenue)} for row in rows]


def expenses_by_category(db: Session, tenant_id: str) -> List[Dict[str, Any]]:
    rows = (
        db.query(Expense.category.label("category"), func.sum(Expense.amount).label("value"))
        .filter(Expense.tenant_id == tenant_id)
        .group_by(Expense.category)
        .all()
    )
    return [{"category": row.category, "value": _amount(row.value)} for row in rows]


def top_items(db: Session, tenant_id: str, limit: int = TOP_ITEMS_LIMIT) -> List[Dict[str, Any]]:
    """Best sellers by total quantity.

    Grouped by the snapshot name: identical names from different categories
    merge, and a renamed dish starts a new row.
    """
    qty = func.sum(OrderItem.quantity).label("qty")
    sales = func.sum(OrderItem.quantity * OrderItem.unit_price).label("sales_total")
    rows = (
        db.query(OrderItem.name.label("name"), qty, sales)
        .join(Order, Order.id == OrderItem.order_id)
        .filter(*_counted_orders(tenant_id))
        .group_by(OrderItem.name)
        .order_by(desc(qty), OrderItem.name.asc())
        .limit(limit)
        .all()
    )
    return [
        {"name": row.name, "count": int(row.qty or 0), "sales": _amount(row.sales_total)}
        for row in rows
    ]


def dashboard_stats(db: Session, tenant_id: str) -> Dict[str, Any]:
    stats = {
        "summary": summary(db, tenant_id),
        "chart_data": daily_revenue(db, tenant_id),
        "expenses_pie": expenses_by_category(db, tenant_id),
        "top_items": top_items(db, tenant_id),
    }
    logger.info(
        "%s stats tenant_id=%s orders=%s days=%s",
        ANALYTICS_PREFIX,
        tenant_id,
        stats["summary"]["orders"],
        len(stats["chart_data"]),
    )
    return stats


# =========================
# EXPENSES
# =========================
def expense_to_dict(expense: Expense) -> dict:
    return {
        "id": expense.id,
        "tenant_id": expense.tenant_id,
        "title": expense.title,
        "amount": _amount(expense.amount),
        "category": expense.category,
        "date": expense.date.isoformat() if expense.date else None,
    }


def add_expense(db: Session, tenant_id: str, payload: ExpenseCreate) -> Expense:
    expense = Expense(
        tenant_id=tenant_id,
        title=payload.title,
        amount=Decimal(str(payload.amount)),
        category=payload.category,
        date=to_naive_utc(payload.date) if payload.date else utcnow(),
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info(
        "%s expense added tenant_id=%s category=%s amount=%s",
        ANALYTICS_PREFIX,
        tenant_id,
        expense.category,
        payload.amount,
    )
    return expense


def list_expenses(db: Session, tenant_id: str, limit: int = EXPENSES_LIST_LIMIT) -> List[Expense]:
    return (
        db.query(Expense)
        .filter(Expense.tenant_id == tenant_id)
        .order_by(desc(Expense.date), desc(Expense.id))
        .limit(limit)
        .all()
    )
