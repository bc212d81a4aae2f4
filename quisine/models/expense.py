from sqlalchemy import Column, DateTime, Integer, Numeric, String

from quisine.core.clock import utcnow
from quisine.core.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String(32), index=True, nullable=False)

    title = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    category = Column(String(16), default="Supplies", nullable=False)
    date = Column(DateTime, default=utcnow, index=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
