from uuid import uuid4

from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from quisine.core.clock import utcnow
from quisine.core.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String(32), index=True, nullable=False)
    # receipt handle for the public storefront; never sequential
    public_id = Column(String(32), unique=True, index=True, nullable=False, default=lambda: uuid4().hex)

    # 0 / None = counter or takeaway
    table_number = Column(Integer, nullable=True)
    total = Column(Numeric(10, 2), default=0, nullable=False)

    # pending / preparing / ready / completed / cancelled
    status = Column(String(16), default="pending", index=True, nullable=False)

    created_at = Column(DateTime, default=utcnow, index=True, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
