from sqlalchemy import JSON, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from quisine.core.database import Base


class OrderItem(Base):
    """Snapshot of a cart line at checkout; never points back at the live menu."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(String(32), index=True, nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False, default=0)
    modifiers = Column(JSON, nullable=False, default=list)

    order = relationship("Order", back_populates="order_items")
