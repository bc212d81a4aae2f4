from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from quisine.core.clock import utcnow
from quisine.core.database import Base


class StaffMember(Base):
    __tablename__ = "staff_members"
    __table_args__ = (UniqueConstraint("shop_id", "pin", name="uq_staff_members_shop_pin"),)

    id = Column(Integer, primary_key=True)
    shop_id = Column(Integer, ForeignKey("shops.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String, nullable=False)
    pin = Column(String(4), nullable=False)
    role = Column(String(16), default="Waiter", nullable=False)  # Manager | Kitchen | Waiter
    created_at = Column(DateTime, default=utcnow, nullable=False)

    shop = relationship("Shop", back_populates="staff")
