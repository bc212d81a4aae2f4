from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from quisine.core.clock import utcnow
from quisine.core.database import Base


class Menu(Base):
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True)
    # one menu per shop
    tenant_id = Column(String(32), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    categories = relationship(
        "MenuCategory",
        back_populates="menu",
        cascade="all, delete-orphan",
        order_by="MenuCategory.position",
    )
