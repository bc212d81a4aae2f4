from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from quisine.core.clock import utcnow
from quisine.core.database import Base


class MenuItem(Base):
    __tablename__ = "menu_items"
    __table_args__ = (Index("ix_menu_items_category_position", "category_id", "position"),)

    id = Column(Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey("menu_categories.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    base_price = Column(Numeric(10, 2), default=0, nullable=False)
    description = Column(Text, nullable=True)
    prep_time = Column(Integer, nullable=True)  # minutes
    available = Column(Boolean, default=True, nullable=False)
    position = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    category = relationship("MenuCategory", back_populates="items")
    modifiers = relationship(
        "MenuItemModifier",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="MenuItemModifier.position",
    )
