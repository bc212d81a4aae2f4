from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from quisine.core.database import Base


class MenuItemModifier(Base):
    __tablename__ = "menu_item_modifiers"

    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), default=0, nullable=False)
    default_on = Column(Boolean, default=True, nullable=False)
    position = Column(Integer, default=0, nullable=False)

    item = relationship("MenuItem", back_populates="modifiers")
