from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from quisine.core.clock import utcnow
from quisine.core.database import Base


class Shop(Base):
    __tablename__ = "shops"

    id = Column(Integer, primary_key=True)
    # public tenant handle used in routes and table QR codes
    tenant_id = Column(String(32), unique=True, index=True, nullable=False)

    username = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    shop_name = Column(String, nullable=True)
    address = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)

    logo = Column(String, nullable=True)
    cover = Column(String, nullable=True)
    primary_color = Column(String(16), default="#000000", nullable=False)
    secondary_color = Column(String(16), default="#ffffff", nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    staff = relationship(
        "StaffMember",
        back_populates="shop",
        cascade="all, delete-orphan",
        order_by="StaffMember.id",
    )
