from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Boolean, Numeric, DateTime
from sqlalchemy.orm import relationship

from foodcourt.data.database import Base


class MenuItemModel(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True)
    stall_id = Column(Integer, ForeignKey("stalls.id"), nullable=False, index=True)

    name = Column(String, nullable=False, index=True)
    description = Column(String, nullable=True)
    category = Column(String, nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    stall = relationship("StallModel", back_populates="menu_items")
