#foodcourt/data/models/stall.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Boolean, Numeric, DateTime
from sqlalchemy.orm import relationship

from foodcourt.data.database import Base


class StallModel(Base):
    __tablename__ = "stalls"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String, nullable=False, index=True)
    description = Column(String, nullable=True)
    category = Column(String, nullable=False, index=True)
    rent = Column(Numeric(10, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    average_rating = Column(Numeric(3, 2), nullable=False, default=0)
    total_ratings = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    #deleting a stall deletes its menu
    menu_items = relationship("MenuItemModel", back_populates="stall", cascade="all, delete-orphan")
