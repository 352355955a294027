from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from foodcourt.data.database import Base

class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String, nullable=False, default="Pending")  # Pending, Preparing, Ready for Pickup, Completed, Cancelled
    payment_status = Column(String, nullable=False, default="Pending")
    payment_method = Column(String, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)

    delivery_address = Column(JSON, nullable=True)
    order_notes = Column(String, nullable=True)

    #compare-and-swap on status transitions
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
    customer = relationship("UserModel")
