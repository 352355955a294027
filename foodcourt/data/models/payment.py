from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, JSON
from datetime import datetime, timezone

from foodcourt.data.database import Base


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String, nullable=False)
    transaction_id = Column(String, nullable=True, unique=True)
    status = Column(String, nullable=False, default="Pending")  # Pending, Completed, Failed, Refunded
    gateway_response = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
