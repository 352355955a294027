from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship

from foodcourt.data.database import Base


class RatingModel(Base):
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    stall_id = Column(Integer, ForeignKey("stalls.id"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)
    comment = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    user = relationship("UserModel")

    #one rating per user and stall
    __table_args__ = (UniqueConstraint("user_id", "stall_id", name="u_rating_user_stall"),)
