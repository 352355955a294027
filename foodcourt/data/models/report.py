from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, JSON

from foodcourt.data.database import Base


class ReportModel(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True)
    type = Column(String, nullable=False, index=True)  # sales, performance, stall-ranking
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)

    #figures are stored as computed, amounts as decimal strings
    data = Column(JSON, nullable=False)
    filters = Column(JSON, nullable=True)

    generated_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
