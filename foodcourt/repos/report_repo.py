from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from foodcourt.data.models.report import ReportModel


class ReportRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_report(self, report_id: int) -> ReportModel | None:
        return self.db.get(ReportModel, report_id)

    def list_by_user(self, user_id: int) -> List[ReportModel]:
        return list(
            self.db.execute(
                select(ReportModel)
                .where(ReportModel.generated_by == user_id)
                .order_by(ReportModel.created_at.desc(), ReportModel.id.desc())
            ).scalars().all()
        )

    def create_report(self, report: ReportModel) -> ReportModel:
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        return report
