# foodcourt/api/routers/reports.py
from typing import Annotated, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from foodcourt.api.deps import get_actor
from foodcourt.data.database import get_db
from foodcourt.domain.actor import Actor
from foodcourt.domain.schemas import ReportOut, ReportRange, SalesReportQuery
from foodcourt.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/", response_model=List[ReportOut])
def list_reports(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return ReportService(db).list_reports(actor)


#generators before /{report_id}
@router.get("/sales", response_model=ReportOut)
def sales_report(
    query: Annotated[SalesReportQuery, Query()],
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return ReportService(db).sales_report(actor, query)


@router.get("/performance", response_model=ReportOut)
def performance_report(
    query: Annotated[ReportRange, Query()],
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return ReportService(db).performance_report(actor, query)


@router.get("/stall-ranking", response_model=ReportOut)
def stall_ranking_report(
    query: Annotated[ReportRange, Query()],
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return ReportService(db).stall_ranking_report(actor, query)


@router.get("/{report_id}", response_model=ReportOut)
def get_report(report_id: int, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return ReportService(db).get_report(actor, report_id)
