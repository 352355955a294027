# foodcourt/api/routers/analytics.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from foodcourt.api.deps import get_actor
from foodcourt.data.database import get_db
from foodcourt.domain.actor import Actor
from foodcourt.domain.schemas import DashboardStats, RecentOrder, SalesPoint, TopStall
from foodcourt.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/dashboard-stats", response_model=DashboardStats)
def dashboard_stats(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return AnalyticsService(db).dashboard_stats(actor)


@router.get("/recent-orders", response_model=List[RecentOrder])
def recent_orders(
    limit: int = Query(10, ge=1, le=100),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).recent_orders(actor, limit)


@router.get("/top-stalls", response_model=List[TopStall])
def top_stalls(
    limit: int = Query(5, ge=1, le=50),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).top_stalls(actor, limit)


@router.get("/sales-trends", response_model=List[SalesPoint])
def sales_trends(
    days: int = Query(7, ge=1, le=366),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).sales_trends(actor, days)
