# foodcourt/services/report_service.py
from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from foodcourt.data.models.order import OrderModel
from foodcourt.data.models.report import ReportModel
from foodcourt.domain.actor import Actor
from foodcourt.domain.enums import OrderStatus
from foodcourt.domain.errors import NotFoundError, Unauthorized
from foodcourt.domain.schemas import ReportRange, SalesReportQuery
from foodcourt.repos.order_repo import OrderRepo
from foodcourt.repos.report_repo import ReportRepo
from foodcourt.repos.stall_repo import StallRepo
from foodcourt.utils.dates import as_utc
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

SALES = "sales"
PERFORMANCE = "performance"
STALL_RANKING = "stall-ranking"

UNKNOWN_STALL = "Unknown Stall"


class ReportService:
    """
    Stored reports of the food-court owner.

    Each generator reads the orders of the requested range, computes its
    figures, saves them as a report owned by the caller and returns it.
    Sales and stall ranking only count Completed orders, the performance
    report covers every status. Amounts are stored as decimal strings.
    """

    def __init__(self, db: Session):
        self.repo = ReportRepo(db)
        self.order_repo = OrderRepo(db)
        self.stall_repo = StallRepo(db)

    def sales_report(self, actor: Actor, query: SalesReportQuery) -> ReportModel:
        self._require_owner(actor)

        orders = self._orders(query, OrderStatus.COMPLETED.value)
        if query.stall_id is not None:
            orders = [o for o in orders if any(line.stall_id == query.stall_id for line in o.items)]

        names = self._stall_names(orders)
        total_sales = ZERO
        by_stall = defaultdict(lambda: ZERO)
        by_date = defaultdict(lambda: ZERO)

        for order in orders:
            total_sales += Decimal(order.total_amount)
            by_date[as_utc(order.created_at).date().isoformat()] += Decimal(order.total_amount)
            for line in order.items:
                by_stall[names.get(line.stall_id, UNKNOWN_STALL)] += Decimal(line.price) * line.quantity

        average = (total_sales / len(orders)).quantize(CENT) if orders else ZERO

        data = {
            "total_sales": str(total_sales),
            "total_orders": len(orders),
            "average_order_value": str(average),
            "sales_by_stall": {name: str(amount) for name, amount in sorted(by_stall.items())},
            "sales_by_date": {day: str(by_date[day]) for day in sorted(by_date)},
        }
        filters = {"stall_id": query.stall_id} if query.stall_id is not None else None

        return self._save(
            actor,
            SALES,
            "Sales Report",
            "Sales performance report with revenue by stall and date",
            data,
            query,
            filters,
        )

    def performance_report(self, actor: Actor, query: ReportRange) -> ReportModel:
        self._require_owner(actor)

        counts = defaultdict(int)
        revenue = defaultdict(lambda: ZERO)
        orders = self._orders(query)
        for order in orders:
            counts[order.status] += 1
            revenue[order.status] += Decimal(order.total_amount)

        data = {
            "total_orders": len(orders),
            "order_status_counts": dict(sorted(counts.items())),
            "revenue_by_status": {status: str(amount) for status, amount in sorted(revenue.items())},
        }

        return self._save(
            actor,
            PERFORMANCE,
            "Performance Report",
            "Order performance report with status distribution and revenue",
            data,
            query,
        )

    def stall_ranking_report(self, actor: Actor, query: ReportRange) -> ReportModel:
        self._require_owner(actor)

        orders = self._orders(query, OrderStatus.COMPLETED.value)
        names = self._stall_names(orders)

        revenue = defaultdict(lambda: ZERO)
        order_ids = defaultdict(set)
        items_sold = defaultdict(int)
        for order in orders:
            for line in order.items:
                revenue[line.stall_id] += Decimal(line.price) * line.quantity
                order_ids[line.stall_id].add(order.id)
                items_sold[line.stall_id] += line.quantity

        ranked = sorted(revenue, key=lambda stall_id: (-revenue[stall_id], stall_id))
        stalls = [
            {
                "rank": position,
                "stall_id": stall_id,
                "name": names.get(stall_id, UNKNOWN_STALL),
                "total_revenue": str(revenue[stall_id]),
                "total_orders": len(order_ids[stall_id]),
                "total_items_sold": items_sold[stall_id],
            }
            for position, stall_id in enumerate(ranked, start=1)
        ]

        return self._save(
            actor,
            STALL_RANKING,
            "Stall Ranking Report",
            "Stall performance ranking based on revenue, orders, and items sold",
            {"ranked_stalls": stalls, "total_stalls": len(stalls)},
            query,
        )

    def list_reports(self, actor: Actor) -> List[ReportModel]:
        self._require_owner(actor)
        return self.repo.list_by_user(actor.user_id)

    def get_report(self, actor: Actor, report_id: int) -> ReportModel:
        self._require_owner(actor)

        report = self.repo.get_report(report_id)
        if not report:
            raise NotFoundError("Report not found")
        if report.generated_by != actor.user_id:
            raise Unauthorized("Not authorized to view this report")
        return report

    def _orders(self, query: ReportRange, status: str | None = None) -> List[OrderModel]:
        start = as_utc(query.start_date) if query.start_date else None
        end = as_utc(query.end_date) if query.end_date else None
        return self.order_repo.list_between(start, end, status)

    def _stall_names(self, orders: List[OrderModel]) -> Dict[int, str]:
        names = {}
        for stall_id in {line.stall_id for order in orders for line in order.items}:
            stall = self.stall_repo.get_stall(stall_id)
            if stall:
                names[stall_id] = stall.name
        return names

    def _save(
        self,
        actor: Actor,
        report_type: str,
        label: str,
        description: str,
        data: Dict[str, Any],
        query: ReportRange,
        filters: Dict[str, Any] | None = None,
    ) -> ReportModel:
        if query.start_date:
            title = f"{label} ({query.start_date:%Y-%m-%d} to {query.end_date:%Y-%m-%d})"
        else:
            title = f"{label} (All Time)"

        report = self.repo.create_report(
            ReportModel(
                type=report_type,
                title=title,
                description=description,
                data=data,
                filters=filters,
                generated_by=actor.user_id,
                start_date=query.start_date,
                end_date=query.end_date,
            )
        )
        logger.info(f"Report {report.id} ({report_type}) generated by user {actor.user_id}")
        return report

    @staticmethod
    def _require_owner(actor: Actor) -> None:
        if not actor.is_food_court_owner:
            raise Unauthorized("Reports are available to the food-court owner only")
