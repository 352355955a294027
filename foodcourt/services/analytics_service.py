# foodcourt/services/analytics_service.py
from collections import defaultdict
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from foodcourt.domain.actor import Actor
from foodcourt.domain.enums import OrderStatus
from foodcourt.domain.errors import Unauthorized
from foodcourt.repos.order_repo import OrderRepo
from foodcourt.repos.stall_repo import StallRepo
from foodcourt.utils.dates import as_utc, utcnow
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0.00")


class AnalyticsService:
    """
    Food-court owner dashboard. Every figure is a single pass over the
    orders in memory, revenue only counts Completed orders.
    """

    def __init__(self, db: Session):
        self.order_repo = OrderRepo(db)
        self.stall_repo = StallRepo(db)

    def dashboard_stats(self, actor: Actor) -> Dict[str, Any]:
        self._require_owner(actor)

        completed = self.order_repo.list_by_status(OrderStatus.COMPLETED.value)
        return {
            "total_stalls": self.stall_repo.count(),
            "total_orders": self.order_repo.count(),
            "total_revenue": sum((Decimal(o.total_amount) for o in completed), ZERO),
            "pending_orders": self.order_repo.count(OrderStatus.PENDING.value),
        }

    def recent_orders(self, actor: Actor, limit: int = 10) -> List[Dict[str, Any]]:
        self._require_owner(actor)

        return [
            {
                "id": o.id,
                "order_number": f"ORD-{o.id:03d}",
                "customer": o.customer.name if o.customer else "",
                "total_amount": o.total_amount,
                "status": o.status,
                "created_at": o.created_at,
            }
            for o in self.order_repo.list_recent(limit)
        ]

    def top_stalls(self, actor: Actor, limit: int = 5) -> List[Dict[str, Any]]:
        self._require_owner(actor)

        revenue = defaultdict(lambda: ZERO)
        orders = defaultdict(set)
        for order in self.order_repo.list_by_status(OrderStatus.COMPLETED.value):
            for line in order.items:
                revenue[line.stall_id] += Decimal(line.price) * line.quantity
                orders[line.stall_id].add(order.id)

        ranked = sorted(revenue.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]

        result = []
        for stall_id, amount in ranked:
            stall = self.stall_repo.get_stall(stall_id)
            result.append(
                {
                    "id": stall_id,
                    "name": stall.name if stall else "",
                    "revenue": amount,
                    "orders": len(orders[stall_id]),
                }
            )
        return result

    def sales_trends(self, actor: Actor, days: int = 7) -> List[Dict[str, Any]]:
        """Completed revenue per UTC calendar day, oldest day first."""
        self._require_owner(actor)

        since = utcnow() - timedelta(days=days)
        by_day = defaultdict(lambda: ZERO)
        for order in self.order_repo.list_by_status(OrderStatus.COMPLETED.value, since=since):
            by_day[as_utc(order.created_at).date().isoformat()] += Decimal(order.total_amount)

        return [{"date": day, "revenue": by_day[day]} for day in sorted(by_day)]

    @staticmethod
    def _require_owner(actor: Actor) -> None:
        if not actor.is_food_court_owner:
            raise Unauthorized("Analytics are available to the food-court owner only")
