# foodcourt/services/order_service.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from foodcourt.data.models.order import OrderModel
from foodcourt.data.models.order_item import OrderItemModel
from foodcourt.domain import lifecycle
from foodcourt.domain.actor import Actor
from foodcourt.domain.enums import OrderStatus, PaymentStatus, Role
from foodcourt.domain.errors import (
    ConflictError,
    EmptyCart,
    InsufficientStock,
    ItemUnavailable,
    NotFoundError,
    Unauthorized,
)
from foodcourt.domain.schemas import OrderCreate, OrderFilters
from foodcourt.repos.cart_repo import CartRepo
from foodcourt.repos.menu_repo import MenuRepo
from foodcourt.repos.order_repo import OrderRepo
from foodcourt.repos.user_repo import UserRepo
from foodcourt.services.email_service import EmailService
from foodcourt.services.notification_service import NotificationService
from foodcourt.utils.dates import as_utc
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)


def matches_filters(order: OrderModel, filters: OrderFilters) -> bool:
    """AND of every filter that is set; an empty filter set matches everything."""
    if filters.status is not None and order.status != filters.status.value:
        return False
    if filters.date_from is not None and as_utc(order.created_at) < as_utc(filters.date_from):
        return False
    if filters.date_to is not None and as_utc(order.created_at) > as_utc(filters.date_to):
        return False
    if filters.min_amount is not None and Decimal(order.total_amount) < filters.min_amount:
        return False
    if filters.max_amount is not None and Decimal(order.total_amount) > filters.max_amount:
        return False
    if filters.stall_id is not None and all(line.stall_id != filters.stall_id for line in order.items):
        return False
    return True


class OrderService:
    """
    Order lifecycle: checkout from the cart, status transitions with
    real-time fan-out, role-scoped reads.
    Separate from CartService, it only reads the cart and empties it on checkout.
    """

    def __init__(
        self,
        db: Session,
        notifier: NotificationService,
        email_service: EmailService,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.menu_repo = MenuRepo(db)
        self.user_repo = UserRepo(db)
        self.notifier = notifier
        self.email_service = email_service

    def create_order(self, actor: Actor, payload: OrderCreate) -> Dict[str, Any]:
        """
        Use Case: checkout.

        1. Empty cart -> EmptyCart, nothing written
        2. Re-read every menu item: active and enough stock
        3. Lines priced at the item's current price
        4. Persist order + decrement stock + clear cart in one transaction
        5. Queue confirmation e-mail (best-effort)
        """
        cart = self.cart_repo.get_cart_by_user(actor.user_id)

        if not cart or not cart.items:
            raise EmptyCart("Cart is empty")

        order_lines = []
        names = {}
        for line in cart.items:
            #stock and price may have changed since the item was added
            item = self.menu_repo.get_item(line.menu_item_id, fresh=True)

            if not item or not item.is_active:
                raise ItemUnavailable(f"Menu item {line.menu_item_id} is no longer available")

            if item.stock < line.quantity:
                raise InsufficientStock(f"Insufficient stock for {item.name}")

            names[item.id] = item.name
            order_lines.append(
                OrderItemModel(
                    menu_item_id=item.id,
                    stall_id=item.stall_id,
                    quantity=line.quantity,
                    price=item.price,
                )
            )

        total = sum(
            (Decimal(line.price) * line.quantity for line in order_lines),
            Decimal("0.00"),
        )

        try:
            order = self.repo.add_order(
                OrderModel(
                    customer_id=actor.user_id,
                    items=order_lines,
                    total_amount=total,
                    status=OrderStatus.PENDING.value,
                    payment_status=PaymentStatus.PENDING.value,
                    payment_method=payload.payment_method.value,
                    delivery_address=(
                        payload.delivery_address.model_dump() if payload.delivery_address else None
                    ),
                    order_notes=payload.order_notes,
                )
            )

            for line in order_lines:
                #conditional decrement, a concurrent checkout may have taken the stock
                if self.menu_repo.decrement_stock(line.menu_item_id, line.quantity) == 0:
                    raise InsufficientStock(f"Insufficient stock for {names[line.menu_item_id]}")

            self.cart_repo.clear_lines(cart)
            cart.total_amount = Decimal("0.00")

            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} created for user {actor.user_id}, total {total}")

        self._send_confirmation(order, names)

        return self.to_dict(order)

    def update_status(self, actor: Actor, order_id: int, requested: OrderStatus) -> Dict[str, Any]:
        """
        Use Case: status transition.
        Validated against a freshly read row and written with compare-and-swap
        on version; losing the race is a conflict, not a retry.
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        new_status = lifecycle.transition(order, requested, actor)
        old_status = order.status

        rowcount = self.repo.update_status(order.id, order.version, new_status.value)

        if rowcount == 0:
            self.repo.rollback()
            raise ConflictError(
                f"Order {order.id} was modified concurrently, reload it and try again"
            )

        self.repo.commit()

        order = self.repo.get_order(order_id)
        logger.info(
            f"Order {order.id} status {old_status} -> {order.status} by user {actor.user_id}"
        )

        self.notifier.notify_status_change(order)

        return self.to_dict(order)

    def get_order(self, actor: Actor, order_id: int) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if not lifecycle.can_view(order, actor):
            raise Unauthorized("Not authorized to view this order")

        return self.to_dict(order)

    def list_orders(self, actor: Actor, filters: OrderFilters | None = None) -> List[Dict[str, Any]]:
        """
        Customer: own orders, stall owner: orders touching their stalls,
        food-court owner: everything. Newest first.
        """
        if actor.role == Role.FOOD_COURT_OWNER:
            orders = self.repo.list_all()
        elif actor.role == Role.STALL_OWNER:
            orders = self.repo.list_for_stalls(actor.stall_ids)
        else:
            orders = self.repo.list_for_customer(actor.user_id)

        filters = filters or OrderFilters()
        return [self.to_dict(o) for o in orders if matches_filters(o, filters)]

    def _send_confirmation(self, order: OrderModel, names: Dict[int, str]) -> None:
        customer = self.user_repo.get_user(order.customer_id)
        if not customer:
            return

        summary = {
            "order_id": order.id,
            "status": order.status,
            "payment_method": order.payment_method,
            "total_amount": str(order.total_amount),
            "items": [
                {
                    "name": names.get(line.menu_item_id, str(line.menu_item_id)),
                    "quantity": line.quantity,
                    "price": str(line.price),
                }
                for line in order.items
            ],
        }
        self.email_service.queue_order_confirmation(customer.email, summary)

    @staticmethod
    def to_dict(order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "customer_id": order.customer_id,
            "items": [
                {
                    "menu_item_id": line.menu_item_id,
                    "stall_id": line.stall_id,
                    "quantity": line.quantity,
                    "price": line.price,
                }
                for line in order.items
            ],
            "total_amount": order.total_amount,
            "status": order.status,
            "payment_status": order.payment_status,
            "payment_method": order.payment_method,
            "delivery_address": order.delivery_address,
            "order_notes": order.order_notes,
            "created_at": order.created_at,
        }
