# foodcourt/domain/lifecycle.py
"""
Order status state machine.

    Pending -> Preparing -> Ready for Pickup -> Completed
    Pending -> Cancelled
    Preparing -> Cancelled        (staff only)

Pure functions, no persistence: the order service reads the order, asks
``transition`` for the next status and writes it back with a conditional
update.
"""
from typing import Dict, FrozenSet

from foodcourt.domain.actor import Actor
from foodcourt.domain.enums import OrderStatus
from foodcourt.domain.errors import IllegalTransition, OrderClosed, Unauthorized

ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY_FOR_PICKUP, OrderStatus.CANCELLED}),
    OrderStatus.READY_FOR_PICKUP: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})


def is_staff_for(order, actor: Actor) -> bool:
    """Food-court owner, or owner of a stall with at least one line in the order."""
    if actor.is_food_court_owner:
        return True
    return any(actor.owns_stall(line.stall_id) for line in order.items)


def can_view(order, actor: Actor) -> bool:
    return order.customer_id == actor.user_id or is_staff_for(order, actor)


def authorize(order, requested: OrderStatus, actor: Actor) -> None:
    if is_staff_for(order, actor):
        return

    #customers may only withdraw an order nobody started preparing
    if (
        requested == OrderStatus.CANCELLED
        and order.customer_id == actor.user_id
        and OrderStatus(order.status) == OrderStatus.PENDING
    ):
        return

    raise Unauthorized(f"User {actor.user_id} is not allowed to update order {order.id}")


def transition(order, requested: OrderStatus, actor: Actor) -> OrderStatus:
    """
    Validate ``order.status -> requested`` for ``actor`` and return the new status.

    Checks run in this order: closed order (for anyone who can see it),
    authorization, legality. A food-court owner may force any move to a
    different status, but not out of a terminal one.
    """
    requested = OrderStatus(requested)
    current = OrderStatus(order.status)

    if current in TERMINAL_STATUSES and can_view(order, actor):
        raise OrderClosed(f"Order {order.id} is {current.value} and cannot change status")

    authorize(order, requested, actor)

    if requested == current:
        raise IllegalTransition(f"Order {order.id} is already {current.value}")

    if requested not in ALLOWED_TRANSITIONS[current] and not actor.is_food_court_owner:
        raise IllegalTransition(
            f"Cannot change status from {current.value} to {requested.value}"
        )

    return requested
