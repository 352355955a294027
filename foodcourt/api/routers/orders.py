# foodcourt/api/routers/orders.py
from typing import Annotated, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from foodcourt.api.deps import get_actor, get_email_service, get_notifier
from foodcourt.data.database import get_db
from foodcourt.domain.actor import Actor
from foodcourt.domain.schemas import OrderCreate, OrderFilters, OrderOut, OrderStatusUpdate
from foodcourt.services.email_service import EmailService
from foodcourt.services.notification_service import NotificationService
from foodcourt.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
    email_service: EmailService = Depends(get_email_service),
) -> OrderService:
    return OrderService(db, notifier=notifier, email_service=email_service)


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    actor: Actor = Depends(get_actor),
    svc: OrderService = Depends(get_service),
):
    """
    Checks out the caller's cart.
    The confirmation e-mail is queued asynchronously.
    """
    return svc.create_order(actor, payload)


@router.get("/", response_model=List[OrderOut])
def list_orders(
    filters: Annotated[OrderFilters, Query()],
    actor: Actor = Depends(get_actor),
    svc: OrderService = Depends(get_service),
):
    return svc.list_orders(actor, filters)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    actor: Actor = Depends(get_actor),
    svc: OrderService = Depends(get_service),
):
    return svc.get_order(actor, order_id)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    actor: Actor = Depends(get_actor),
    svc: OrderService = Depends(get_service),
):
    """
    Moves the order to the requested status and pushes
    order_status_updated to subscribers.
    """
    return svc.update_status(actor, order_id, payload.status)
