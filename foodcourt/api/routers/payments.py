# foodcourt/api/routers/payments.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodcourt.api.deps import get_actor
from foodcourt.data.database import get_db
from foodcourt.domain.actor import Actor
from foodcourt.domain.schemas import PaymentCreate, PaymentOut
from foodcourt.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/", response_model=PaymentOut, status_code=201)
def process_payment(
    payload: PaymentCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return PaymentService(db).process_payment(actor, payload)


@router.get("/order/{order_id}", response_model=PaymentOut)
def get_payment_by_order(
    order_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return PaymentService(db).get_payment_by_order(actor, order_id)
