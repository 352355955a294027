# foodcourt/services/payment_service.py
from sqlalchemy.orm import Session

from foodcourt.data.models.payment import PaymentModel
from foodcourt.domain.actor import Actor
from foodcourt.domain.enums import PaymentMethod, PaymentRecordStatus, PaymentStatus
from foodcourt.domain.errors import ConflictError, NotFoundError, Unauthorized
from foodcourt.domain.schemas import PaymentCreate
from foodcourt.repos.order_repo import OrderRepo
from foodcourt.repos.payment_repo import PaymentRepo
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentService:
    """
    Records payments made outside the service (mobile wallets or cash).
    The only writer of order.payment_status.
    """

    def __init__(self, db: Session):
        self.repo = PaymentRepo(db)
        self.order_repo = OrderRepo(db)

    def process_payment(self, actor: Actor, payload: PaymentCreate) -> PaymentModel:
        order = self.order_repo.get_order(payload.order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.customer_id != actor.user_id:
            raise Unauthorized("Not authorized to pay for this order")

        if order.payment_status == PaymentStatus.PAID.value:
            raise ConflictError("Order is already paid")

        if payload.transaction_id and self.repo.get_by_transaction(payload.transaction_id):
            raise ConflictError(f"Transaction {payload.transaction_id} already recorded")

        cash = payload.payment_method == PaymentMethod.CASH_ON_DELIVERY

        try:
            payment = self.repo.add_payment(
                PaymentModel(
                    order_id=order.id,
                    user_id=actor.user_id,
                    amount=order.total_amount,
                    payment_method=payload.payment_method.value,
                    transaction_id=payload.transaction_id,
                    gateway_response=payload.gateway_response,
                    status=(
                        PaymentRecordStatus.PENDING.value if cash else PaymentRecordStatus.COMPLETED.value
                    ),
                )
            )
            order.payment_status = (
                PaymentStatus.CASH_ON_DELIVERY.value if cash else PaymentStatus.PAID.value
            )
            self.order_repo.commit()
        except Exception:
            self.order_repo.rollback()
            raise

        logger.info(
            f"Payment {payment.id} recorded for order {order.id}: "
            f"{payment.payment_method}, order payment status {order.payment_status}"
        )
        return payment

    def get_payment_by_order(self, actor: Actor, order_id: int) -> PaymentModel:
        payment = self.repo.get_by_order(order_id)

        if not payment:
            raise NotFoundError("Payment not found")

        if payment.user_id != actor.user_id and not actor.is_food_court_owner:
            raise Unauthorized("Not authorized to view this payment")

        return payment
