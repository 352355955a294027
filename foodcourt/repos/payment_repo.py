from sqlalchemy import select
from sqlalchemy.orm import Session

from foodcourt.data.models.payment import PaymentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def get_by_order(self, order_id: int) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel)
            .where(PaymentModel.order_id == order_id)
            .order_by(PaymentModel.id.desc())
            .limit(1)
        ).scalar_one_or_none()

    def get_by_transaction(self, transaction_id: str) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.transaction_id == transaction_id)
        ).scalar_one_or_none()
