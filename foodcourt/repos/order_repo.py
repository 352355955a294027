# foodcourt/repos/order_repo.py
from datetime import datetime, timezone
from typing import Iterable, List

from sqlalchemy import select, update, func
from sqlalchemy.orm import Session, selectinload

from foodcourt.data.models.order import OrderModel
from foodcourt.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def _select(self):
        return select(OrderModel).options(selectinload(OrderModel.items))

    def add_order(self, order: OrderModel) -> OrderModel:
        #no commit, caller owns the transaction
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        #always re-read, never trust a cached copy of status / version
        return self.db.execute(
            self._select()
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_all(self) -> List[OrderModel]:
        return self._list(self._select())

    def list_for_customer(self, customer_id: int) -> List[OrderModel]:
        return self._list(self._select().where(OrderModel.customer_id == customer_id))

    def list_for_stalls(self, stall_ids: Iterable[int]) -> List[OrderModel]:
        stall_ids = list(stall_ids)
        if not stall_ids:
            return []
        return self._list(
            self._select().where(
                OrderModel.items.any(OrderItemModel.stall_id.in_(stall_ids))
            )
        )

    def list_recent(self, limit: int) -> List[OrderModel]:
        return self._list(self._select().options(selectinload(OrderModel.customer)), limit)

    def list_by_status(self, status: str, since: datetime | None = None) -> List[OrderModel]:
        stmt = self._select().where(OrderModel.status == status)
        if since is not None:
            stmt = stmt.where(OrderModel.created_at >= since)
        return self._list(stmt)

    def list_between(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        status: str | None = None,
    ) -> List[OrderModel]:
        stmt = self._select()
        if start is not None:
            stmt = stmt.where(OrderModel.created_at >= start)
        if end is not None:
            stmt = stmt.where(OrderModel.created_at <= end)
        if status is not None:
            stmt = stmt.where(OrderModel.status == status)
        return self._list(stmt)

    def has_lines_for_stall(self, stall_id: int) -> bool:
        return self.db.execute(
            select(OrderItemModel.id).where(OrderItemModel.stall_id == stall_id).limit(1)
        ).first() is not None

    def has_lines_for_menu_item(self, menu_item_id: int) -> bool:
        return self.db.execute(
            select(OrderItemModel.id).where(OrderItemModel.menu_item_id == menu_item_id).limit(1)
        ).first() is not None

    def count(self, status: str | None = None) -> int:
        stmt = select(func.count(OrderModel.id))
        if status is not None:
            stmt = stmt.where(OrderModel.status == status)
        return self.db.execute(stmt).scalar_one()

    def _list(self, stmt, limit: int | None = None) -> List[OrderModel]:
        #newest first
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def update_status(self, order_id: int, old_version: int, status: str) -> int:
        """
        Compare-and-swap on version:
        update orders set status = ?, version = version + 1 where id = ? and version = ?
        """
        result = self.db.execute(
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.version == old_version,
            )
            .values(
                status=status,
                version=old_version + 1,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
