# foodcourt/repos/menu_repo.py
from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from foodcourt.data.models.menu_item import MenuItemModel


class MenuRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, item_id: int, fresh: bool = False) -> MenuItemModel | None:
        #fresh=True skips the identity map and re-reads stock / price from the db
        if fresh:
            return self.db.execute(
                select(MenuItemModel)
                .where(MenuItemModel.id == item_id)
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
        return self.db.get(MenuItemModel, item_id)

    def list_items(self, stall_id: int | None = None) -> List[MenuItemModel]:
        stmt = select(MenuItemModel).where(MenuItemModel.is_active.is_(True))
        if stall_id is not None:
            stmt = stmt.where(MenuItemModel.stall_id == stall_id)
        return list(self.db.execute(stmt.order_by(MenuItemModel.id)).scalars().all())

    def list_by_category(self, category: str) -> List[MenuItemModel]:
        return list(
            self.db.execute(
                select(MenuItemModel)
                .where(
                    MenuItemModel.category == category,
                    MenuItemModel.is_active.is_(True),
                )
                .order_by(MenuItemModel.stall_id, MenuItemModel.id)
            ).scalars().all()
        )

    def create_item(self, item: MenuItemModel) -> MenuItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def save(self, item: MenuItemModel) -> MenuItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, item: MenuItemModel) -> None:
        self.db.delete(item)
        self.db.commit()

    def decrement_stock(self, item_id: int, quantity: int) -> int:
        """
        Atomic decrement-if-sufficient, single UPDATE:
        update menu_items set stock = stock - q where id = ? and stock >= q and is_active
        Returns rowcount, 0 means not enough stock (or item gone / inactive).
        Does not commit.
        """
        result = self.db.execute(
            update(MenuItemModel)
            .where(
                MenuItemModel.id == item_id,
                MenuItemModel.stock >= quantity,
                MenuItemModel.is_active.is_(True),
            )
            .values(stock=MenuItemModel.stock - quantity)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
