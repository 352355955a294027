# foodcourt/services/menu_service.py
from typing import List

from sqlalchemy.orm import Session

from foodcourt.data.models.menu_item import MenuItemModel
from foodcourt.domain.actor import Actor
from foodcourt.domain.errors import ConflictError, NotFoundError
from foodcourt.domain.schemas import MenuItemCreate, MenuItemUpdate
from foodcourt.repos.cart_repo import CartRepo
from foodcourt.repos.menu_repo import MenuRepo
from foodcourt.repos.order_repo import OrderRepo
from foodcourt.repos.stall_repo import StallRepo
from foodcourt.services.cart_service import recompute_total
from foodcourt.services.stall_service import check_stall_access
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)


class MenuService:
    def __init__(self, db: Session):
        self.repo = MenuRepo(db)
        self.stall_repo = StallRepo(db)
        self.cart_repo = CartRepo(db)
        self.order_repo = OrderRepo(db)

    def create_item(self, actor: Actor, payload: MenuItemCreate) -> MenuItemModel:
        stall = self.stall_repo.get_stall(payload.stall_id)
        if not stall:
            raise NotFoundError("Stall not found")
        check_stall_access(stall, actor)

        item = self.repo.create_item(MenuItemModel(**payload.model_dump()))
        logger.info(f"Menu item {item.id} added to stall {stall.id}")
        return item

    def update_item(self, actor: Actor, item_id: int, payload: MenuItemUpdate) -> MenuItemModel:
        item = self.get_item(item_id)
        check_stall_access(item.stall, actor)

        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(item, field, value)

        logger.info(f"Menu item {item.id} updated by user {actor.user_id}")
        return self.repo.save(item)

    def delete_item(self, actor: Actor, item_id: int) -> None:
        item = self.get_item(item_id)
        check_stall_access(item.stall, actor)

        #ordered items stay for the order history, set is_active=False instead
        if self.order_repo.has_lines_for_menu_item(item.id):
            raise ConflictError(f"Menu item {item.id} has been ordered, deactivate it instead")

        try:
            for cart in self.cart_repo.remove_menu_items([item.id]):
                recompute_total(cart)
            self.repo.delete_item(item)
        except Exception:
            self.cart_repo.rollback()
            raise

        logger.info(f"Menu item {item_id} removed by user {actor.user_id}")

    def get_item(self, item_id: int) -> MenuItemModel:
        item = self.repo.get_item(item_id)
        if not item:
            raise NotFoundError("Menu item not found")
        return item

    def list_menu(self, stall_id: int | None = None) -> List[MenuItemModel]:
        return self.repo.list_items(stall_id)

    def list_by_category(self, category: str) -> List[MenuItemModel]:
        return self.repo.list_by_category(category)
