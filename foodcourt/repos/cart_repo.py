# foodcourt/repos/cart_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from foodcourt.data.models.cart import CartModel
from foodcourt.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id == user_id)
            .options(selectinload(CartModel.items))
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_line(self, cart: CartModel, line_id: int) -> CartItemModel | None:
        return next((line for line in cart.items if line.id == line_id), None)

    def get_line_by_menu_item(self, cart: CartModel, menu_item_id: int) -> CartItemModel | None:
        return next((line for line in cart.items if line.menu_item_id == menu_item_id), None)

    def add_line(self, cart: CartModel, line: CartItemModel) -> None:
        cart.items.append(line)

    def delete_line(self, cart: CartModel, line: CartItemModel) -> None:
        #delete-orphan cascade removes the row on flush
        cart.items.remove(line)

    def clear_lines(self, cart: CartModel) -> None:
        cart.items.clear()

    def remove_menu_items(self, menu_item_ids: List[int]) -> List[CartModel]:
        """Drops every cart line of the given menu items, returns the carts touched. Flushes."""
        if not menu_item_ids:
            return []

        lines = self.db.execute(
            select(CartItemModel).where(CartItemModel.menu_item_id.in_(menu_item_ids))
        ).scalars().all()

        carts = []
        for line in lines:
            cart = line.cart
            cart.items.remove(line)
            if cart not in carts:
                carts.append(cart)

        self.db.flush()
        return carts

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
