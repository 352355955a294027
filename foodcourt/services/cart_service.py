from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from foodcourt.data.models.cart import CartModel
from foodcourt.data.models.cart_item import CartItemModel
from foodcourt.domain.actor import Actor
from foodcourt.domain.errors import (
    InvalidQuantity,
    ItemUnavailable,
    LineNotFound,
    NotFoundError,
    OutOfStock,
)
from foodcourt.repos.cart_repo import CartRepo
from foodcourt.repos.menu_repo import MenuRepo
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)


def recompute_total(cart: CartModel) -> Decimal:
    """total_amount is derived, never set on its own."""
    cart.total_amount = sum(
        (Decimal(line.unit_price) * line.quantity for line in cart.items),
        Decimal("0.00"),
    )
    return cart.total_amount


class CartService:
    """
    Use cases of the cart domain.
    commands (add, update, remove, clear) mutate lines and recompute the total
    in the same commit, query (get) creates the cart lazily.

    One writer per cart (its owner), concurrent requests are last-write-wins.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.menu_repo = MenuRepo(db)

    #query
    def get_cart(self, actor: Actor) -> Dict[str, Any]:
        return self.to_dict(self._load_cart(actor.user_id))

    #commands
    def add_item(self, actor: Actor, menu_item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise InvalidQuantity("Quantity must be at least 1")

        item = self.menu_repo.get_item(menu_item_id, fresh=True)
        if not item:
            raise NotFoundError("Menu item not found")
        if not item.is_active:
            raise ItemUnavailable(f"Menu item {item.name} is no longer available")

        cart = self._load_cart(actor.user_id)

        if quantity > item.stock:
            raise OutOfStock(f"Only {item.stock} of {item.name} left")

        existing_line = self.repo.get_line_by_menu_item(cart, menu_item_id)

        if existing_line:
            #price captured on first add stays, only quantity grows
            logger.info(
                f"Menu item {menu_item_id} already in cart {cart.id}, quantity "
                f"{existing_line.quantity} -> {existing_line.quantity + quantity}"
            )
            existing_line.quantity += quantity
        else:
            logger.info(f"Adding menu item {menu_item_id} to cart {cart.id}")
            self.repo.add_line(
                cart,
                CartItemModel(
                    menu_item_id=menu_item_id,
                    quantity=quantity,
                    unit_price=item.price,
                ),
            )

        return self._commit(cart)

    def update_quantity(self, actor: Actor, line_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise InvalidQuantity("Quantity must be at least 1")

        cart = self._load_cart(actor.user_id)
        line = self.repo.get_line(cart, line_id)
        if not line:
            raise LineNotFound(f"Line {line_id} not found in cart")

        item = self.menu_repo.get_item(line.menu_item_id, fresh=True)
        if not item or not item.is_active:
            raise ItemUnavailable("Menu item not found or unavailable")
        if quantity > item.stock:
            raise OutOfStock(f"Only {item.stock} of {item.name} left")

        logger.info(f"Cart {cart.id} line {line_id} quantity {line.quantity} -> {quantity}")
        line.quantity = quantity

        return self._commit(cart)

    def remove_item(self, actor: Actor, line_id: int) -> Dict[str, Any]:
        cart = self._load_cart(actor.user_id)
        line = self.repo.get_line(cart, line_id)
        if not line:
            raise LineNotFound(f"Line {line_id} not found in cart")

        logger.info(f"Removing line {line_id} from cart {cart.id}")
        self.repo.delete_line(cart, line)

        return self._commit(cart)

    def clear(self, actor: Actor) -> Dict[str, Any]:
        cart = self._load_cart(actor.user_id)
        self.repo.clear_lines(cart)
        logger.info(f"Cart {cart.id} cleared")
        return self._commit(cart)

    def _load_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        logger.info(f"Creating cart for user {user_id}")
        try:
            return self.repo.create_cart(CartModel(user_id=user_id, total_amount=Decimal("0.00")))
        except IntegrityError:
            #a concurrent first access created it, user_id is unique
            self.repo.rollback()
            cart = self.repo.get_cart_by_user(user_id)
            if cart is None:
                raise
            logger.info(f"Cart {cart.id} for user {user_id} created concurrently, reusing it")
            return cart

    def _commit(self, cart: CartModel) -> Dict[str, Any]:
        recompute_total(cart)
        try:
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise
        return self.to_dict(cart)

    @staticmethod
    def to_dict(cart: CartModel) -> Dict[str, Any]:
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "items": [
                {
                    "id": line.id,
                    "menu_item_id": line.menu_item_id,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                }
                for line in cart.items
            ],
            "total_amount": cart.total_amount,
        }
