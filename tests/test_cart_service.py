from decimal import Decimal

import pytest

from foodcourt.data.database import SessionLocal
from foodcourt.data.models import MenuItemModel
from foodcourt.domain.errors import (
    InvalidQuantity,
    ItemUnavailable,
    LineNotFound,
    NotFoundError,
    OutOfStock,
)
from foodcourt.services.cart_service import CartService


def line_sum(cart):
    return sum((Decimal(i["unit_price"]) * i["quantity"] for i in cart["items"]), Decimal("0"))


def test_cart_is_created_lazily(db, world):
    cart = CartService(db).get_cart(world["customer"])

    assert cart["user_id"] == world["customer"].user_id
    assert cart["items"] == []
    assert cart["total_amount"] == Decimal("0")

    # same cart on next access
    assert CartService(db).get_cart(world["customer"])["cart_id"] == cart["cart_id"]


def test_first_access_race_reuses_the_other_cart(db, world):
    other = SessionLocal()
    try:
        existing = CartService(other).get_cart(world["customer"])
    finally:
        other.close()

    svc = CartService(db)
    real_lookup = svc.repo.get_cart_by_user
    lookups = []

    def not_committed_yet(user_id):
        lookups.append(user_id)
        return None if len(lookups) == 1 else real_lookup(user_id)

    svc.repo.get_cart_by_user = not_committed_yet

    cart = svc.get_cart(world["customer"])

    assert cart["cart_id"] == existing["cart_id"]
    assert len(lookups) == 2


def test_total_tracks_every_mutation(db, world):
    svc = CartService(db)
    actor = world["customer"]

    cart = svc.add_item(actor, world["m1"], 2)
    assert cart["total_amount"] == line_sum(cart) == Decimal("10.00")

    cart = svc.add_item(actor, world["m2"], 1)
    assert cart["total_amount"] == line_sum(cart) == Decimal("13.00")

    m2_line = next(i for i in cart["items"] if i["menu_item_id"] == world["m2"])
    cart = svc.update_quantity(actor, m2_line["id"], 3)
    assert cart["total_amount"] == line_sum(cart) == Decimal("19.00")

    cart = svc.remove_item(actor, m2_line["id"])
    assert cart["total_amount"] == line_sum(cart) == Decimal("10.00")

    cart = svc.clear(actor)
    assert cart["items"] == []
    assert cart["total_amount"] == Decimal("0")


def test_adding_same_item_keeps_captured_price(db, world):
    svc = CartService(db)
    actor = world["customer"]
    svc.add_item(actor, world["m1"], 1)

    item = db.get(MenuItemModel, world["m1"])
    item.price = Decimal("9.00")
    db.commit()

    cart = svc.add_item(actor, world["m1"], 2)

    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 3
    assert cart["items"][0]["unit_price"] == Decimal("5.00")
    assert cart["total_amount"] == Decimal("15.00")


def test_add_more_than_stock_fails(db, world):
    with pytest.raises(OutOfStock):
        CartService(db).add_item(world["customer"], world["m1"], 11)


def test_add_unknown_or_inactive_item(db, world):
    svc = CartService(db)
    with pytest.raises(NotFoundError):
        svc.add_item(world["customer"], 9999, 1)

    item = db.get(MenuItemModel, world["m1"])
    item.is_active = False
    db.commit()

    with pytest.raises(ItemUnavailable):
        svc.add_item(world["customer"], world["m1"], 1)


def test_update_quantity_validation(db, world):
    svc = CartService(db)
    actor = world["customer"]
    cart = svc.add_item(actor, world["m1"], 1)
    line_id = cart["items"][0]["id"]

    with pytest.raises(InvalidQuantity):
        svc.update_quantity(actor, line_id, 0)

    with pytest.raises(OutOfStock):
        svc.update_quantity(actor, line_id, 11)

    with pytest.raises(LineNotFound):
        svc.update_quantity(actor, 9999, 1)

    # nothing changed
    cart = svc.get_cart(actor)
    assert cart["items"][0]["quantity"] == 1
    assert cart["total_amount"] == Decimal("5.00")


def test_remove_missing_line(db, world):
    with pytest.raises(LineNotFound):
        CartService(db).remove_item(world["customer"], 12345)


def test_carts_are_per_user(db, world):
    svc = CartService(db)
    svc.add_item(world["customer"], world["m1"], 1)

    assert svc.get_cart(world["other"])["items"] == []
    with pytest.raises(LineNotFound):
        line_id = svc.get_cart(world["customer"])["items"][0]["id"]
        svc.remove_item(world["other"], line_id)
