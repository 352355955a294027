#foodcourt/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodcourt.api.deps import get_actor
from foodcourt.data.database import get_db
from foodcourt.domain.actor import Actor
from foodcourt.domain.schemas import (
    CartItemIn,
    CartItemUpdate,
    CartOut,
)
from foodcourt.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return CartService(db).get_cart(actor)


@router.post("/items", response_model=CartOut, status_code=201)
def add_item(
    payload: CartItemIn,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return CartService(db).add_item(
        actor,
        menu_item_id=payload.menu_item_id,
        quantity=payload.quantity,
    )


@router.put("/items/{line_id}", response_model=CartOut)
def update_item(
    line_id: int,
    payload: CartItemUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return CartService(db).update_quantity(actor, line_id, payload.quantity)


@router.delete("/items/{line_id}", response_model=CartOut)
def remove_item(
    line_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return CartService(db).remove_item(actor, line_id)


@router.delete("/", response_model=CartOut)
def clear_cart(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return CartService(db).clear(actor)
