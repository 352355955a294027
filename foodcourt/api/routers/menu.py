# foodcourt/api/routers/menu.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from foodcourt.api.deps import get_actor
from foodcourt.data.database import get_db
from foodcourt.domain.actor import Actor
from foodcourt.domain.schemas import MenuItemCreate, MenuItemOut, MenuItemUpdate, Message
from foodcourt.services.menu_service import MenuService

router = APIRouter(prefix="/menu", tags=["menu"])


@router.post("/", response_model=MenuItemOut, status_code=201)
def create_menu_item(
    payload: MenuItemCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return MenuService(db).create_item(actor, payload)


@router.get("/", response_model=List[MenuItemOut])
def list_menu(
    stall_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
):
    return MenuService(db).list_menu(stall_id)


@router.get("/category/{category}", response_model=List[MenuItemOut])
def menu_by_category(category: str, db: Session = Depends(get_db)):
    return MenuService(db).list_by_category(category)


@router.get("/{item_id}", response_model=MenuItemOut)
def get_menu_item(item_id: int, db: Session = Depends(get_db)):
    return MenuService(db).get_item(item_id)


@router.put("/{item_id}", response_model=MenuItemOut)
def update_menu_item(
    item_id: int,
    payload: MenuItemUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return MenuService(db).update_item(actor, item_id, payload)


@router.delete("/{item_id}", response_model=Message)
def delete_menu_item(
    item_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    MenuService(db).delete_item(actor, item_id)
    return {"message": "Menu item removed"}
