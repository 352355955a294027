# foodcourt/api/routers/stalls.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodcourt.api.deps import get_actor
from foodcourt.data.database import get_db
from foodcourt.domain.actor import Actor
from foodcourt.domain.schemas import Message, StallCreate, StallOut, StallUpdate
from foodcourt.services.stall_service import StallService

router = APIRouter(prefix="/stalls", tags=["stalls"])


@router.post("/", response_model=StallOut, status_code=201)
def create_stall(
    payload: StallCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return StallService(db).create_stall(actor, payload)


@router.get("/", response_model=List[StallOut])
def list_stalls(db: Session = Depends(get_db)):
    return StallService(db).list_stalls()


@router.get("/mine", response_model=List[StallOut])
def my_stalls(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return StallService(db).my_stalls(actor)


@router.get("/{stall_id}", response_model=StallOut)
def get_stall(stall_id: int, db: Session = Depends(get_db)):
    return StallService(db).get_stall(stall_id)


@router.put("/{stall_id}", response_model=StallOut)
def update_stall(
    stall_id: int,
    payload: StallUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return StallService(db).update_stall(actor, stall_id, payload)


@router.delete("/{stall_id}", response_model=Message)
def delete_stall(
    stall_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    StallService(db).delete_stall(actor, stall_id)
    return {"message": "Stall removed"}
