# foodcourt/api/routers/ratings.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodcourt.api.deps import get_actor
from foodcourt.data.database import get_db
from foodcourt.domain.actor import Actor
from foodcourt.domain.schemas import RatingCreate, RatingOut
from foodcourt.services.rating_service import RatingService

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("/", response_model=RatingOut)
def rate_stall(
    payload: RatingCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return RatingService(db).rate_stall(actor, payload)


@router.get("/stall/{stall_id}", response_model=List[RatingOut])
def get_stall_ratings(stall_id: int, db: Session = Depends(get_db)):
    return RatingService(db).get_stall_ratings(stall_id)


@router.get("/stall/{stall_id}/mine", response_model=Optional[RatingOut])
def get_user_rating(
    stall_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return RatingService(db).get_user_rating(actor, stall_id)
