# foodcourt/services/rating_service.py
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from sqlalchemy.orm import Session

from foodcourt.data.models.rating import RatingModel
from foodcourt.domain.actor import Actor
from foodcourt.domain.errors import NotFoundError
from foodcourt.domain.schemas import RatingCreate
from foodcourt.repos.rating_repo import RatingRepo
from foodcourt.repos.stall_repo import StallRepo
from foodcourt.utils.dates import utcnow
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)


class RatingService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = RatingRepo(db)
        self.stall_repo = StallRepo(db)

    def rate_stall(self, actor: Actor, payload: RatingCreate) -> RatingModel:
        """Upsert the actor's rating, then refresh the stall's average."""
        stall = self._get_stall(payload.stall_id)

        try:
            rating = self.repo.get_rating(actor.user_id, stall.id)
            if rating:
                rating.rating = payload.rating
                rating.comment = payload.comment
                rating.updated_at = utcnow()
            else:
                rating = self.repo.add(
                    RatingModel(
                        user_id=actor.user_id,
                        stall_id=stall.id,
                        rating=payload.rating,
                        comment=payload.comment,
                    )
                )
            self.db.flush()

            ratings = self.repo.list_for_stall(stall.id)
            average = Decimal(sum(r.rating for r in ratings)) / len(ratings)
            stall.average_rating = average.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
            stall.total_ratings = len(ratings)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"User {actor.user_id} rated stall {stall.id} with {payload.rating}, "
            f"average now {stall.average_rating} over {stall.total_ratings}"
        )
        return rating

    def get_stall_ratings(self, stall_id: int) -> List[RatingModel]:
        self._get_stall(stall_id)
        return self.repo.list_for_stall(stall_id)

    def get_user_rating(self, actor: Actor, stall_id: int) -> RatingModel | None:
        return self.repo.get_rating(actor.user_id, stall_id)

    def _get_stall(self, stall_id: int):
        stall = self.stall_repo.get_stall(stall_id)
        if not stall:
            raise NotFoundError("Stall not found")
        return stall
