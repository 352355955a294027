from typing import List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from foodcourt.data.models.rating import RatingModel


class RatingRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_rating(self, user_id: int, stall_id: int) -> RatingModel | None:
        return self.db.execute(
            select(RatingModel).where(
                RatingModel.user_id == user_id,
                RatingModel.stall_id == stall_id,
            )
        ).scalar_one_or_none()

    def list_for_stall(self, stall_id: int) -> List[RatingModel]:
        return list(
            self.db.execute(
                select(RatingModel)
                .where(RatingModel.stall_id == stall_id)
                .order_by(RatingModel.created_at.desc(), RatingModel.id.desc())
            ).scalars().all()
        )

    def add(self, rating: RatingModel) -> RatingModel:
        self.db.add(rating)
        self.db.flush()
        return rating

    def delete_for_stall(self, stall_id: int) -> None:
        self.db.execute(delete(RatingModel).where(RatingModel.stall_id == stall_id))
