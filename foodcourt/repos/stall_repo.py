# foodcourt/repos/stall_repo.py
from typing import List, Set

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from foodcourt.data.models.stall import StallModel


class StallRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_stall(self, stall_id: int) -> StallModel | None:
        return self.db.get(StallModel, stall_id)

    def list_active(self) -> List[StallModel]:
        return list(
            self.db.execute(
                select(StallModel)
                .where(StallModel.is_active.is_(True))
                .order_by(StallModel.name)
            ).scalars().all()
        )

    def list_by_owner(self, owner_id: int) -> List[StallModel]:
        return list(
            self.db.execute(
                select(StallModel).where(StallModel.owner_id == owner_id).order_by(StallModel.id)
            ).scalars().all()
        )

    def owned_stall_ids(self, owner_id: int) -> Set[int]:
        return set(
            self.db.execute(
                select(StallModel.id).where(StallModel.owner_id == owner_id)
            ).scalars().all()
        )

    def count(self) -> int:
        return self.db.execute(select(func.count(StallModel.id))).scalar_one()

    def create_stall(self, stall: StallModel) -> StallModel:
        self.db.add(stall)
        self.db.commit()
        self.db.refresh(stall)
        return stall

    def delete_stall(self, stall: StallModel) -> None:
        self.db.delete(stall)
        self.db.commit()

    def save(self, stall: StallModel) -> StallModel:
        self.db.add(stall)
        self.db.commit()
        self.db.refresh(stall)
        return stall
