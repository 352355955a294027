# foodcourt/services/stall_service.py
from typing import List

from sqlalchemy.orm import Session

from foodcourt.data.models.stall import StallModel
from foodcourt.domain.actor import Actor
from foodcourt.domain.enums import Role
from foodcourt.domain.errors import ConflictError, NotFoundError, Unauthorized
from foodcourt.domain.schemas import StallCreate, StallUpdate
from foodcourt.repos.cart_repo import CartRepo
from foodcourt.repos.order_repo import OrderRepo
from foodcourt.repos.rating_repo import RatingRepo
from foodcourt.repos.stall_repo import StallRepo
from foodcourt.services.cart_service import recompute_total
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)


class StallService:
    def __init__(self, db: Session):
        self.repo = StallRepo(db)
        self.cart_repo = CartRepo(db)
        self.order_repo = OrderRepo(db)
        self.rating_repo = RatingRepo(db)

    def create_stall(self, actor: Actor, payload: StallCreate) -> StallModel:
        if actor.role == Role.CUSTOMER:
            raise Unauthorized("Only stall owners can open a stall")

        stall = self.repo.create_stall(
            StallModel(
                owner_id=actor.user_id,
                name=payload.name,
                description=payload.description,
                category=payload.category,
                rent=payload.rent,
            )
        )
        logger.info(f"Stall {stall.id} opened by user {actor.user_id}")
        return stall

    def list_stalls(self) -> List[StallModel]:
        return self.repo.list_active()

    def my_stalls(self, actor: Actor) -> List[StallModel]:
        return self.repo.list_by_owner(actor.user_id)

    def get_stall(self, stall_id: int) -> StallModel:
        stall = self.repo.get_stall(stall_id)
        if not stall:
            raise NotFoundError("Stall not found")
        return stall

    def update_stall(self, actor: Actor, stall_id: int, payload: StallUpdate) -> StallModel:
        stall = self.get_stall(stall_id)
        check_stall_access(stall, actor)

        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(stall, field, value)

        logger.info(f"Stall {stall.id} updated by user {actor.user_id}")
        return self.repo.save(stall)

    def delete_stall(self, actor: Actor, stall_id: int) -> None:
        """
        Removes the stall with its menu and ratings, and drops its items from
        open carts. A stall that already sold something keeps its history:
        deactivate it instead.
        """
        stall = self.get_stall(stall_id)
        check_stall_access(stall, actor)

        if self.order_repo.has_lines_for_stall(stall.id):
            raise ConflictError(f"Stall {stall.id} has orders, deactivate it instead")

        try:
            for cart in self.cart_repo.remove_menu_items([item.id for item in stall.menu_items]):
                recompute_total(cart)
            self.rating_repo.delete_for_stall(stall.id)
            self.repo.delete_stall(stall)
        except Exception:
            self.cart_repo.rollback()
            raise

        logger.info(f"Stall {stall_id} removed by user {actor.user_id}")


def check_stall_access(stall: StallModel, actor: Actor) -> None:
    if stall.owner_id != actor.user_id and not actor.is_food_court_owner:
        raise Unauthorized(f"Not authorized to manage stall {stall.id}")
