# foodcourt/domain/actor.py
from dataclasses import dataclass, field
from typing import FrozenSet

from foodcourt.domain.enums import Role


@dataclass(frozen=True)
class Actor:
    """The authenticated user on whose behalf a use case runs."""

    user_id: int
    role: Role
    stall_ids: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def is_food_court_owner(self) -> bool:
        return self.role == Role.FOOD_COURT_OWNER

    def owns_stall(self, stall_id: int) -> bool:
        return stall_id in self.stall_ids
