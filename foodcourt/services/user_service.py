from sqlalchemy.orm import Session
from foodcourt.data.models.user import UserModel
from foodcourt.domain.actor import Actor
from foodcourt.domain.enums import Role
from foodcourt.domain.errors import ConflictError, NotFoundError, Unauthorized
from foodcourt.domain.schemas import UserCreate, UserRead
from foodcourt.repos.stall_repo import StallRepo
from foodcourt.repos.user_repo import UserRepo
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)
        self.stall_repo = StallRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        email = payload.email.lower()
        if self.repo.get_by_email(email):
            raise ConflictError(f"User with email {email} already exists")

        user = UserModel(name=payload.name, email=email, role=payload.role.value)
        created = self.repo.create_user(user)
        logger.info(f"Registered user {created.id} with role {created.role}")
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserRead.model_validate(user)

    def get_actor(self, user_id: int) -> Actor:
        """Resolve the calling user into role + owned stalls."""
        user = self.repo.get_user(user_id)
        if not user:
            raise Unauthorized(f"Unknown user {user_id}")

        role = Role(user.role)
        stall_ids = frozenset()
        if role != Role.CUSTOMER:
            stall_ids = frozenset(self.stall_repo.owned_stall_ids(user.id))

        return Actor(user_id=user.id, role=role, stall_ids=stall_ids)
