# carmarket/services/user_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carmarket.data.models.user import UserModel
from carmarket.repos.user_repo import UserRepo
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    """Admin-side user management."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def list_users(self) -> list[UserModel]:
        return self.repo.list_users()

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise LookupError("User not found")
        return user

    def update_user(self, user_id: int, username: str, role: str) -> UserModel:
        user = self.get_user(user_id)

        if username != user.username:
            taken = self.repo.get_by_username(username)
            if taken and taken.id != user_id:
                raise ValueError("Username is already taken")

        user.username = username
        user.role = role
        try:
            user = self.repo.save(user)
        except IntegrityError:
            self.repo.rollback()
            raise ValueError("Username is already taken")

        logger.info(f"User {user_id} updated: username={username!r}, role={role}")
        return user

    def update_role(self, user_id: int, role: str) -> UserModel:
        user = self.get_user(user_id)
        user.role = role
        logger.info(f"User {user_id} role changed to {role}")
        return self.repo.save(user)

    def delete_user(self, user_id: int, acting_user_id: int) -> UserModel:
        if user_id == acting_user_id:
            raise ValueError("You cannot delete your own account")

        user = self.get_user(user_id)
        self.repo.delete_user(user)
        logger.info(f"User {user.username} (id {user_id}) deleted with all related data")
        return user
