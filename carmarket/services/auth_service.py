# carmarket/services/auth_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import RegisterIn
from carmarket.repos.user_repo import UserRepo
from carmarket.services.login_guard import LoginGuard
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)

# how many remaining attempts make the failure message carry a warning
WARN_ATTEMPTS_LEFT = 2


class LoginFailed(Exception):
    def __init__(self, message: str, attempts_left: int):
        super().__init__(message)
        self.message = message
        self.attempts_left = attempts_left


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


class AuthService:
    def __init__(self, db: Session, guard: LoginGuard):
        self.repo = UserRepo(db)
        self.guard = guard

    def register(self, payload: RegisterIn, ip: str) -> UserModel:
        if self.repo.get_by_username(payload.username):
            raise ValueError("A user with this name already exists")

        try:
            user = self.repo.create_user(
                UserModel(
                    username=payload.username,
                    password=hash_password(payload.password),
                    role="user",
                )
            )
        except IntegrityError:
            # unique username caught a concurrent registration
            self.repo.rollback()
            raise ValueError("A user with this name already exists")

        logger.info(f"New user registered: {user.username} (id {user.id}, IP {ip})")
        return user

    def login(self, username: str, password: str, ip: str) -> UserModel:
        """
        Checks credentials and feeds the outcome to the login guard.
        Raises LoginFailed with the number of attempts left before the ip gets blocked.
        """
        user = self.repo.get_by_username(username)

        if user is not None and verify_password(password, user.password):
            self.guard.record_attempt(ip, username, True)
            logger.info(f"Successful login: {username} (IP {ip})")
            return user

        self.guard.record_attempt(ip, username, False)
        attempts_left = self.guard.attempts_left(ip, username)
        logger.warning(f"Failed login for {username!r} (IP {ip}, attempts left {attempts_left})")

        if user is None:
            message = "No account with this name exists or it was deleted. Please register again."
        elif attempts_left == 0:
            minutes = int(self.guard.block_seconds // 60)
            message = f"Too many failed attempts. Your IP is blocked for {minutes} minutes."
        else:
            message = "Invalid username or password"
            if attempts_left <= WARN_ATTEMPTS_LEFT:
                message += f". Attempts left: {attempts_left}"

        raise LoginFailed(message, attempts_left)

    def get_active_user(self, user_id: int | None) -> UserModel | None:
        if user_id is None:
            return None
        return self.repo.get_user(user_id)
