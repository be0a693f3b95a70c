# carmarket/api/deps.py
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from carmarket.data.database import get_db
from carmarket.data.models.user import UserModel
from carmarket.repos.user_repo import UserRepo
from carmarket.services.login_guard import LoginGuard
from carmarket.services.notification_service import NotificationService
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)

SESSION_USER_KEY = "user_id"


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "127.0.0.1"


def get_login_guard(request: Request) -> LoginGuard:
    return request.app.state.login_guard


def get_notification_service(request: Request) -> NotificationService:
    return NotificationService(request.app.state.connections)


def ensure_not_blocked(request: Request, guard: LoginGuard = Depends(get_login_guard)):
    ip = client_ip(request)
    if guard.is_blocked(ip):
        logger.warning(f"Blocked IP {ip} tried {request.url.path}")
        raise HTTPException(
            status_code=429,
            detail={
                "message": f"Too many failed login attempts. Try again in {int(guard.block_seconds // 60)} minutes.",
                "blocked": True,
            },
        )


def get_current_user(request: Request, db: Session = Depends(get_db)) -> UserModel:
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    user = UserRepo(db).get_user(user_id)
    if not user:
        # account was deleted while the session was alive
        request.session.clear()
        raise HTTPException(status_code=401, detail="Authentication required")

    return user


def require_role(*roles: str):
    def dependency(user: UserModel = Depends(get_current_user)) -> UserModel:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user

    return dependency


require_staff = require_role("moderator", "admin")
require_admin = require_role("admin")
