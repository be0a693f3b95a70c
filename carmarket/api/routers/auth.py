# carmarket/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from carmarket.api.deps import (
    SESSION_USER_KEY,
    client_ip,
    ensure_not_blocked,
    get_current_user,
    get_login_guard,
)
from carmarket.data.database import get_db
from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import LoginIn, MessageResponse, RegisterIn, UserOut
from carmarket.services.auth_service import AuthService, LoginFailed
from carmarket.services.login_guard import LoginGuard

router = APIRouter(prefix="/api", tags=["auth"])


def _start_session(request: Request, user: UserModel):
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id


@router.post(
    "/register",
    response_model=UserOut,
    status_code=201,
    dependencies=[Depends(ensure_not_blocked)],
)
def register(
    payload: RegisterIn,
    request: Request,
    db: Session = Depends(get_db),
    guard: LoginGuard = Depends(get_login_guard),
):
    svc = AuthService(db, guard)
    try:
        user = svc.register(payload, client_ip(request))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _start_session(request, user)
    return user


@router.post(
    "/login",
    response_model=UserOut,
    dependencies=[Depends(ensure_not_blocked)],
)
def login(
    payload: LoginIn,
    request: Request,
    db: Session = Depends(get_db),
    guard: LoginGuard = Depends(get_login_guard),
):
    svc = AuthService(db, guard)
    try:
        user = svc.login(payload.username, payload.password, client_ip(request))
    except LoginFailed as e:
        raise HTTPException(
            status_code=401,
            detail={"message": e.message, "attemptsLeft": e.attempts_left},
        )

    _start_session(request, user)
    return user


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}


@router.get("/user", response_model=UserOut)
def current_user(user: UserModel = Depends(get_current_user)):
    """Session user; a deleted account ends the session with 401."""
    return user
