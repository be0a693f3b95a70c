# carmarket/api/routers/users.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from carmarket.api.deps import get_current_user, require_admin, require_staff
from carmarket.data.database import get_db
from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import (
    MessageResponse,
    RoleUpdate,
    StatsOut,
    UserOut,
    UserStatusMap,
    UserUpdate,
)
from carmarket.services.stats_service import StatsService
from carmarket.services.user_service import UserService

router = APIRouter(prefix="/api", tags=["users"])


def get_service(db: Session):
    return UserService(db)


@router.get("/users", response_model=List[UserOut])
def list_users(
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).list_users()


@router.get("/users/status", response_model=UserStatusMap)
def users_status(request: Request, user: UserModel = Depends(get_current_user)):
    """Online/offline state of everyone who ever opened a notification socket."""
    return request.app.state.connections.status_snapshot()


@router.patch("/users/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    payload: UserUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_user(user_id, payload.username, payload.role)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/users/{user_id}/role", response_model=UserOut)
def update_user_role(
    user_id: int,
    payload: RoleUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).update_role(user_id, payload.role)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_user(user_id, admin.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "User and all related data were removed"}


@router.get("/admin/stats", response_model=StatsOut)
def admin_stats(
    user: UserModel = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return StatsService(db).overview()
