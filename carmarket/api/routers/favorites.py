# carmarket/api/routers/favorites.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from carmarket.api.deps import get_current_user
from carmarket.data.database import get_db
from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import (
    CarOut,
    FavoriteCheckOut,
    FavoriteIn,
    FavoriteOut,
    FavoriteToggleOut,
)
from carmarket.services.favorite_service import FavoriteService

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


def get_service(db: Session):
    return FavoriteService(db)


@router.get("", response_model=List[CarOut])
def list_favorites(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).list_cars(user.id)


@router.post("", response_model=FavoriteOut, status_code=201)
def add_favorite(
    payload: FavoriteIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add(user.id, payload.car_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{car_id}", status_code=204)
def remove_favorite(
    car_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        get_service(db).remove(user.id, car_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.get("/check/{car_id}", response_model=FavoriteCheckOut)
def check_favorite(
    car_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"is_favorite": get_service(db).is_favorite(user.id, car_id)}


@router.post("/toggle/{car_id}", response_model=FavoriteToggleOut)
def toggle_favorite(
    car_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        now_favorite = get_service(db).toggle(user.id, car_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"action": "added" if now_favorite else "removed", "is_favorite": now_favorite}
