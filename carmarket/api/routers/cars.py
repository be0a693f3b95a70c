# carmarket/api/routers/cars.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from carmarket.api.deps import get_current_user, require_staff
from carmarket.data.database import get_db
from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import CarCreate, CarOut, CarUpdate, MessageResponse
from carmarket.services.car_service import CarService

router = APIRouter(prefix="/api", tags=["cars"])


def get_service(db: Session):
    return CarService(db)


@router.get("/cars", response_model=List[CarOut])
def list_cars(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    server: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return get_service(db).search(search, category, server)


@router.get("/cars/{car_id}", response_model=CarOut)
def get_car(car_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_car(car_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/my-cars", response_model=List[CarOut])
def my_cars(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).list_by_owner(user.id)


@router.post("/cars", response_model=CarOut, status_code=201)
def create_car(
    payload: CarCreate,
    user: UserModel = Depends(require_staff),
    db: Session = Depends(get_db),
):
    try:
        return get_service(db).create_car(payload, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.put("/cars/{car_id}", response_model=CarOut)
def update_car(
    car_id: int,
    payload: CarUpdate,
    user: UserModel = Depends(require_staff),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_car(car_id, payload, user)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/cars/{car_id}", status_code=204)
def delete_car(
    car_id: int,
    user: UserModel = Depends(require_staff),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_car(car_id, user)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return Response(status_code=204)


@router.delete("/my-cars/{car_id}", response_model=MessageResponse)
def withdraw_car(
    car_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Owner takes the car off sale; its conversations go with it."""
    svc = get_service(db)
    try:
        car = svc.withdraw_car(car_id, user)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return {"message": f'"{car.name}" was taken off sale. All related conversations were removed.'}
