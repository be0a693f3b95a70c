# carmarket/api/routers/applications.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from carmarket.api.deps import get_current_user, require_staff
from carmarket.data.database import get_db
from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import ApplicationReview, CarApplicationCreate, CarApplicationOut
from carmarket.services.application_service import ApplicationService

router = APIRouter(prefix="/api", tags=["applications"])


def get_service(db: Session):
    return ApplicationService(db)


@router.post("/car-applications", response_model=CarApplicationOut, status_code=201)
def submit_application(
    payload: CarApplicationCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).submit(payload, user)


@router.get("/my-applications", response_model=List[CarApplicationOut])
def my_applications(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).list_by_owner(user.id)


@router.get("/applications", response_model=List[CarApplicationOut])
def all_applications(
    user: UserModel = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).list_all()


@router.get("/applications/pending", response_model=List[CarApplicationOut])
def pending_applications(
    user: UserModel = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).list_pending()


@router.patch("/applications/{application_id}", response_model=CarApplicationOut)
def review_application(
    application_id: int,
    payload: ApplicationReview,
    user: UserModel = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """
    Approves or rejects a pending application.
    Approval publishes a car owned by the submitter.
    """
    svc = get_service(db)
    try:
        return svc.review(application_id, payload.status, user)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
