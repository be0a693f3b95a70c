# carmarket/services/application_service.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from carmarket.data.models.car import CarModel
from carmarket.data.models.car_application import CarApplicationModel
from carmarket.data.models.listing import LISTING_FIELDS
from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import CarApplicationCreate
from carmarket.repos.application_repo import ApplicationRepo
from carmarket.repos.car_repo import CarRepo
from carmarket.services.car_service import is_staff
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)


class ApplicationService:
    """
    Moderation workflow for submitted listings.

    pending -> approved (a Car is published for the submitter)
    pending -> rejected
    Both end states are final.
    """

    def __init__(self, db: Session):
        self.repo = ApplicationRepo(db)
        self.car_repo = CarRepo(db)

    def submit(self, payload: CarApplicationCreate, user: UserModel) -> CarApplicationModel:
        application = self.repo.create_application(
            CarApplicationModel(**payload.model_dump(), status="pending", created_by=user.id)
        )
        logger.info(f"Application {application.id} ({application.name}) submitted by {user.username}")
        return application

    def list_by_owner(self, user_id: int) -> list[CarApplicationModel]:
        return self.repo.list_by_owner(user_id)

    def list_all(self) -> list[CarApplicationModel]:
        return self.repo.list_all()

    def list_pending(self) -> list[CarApplicationModel]:
        return self.repo.list_by_status("pending")

    def review(self, application_id: int, status: str, reviewer: UserModel) -> CarApplicationModel:
        if not is_staff(reviewer):
            raise PermissionError("Only moderators can review applications")
        if status not in ("approved", "rejected"):
            raise ValueError("Invalid status")

        application = self.repo.get_application(application_id)
        if not application:
            raise LookupError("Application not found")
        if application.status != "pending":
            raise ValueError(f"Application was already {application.status}")

        # conditional update: set status where id = ? and status = 'pending'
        # a concurrent review that got there first leaves rowcount at 0
        claimed = self.repo.claim_pending(
            application_id,
            {
                "status": status,
                "reviewed_by": reviewer.id,
                "reviewed_at": datetime.now(timezone.utc),
            },
        )
        if claimed == 0:
            self.repo.rollback()
            logger.warning(f"Application {application_id} was reviewed concurrently, {reviewer.username} lost")
            raise ValueError("Application was already reviewed")

        # status change and the published car go in one transaction
        try:
            if status == "approved":
                car = self.car_repo.add(
                    CarModel(
                        **{field: getattr(application, field) for field in LISTING_FIELDS},
                        status="active",
                        created_by=application.created_by,
                    )
                )
                logger.info(f"Application {application_id} approved, car {car.id} published")
            else:
                logger.info(f"Application {application_id} rejected")
            self.repo.commit()
        except Exception as e:
            logger.error(f"Failed to review application {application_id}: {e}")
            self.repo.rollback()
            raise

        return self.repo.refresh(application)
