# carmarket/services/car_service.py
from sqlalchemy.orm import Session

from carmarket.data.models.car import CarModel
from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import CarCreate, CarUpdate
from carmarket.repos.car_repo import CarRepo
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)

STAFF_ROLES = ("moderator", "admin")


def is_staff(user: UserModel) -> bool:
    return user.role in STAFF_ROLES


def _filter_value(value: str | None) -> str | None:
    # the client sends "all" for "no filter"
    if not value or value == "all":
        return None
    return value


class CarService:
    def __init__(self, db: Session):
        self.repo = CarRepo(db)

    # query
    def search(self, search: str | None, category: str | None, server: str | None) -> list[CarModel]:
        return self.repo.search(
            query=(search or "").strip() or None,
            category=_filter_value(category),
            server=_filter_value(server),
        )

    def get_car(self, car_id: int) -> CarModel:
        car = self.repo.get_car(car_id)
        if not car:
            raise LookupError("Car not found")
        return car

    def list_by_owner(self, user_id: int) -> list[CarModel]:
        return self.repo.list_by_owner(user_id)

    # commands
    def create_car(self, payload: CarCreate, user: UserModel) -> CarModel:
        if not is_staff(user):
            raise PermissionError("Only moderators can publish cars directly")

        car = self.repo.create_car(CarModel(**payload.model_dump(), created_by=user.id))
        logger.info(f"Car {car.id} ({car.name}) published by {user.username}")
        return car

    def update_car(self, car_id: int, payload: CarUpdate, user: UserModel) -> CarModel:
        self._check_can_modify(user)
        car = self.get_car(car_id)

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "price", "max_speed", "acceleration", "drive",
                                           "category", "server", "is_premium"):
                raise ValueError(f"Field {field} cannot be empty")
            setattr(car, field, value)

        logger.info(f"Car {car_id} updated by {user.username}")
        return self.repo.save(car)

    def delete_car(self, car_id: int, user: UserModel) -> CarModel:
        """Removes the listing together with its favorites and message threads."""
        self._check_can_modify(user)
        car = self.get_car(car_id)

        self.repo.delete_car(car)
        logger.info(f"Car {car_id} ({car.name}) deleted by {user.username}")
        return car

    def withdraw_car(self, car_id: int, user: UserModel) -> CarModel:
        car = self.get_car(car_id)
        if car.created_by != user.id:
            raise PermissionError("You can only withdraw your own cars")

        self.repo.delete_car(car)
        logger.info(f"Car {car_id} ({car.name}) withdrawn by its owner {user.username}")
        return car

    @staticmethod
    def _check_can_modify(user: UserModel):
        # owners take their cars down through withdraw_car only
        if not is_staff(user):
            raise PermissionError("Only moderators can modify cars")
