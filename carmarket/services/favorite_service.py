# carmarket/services/favorite_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carmarket.data.models.car import CarModel
from carmarket.data.models.favorite import FavoriteModel
from carmarket.repos.car_repo import CarRepo
from carmarket.repos.favorite_repo import FavoriteRepo
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)


class FavoriteService:
    def __init__(self, db: Session):
        self.repo = FavoriteRepo(db)
        self.car_repo = CarRepo(db)

    def list_cars(self, user_id: int) -> list[CarModel]:
        return self.repo.list_cars(user_id)

    def is_favorite(self, user_id: int, car_id: int) -> bool:
        return self.repo.get_favorite(user_id, car_id) is not None

    def add(self, user_id: int, car_id: int) -> FavoriteModel:
        if not self.car_repo.get_car(car_id):
            raise LookupError("Car not found")
        if self.is_favorite(user_id, car_id):
            raise ValueError("Car is already in favorites")

        try:
            return self.repo.add_favorite(FavoriteModel(user_id=user_id, car_id=car_id))
        except IntegrityError:
            # unique (user_id, car_id) caught a concurrent insert
            self.repo.rollback()
            raise ValueError("Car is already in favorites")

    def remove(self, user_id: int, car_id: int) -> None:
        if not self.repo.remove_favorite(user_id, car_id):
            raise LookupError("Car is not in favorites")

    def toggle(self, user_id: int, car_id: int) -> bool:
        """Returns the new state: True if the car is now a favorite."""
        if not self.car_repo.get_car(car_id):
            raise LookupError("Car not found")

        if self.repo.remove_favorite(user_id, car_id):
            logger.info(f"User {user_id} removed car {car_id} from favorites")
            return False

        self.add(user_id, car_id)
        logger.info(f"User {user_id} added car {car_id} to favorites")
        return True
