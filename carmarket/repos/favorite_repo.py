# carmarket/repos/favorite_repo.py
from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from carmarket.data.models.car import CarModel
from carmarket.data.models.favorite import FavoriteModel


class FavoriteRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_favorite(self, user_id: int, car_id: int) -> FavoriteModel | None:
        return self.db.execute(
            select(FavoriteModel).where(
                FavoriteModel.user_id == user_id,
                FavoriteModel.car_id == car_id,
            )
        ).scalar_one_or_none()

    def list_cars(self, user_id: int) -> list[CarModel]:
        return list(
            self.db.execute(
                select(CarModel)
                .join(FavoriteModel, FavoriteModel.car_id == CarModel.id)
                .where(FavoriteModel.user_id == user_id)
                .order_by(FavoriteModel.created_at.desc(), FavoriteModel.id.desc())
            ).scalars()
        )

    def add_favorite(self, favorite: FavoriteModel) -> FavoriteModel:
        self.db.add(favorite)
        self.db.commit()
        self.db.refresh(favorite)
        return favorite

    def remove_favorite(self, user_id: int, car_id: int) -> bool:
        result = self.db.execute(
            delete(FavoriteModel).where(
                FavoriteModel.user_id == user_id,
                FavoriteModel.car_id == car_id,
            )
        )
        self.db.commit()
        return result.rowcount > 0

    def rollback(self):
        self.db.rollback()
