# carmarket/repos/car_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from carmarket.data.models.car import CarModel


class CarRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_car(self, car_id: int) -> CarModel | None:
        return self.db.get(CarModel, car_id)

    def search(
        self,
        query: str | None = None,
        category: str | None = None,
        server: str | None = None,
    ) -> list[CarModel]:
        stmt = select(CarModel)
        if query:
            stmt = stmt.where(CarModel.name.ilike(f"%{query}%"))
        if category:
            stmt = stmt.where(CarModel.category == category)
        if server:
            stmt = stmt.where(CarModel.server == server)
        stmt = stmt.order_by(CarModel.created_at.desc(), CarModel.id.desc())
        return list(self.db.execute(stmt).scalars())

    def list_by_owner(self, user_id: int) -> list[CarModel]:
        return list(
            self.db.execute(
                select(CarModel)
                .where(CarModel.created_by == user_id)
                .order_by(CarModel.created_at.desc(), CarModel.id.desc())
            ).scalars()
        )

    def count(self) -> int:
        return self.db.execute(select(func.count(CarModel.id))).scalar_one()

    def add(self, car: CarModel) -> CarModel:
        """Stages a car in the current transaction without committing."""
        self.db.add(car)
        self.db.flush()
        return car

    def create_car(self, car: CarModel) -> CarModel:
        self.db.add(car)
        self.db.commit()
        self.db.refresh(car)
        return car

    def save(self, car: CarModel) -> CarModel:
        self.db.commit()
        self.db.refresh(car)
        return car

    def delete_car(self, car: CarModel) -> None:
        self.db.delete(car)
        self.db.commit()
