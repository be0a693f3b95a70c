# carmarket/repos/application_repo.py
from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from carmarket.data.models.car_application import CarApplicationModel


class ApplicationRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_application(self, application_id: int) -> CarApplicationModel | None:
        return self.db.get(CarApplicationModel, application_id)

    def list_all(self) -> list[CarApplicationModel]:
        return list(
            self.db.execute(
                select(CarApplicationModel).order_by(
                    CarApplicationModel.created_at.desc(), CarApplicationModel.id.desc()
                )
            ).scalars()
        )

    def list_by_status(self, status: str) -> list[CarApplicationModel]:
        return list(
            self.db.execute(
                select(CarApplicationModel)
                .where(CarApplicationModel.status == status)
                .order_by(CarApplicationModel.created_at.desc(), CarApplicationModel.id.desc())
            ).scalars()
        )

    def list_by_owner(self, user_id: int) -> list[CarApplicationModel]:
        return list(
            self.db.execute(
                select(CarApplicationModel)
                .where(CarApplicationModel.created_by == user_id)
                .order_by(CarApplicationModel.created_at.desc(), CarApplicationModel.id.desc())
            ).scalars()
        )

    def count_by_status(self, status: str) -> int:
        return self.db.execute(
            select(func.count(CarApplicationModel.id)).where(CarApplicationModel.status == status)
        ).scalar_one()

    def create_application(self, application: CarApplicationModel) -> CarApplicationModel:
        self.db.add(application)
        self.db.commit()
        self.db.refresh(application)
        return application

    def claim_pending(self, application_id: int, new_data: dict) -> int:
        """
        Moves a pending application to its reviewed state inside the current transaction.
        Returns 0 when someone else reviewed it first.
        """
        result = self.db.execute(
            update(CarApplicationModel)
            .where(
                CarApplicationModel.id == application_id,
                CarApplicationModel.status == "pending",
            )
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, application: CarApplicationModel) -> CarApplicationModel:
        self.db.refresh(application)
        return application
