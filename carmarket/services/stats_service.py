# carmarket/services/stats_service.py
from sqlalchemy.orm import Session

from carmarket.repos.application_repo import ApplicationRepo
from carmarket.repos.car_repo import CarRepo
from carmarket.repos.message_repo import MessageRepo
from carmarket.repos.user_repo import UserRepo


class StatsService:
    def __init__(self, db: Session):
        self.users = UserRepo(db)
        self.cars = CarRepo(db)
        self.applications = ApplicationRepo(db)
        self.messages = MessageRepo(db)

    def overview(self) -> dict:
        return {
            "total_users": self.users.count(),
            "total_cars": self.cars.count(),
            "pending_applications": self.applications.count_by_status("pending"),
            "total_messages": self.messages.count(),
            "unread_messages": self.messages.count_unread(),
        }
