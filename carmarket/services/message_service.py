# carmarket/services/message_service.py
from sqlalchemy.orm import Session

from carmarket.data.models.message import MessageModel
from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import MessageIn
from carmarket.repos.car_repo import CarRepo
from carmarket.repos.message_repo import MessageRepo
from carmarket.repos.user_repo import UserRepo
from carmarket.services.content_filter import check_message
from carmarket.services.notification_service import NotificationService
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)


class MessageBlocked(ValueError):
    """Rejected by the content filter."""


class MessageService:
    def __init__(self, db: Session, notifications: NotificationService | None = None):
        self.repo = MessageRepo(db)
        self.car_repo = CarRepo(db)
        self.user_repo = UserRepo(db)
        self.notifications = notifications

    #query
    def list_for_user(self, user_id: int) -> list[MessageModel]:
        return self.repo.list_for_user(user_id)

    def list_all(self) -> list[MessageModel]:
        return self.repo.list_all()

    def unread_count(self, user_id: int) -> int:
        return self.repo.count_unread(user_id)

    #commands
    def send(self, payload: MessageIn, sender: UserModel) -> MessageModel:
        car = self.car_repo.get_car(payload.car_id)
        if not car:
            raise LookupError("Car not found")

        if payload.recipient_id == sender.id:
            raise ValueError("You cannot send a message to yourself")

        if not self.user_repo.get_user(payload.recipient_id):
            raise LookupError("Recipient not found")

        checked = check_message(payload.content)
        if not checked.allowed:
            logger.warning(f"Message from user {sender.id} blocked: {checked.reason}")
            raise MessageBlocked(f"Message blocked: {checked.reason}")

        message = self.repo.create_message(
            MessageModel(
                car_id=car.id,
                sender_id=sender.id,
                recipient_id=payload.recipient_id,
                content=checked.content,
                is_read=False,
            )
        )
        logger.info(f"Message {message.id} sent from {sender.id} to {payload.recipient_id} about car {car.id}")

        if self.notifications is not None:
            self.notifications.notify_new_message(message, car, sender)

        return message

    def mark_read(self, message_id: int, user: UserModel) -> MessageModel:
        message = self.repo.get_message(message_id)
        if not message:
            raise LookupError("Message not found")
        if message.recipient_id != user.id:
            raise PermissionError("Only the recipient can mark a message as read")

        message.is_read = True
        return self.repo.save(message)

    def mark_conversation_read(self, car_id: int, buyer_id: int, seller_id: int, user: UserModel) -> int:
        """Marks read everything on this car addressed to the user by either participant."""
        marked = self.repo.mark_conversation_read(car_id, (buyer_id, seller_id), user.id)
        logger.info(f"User {user.id} marked {marked} messages on car {car_id} as read")
        return marked

    def delete(self, message_id: int, moderator: UserModel) -> None:
        message = self.repo.get_message(message_id)
        if not message:
            raise LookupError("Message not found")

        self.repo.delete_message(message)
        logger.info(f"Message {message_id} removed by moderator {moderator.username}")
