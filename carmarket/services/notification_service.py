# carmarket/services/notification_service.py
from carmarket.celery_worker import celery_app
from carmarket.data.models.car import CarModel
from carmarket.data.models.message import MessageModel
from carmarket.data.models.user import UserModel
from carmarket.services.connection_manager import ConnectionManager
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Tells a recipient about a new message.
    Open socket -> instant push. Otherwise a Celery task takes over; the
    client still sees the message on its next poll.
    """

    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def notify_new_message(self, message: MessageModel, car: CarModel, sender: UserModel) -> bool:
        payload = {
            "type": "new_message",
            "data": {
                "carId": car.id,
                "carName": car.name,
                "senderName": sender.username,
                "message": message.content,
            },
        }

        # message is committed by now; notification errors are only logged
        try:
            if self.manager.push(message.recipient_id, payload):
                logger.info(f"Push notification sent to user {message.recipient_id}")
                return True
        except Exception as e:
            logger.warning(f"Push to user {message.recipient_id} failed: {e}")

        try:
            send_offline_message_notification_task.delay(message.recipient_id, message.id, car.name)
        except Exception as e:
            logger.warning(f"Could not enqueue offline notification for user {message.recipient_id}: {e}")
        return False


@celery_app.task(name="carmarket.services.notification_service.send_offline_message_notification_task")
def send_offline_message_notification_task(user_id: int, message_id: int, car_name: str):
    """
    Celery task for recipients without an open socket.
    Only logs for now; email or mobile push would plug in here.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: new message {message_id} about {car_name}")

    return {"user_id": user_id, "message_id": message_id, "status": "sent"}
