# carmarket/repos/message_repo.py
from sqlalchemy import select, update, func, or_
from sqlalchemy.orm import Session, selectinload

from carmarket.data.models.message import MessageModel

# car/sender/recipient names are read by the response schema
_WITH_NAMES = (
    selectinload(MessageModel.car),
    selectinload(MessageModel.sender),
    selectinload(MessageModel.recipient),
)


class MessageRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_message(self, message_id: int) -> MessageModel | None:
        return self.db.get(MessageModel, message_id)

    def list_for_user(self, user_id: int) -> list[MessageModel]:
        return list(
            self.db.execute(
                select(MessageModel)
                .options(*_WITH_NAMES)
                .where(or_(MessageModel.sender_id == user_id, MessageModel.recipient_id == user_id))
                .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            ).scalars()
        )

    def list_all(self) -> list[MessageModel]:
        return list(
            self.db.execute(
                select(MessageModel)
                .options(*_WITH_NAMES)
                .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            ).scalars()
        )

    def count(self) -> int:
        return self.db.execute(select(func.count(MessageModel.id))).scalar_one()

    def count_unread(self, user_id: int | None = None) -> int:
        stmt = select(func.count(MessageModel.id)).where(MessageModel.is_read.is_(False))
        if user_id is not None:
            stmt = stmt.where(MessageModel.recipient_id == user_id)
        return self.db.execute(stmt).scalar_one()

    def create_message(self, message: MessageModel) -> MessageModel:
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def save(self, message: MessageModel) -> MessageModel:
        self.db.commit()
        self.db.refresh(message)
        return message

    def mark_conversation_read(self, car_id: int, participant_ids: tuple[int, int], user_id: int) -> int:
        result = self.db.execute(
            update(MessageModel)
            .where(
                MessageModel.car_id == car_id,
                MessageModel.recipient_id == user_id,
                MessageModel.is_read.is_(False),
                MessageModel.sender_id.in_(participant_ids),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount

    def delete_message(self, message: MessageModel) -> None:
        self.db.delete(message)
        self.db.commit()
