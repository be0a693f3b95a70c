from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from carmarket.data.database import Base


class MessageModel(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True)
    car_id = Column(Integer, ForeignKey("cars.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    content = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    car = relationship("CarModel", back_populates="messages")
    sender = relationship("UserModel", back_populates="sent_messages", foreign_keys=[sender_id])
    recipient = relationship("UserModel", back_populates="received_messages", foreign_keys=[recipient_id])

    # read by the response schema
    @property
    def car_name(self):
        return self.car.name if self.car else None

    @property
    def sender_name(self):
        return self.sender.username if self.sender else None

    @property
    def recipient_name(self):
        return self.recipient.username if self.recipient else None
