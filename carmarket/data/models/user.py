from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from carmarket.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)  # werkzeug hash, never plaintext
    role = Column(String, nullable=False, default="user")  # user, moderator, admin
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    cars = relationship("CarModel", back_populates="owner", cascade="all, delete-orphan")
    applications = relationship(
        "CarApplicationModel",
        back_populates="owner",
        cascade="all, delete-orphan",
        foreign_keys="CarApplicationModel.created_by",
    )
    favorites = relationship("FavoriteModel", back_populates="user", cascade="all, delete")
    sent_messages = relationship(
        "MessageModel",
        back_populates="sender",
        cascade="all, delete",
        foreign_keys="MessageModel.sender_id",
    )
    received_messages = relationship(
        "MessageModel",
        back_populates="recipient",
        cascade="all, delete",
        foreign_keys="MessageModel.recipient_id",
    )
