from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from carmarket.data.database import Base
from carmarket.data.models.listing import ListingFieldsMixin


class CarModel(ListingFieldsMixin, Base):
    __tablename__ = "cars"

    id = Column(Integer, primary_key=True)
    status = Column(String, nullable=False, default="active")  # active, pending, rejected
    created_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    owner = relationship("UserModel", back_populates="cars")
    favorites = relationship("FavoriteModel", back_populates="car", cascade="all, delete")
    messages = relationship("MessageModel", back_populates="car", cascade="all, delete")
