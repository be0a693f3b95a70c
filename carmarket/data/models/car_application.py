from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from carmarket.data.database import Base
from carmarket.data.models.listing import ListingFieldsMixin


class CarApplicationModel(ListingFieldsMixin, Base):
    __tablename__ = "car_applications"

    id = Column(Integer, primary_key=True)
    status = Column(String, nullable=False, default="pending")  # pending, approved, rejected
    created_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    owner = relationship("UserModel", back_populates="applications", foreign_keys=[created_by])
