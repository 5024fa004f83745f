"""Reservation domain model — maps to the 'reservations' table."""

from sqlalchemy import Column, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.infrastructure.database import Base
from app.domain.models.user import new_id


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(String(36), primary_key=True, default=new_id)
    resource_id = Column(String(36), ForeignKey("resources.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    resource = relationship("Resource", back_populates="reservations")
    reservee = relationship("User", back_populates="reservations")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_reservation_interval"),
    )

    def __repr__(self):
        return f"<Reservation {self.id} - {self.start_time} / {self.end_time}>"
