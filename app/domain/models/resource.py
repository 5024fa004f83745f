"""Resource domain model — maps to the 'resources' table."""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.infrastructure.database import Base
from app.domain.models.user import new_id

NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 30
DESCRIPTION_MAX_LENGTH = 280


class Resource(Base):
    __tablename__ = "resources"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(NAME_MAX_LENGTH), nullable=False, index=True)
    description = Column(String(DESCRIPTION_MAX_LENGTH), nullable=True)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("User", back_populates="resources")
    reservations = relationship(
        "Reservation", back_populates="resource", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Resource {self.id} - {self.name}>"
