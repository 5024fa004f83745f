"""User domain model — maps to the 'users' table."""

import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.infrastructure.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(255), unique=True, nullable=False, index=True)  # always lowercase
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    resources = relationship(
        "Resource", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True
    )
    reservations = relationship(
        "Reservation", back_populates="reservee", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<User {self.username}>"
