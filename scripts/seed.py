"""Seed a development database with two users, a resource and a reservation."""

import sys
import os
from datetime import datetime, timezone

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import get_settings
from app.core.timeutils import local_timezone
from app.infrastructure.database import Base, build_engine, build_session_factory
from app.domain.models.resource import Resource
from app.domain.models.reservation import Reservation
from app.domain.models.user import User
from app.infrastructure.repositories.resource_repository import SQLAlchemyResourceRepository
from app.infrastructure.repositories.reservation_repository import SQLAlchemyReservationRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def seed():
    settings = get_settings()
    engine = build_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)

    print("Seeding database...")
    db = build_session_factory(engine)()
    try:
        users = SQLAlchemyUserRepository(db, User)
        resources = SQLAlchemyResourceRepository(db, Resource)
        reservations = SQLAlchemyReservationRepository(db, Reservation)

        alice = users.ensure("alice", commit=False)
        bob = users.ensure("bob", commit=False)
        resource = resources.create(
            {"name": "Alice's resource", "description": "Test resource", "owner_id": alice.id},
            commit=False,
        )
        tz = local_timezone(settings.TIMEZONE)
        reservation = reservations.create(
            {
                "resource_id": resource.id,
                "user_id": bob.id,
                "start_time": tz.localize(datetime(2025, 2, 20, 14, 0)).astimezone(timezone.utc),
                "end_time": tz.localize(datetime(2025, 2, 20, 16, 30)).astimezone(timezone.utc),
            },
            commit=False,
        )
        users.commit()
        print(f"Created users alice ({alice.id}) and bob ({bob.id})")
        print(f"Created resource {resource.id} and reservation {reservation.id}")

    except Exception as e:
        print(f"Seeding failed: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    seed()
