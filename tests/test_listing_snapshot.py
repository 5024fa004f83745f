import pytz
from sqlalchemy import text

from app.application.services.query_validator import validate_query
from app.domain.models.reservation import Reservation
from app.domain.models.resource import Resource
from app.domain.models.user import User
from app.domain.repositories.resource_repository import RESOURCE_SORT_COLUMNS
from app.domain.repositories.user_repository import USER_SORT_COLUMNS
from app.infrastructure.database import Base, build_engine, build_session_factory
from app.infrastructure.repositories.resource_repository import SQLAlchemyResourceRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def make_session(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    Base.metadata.create_all(bind=engine)
    return build_session_factory(engine)()


def sqlite_in_transaction(session) -> bool:
    return session.connection().connection.driver_connection.in_transaction


def test_resource_listing_holds_one_transaction(tmp_path):
    session = make_session(tmp_path)
    users = SQLAlchemyUserRepository(session, User)
    resources = SQLAlchemyResourceRepository(session, Resource)
    owner = users.ensure("alice")
    resources.create({"name": "Sauna", "owner_id": owner.id})
    session.commit()

    rows, total = resources.list_page(validate_query({}, RESOURCE_SORT_COLUMNS, pytz.utc))

    assert total == 1
    assert [resource.name for resource, _ in rows] == ["Sauna"]
    assert sqlite_in_transaction(session)

    session.close()


def test_snapshot_ends_with_the_session(tmp_path):
    session = make_session(tmp_path)
    users = SQLAlchemyUserRepository(session, User)
    users.ensure("alice")

    users.list_page(validate_query({}, USER_SORT_COLUMNS, pytz.utc))
    session.rollback()

    assert not sqlite_in_transaction(session)
    assert session.execute(text("SELECT count(*) FROM users")).scalar() == 1
    assert session.query(Reservation).count() == 0

    session.close()
