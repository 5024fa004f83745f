"""SQLAlchemy engine, session factory and declarative base."""

from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str) -> Engine:
    """Create the engine for a database URL.

    In-memory SQLite shares one connection across threads so every session
    sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def begin_snapshot(db: Session) -> None:
    """Open a transaction in which every read sees one snapshot.

    Must run before the first statement of the transaction. pysqlite emits no
    BEGIN before a SELECT, so on SQLite the transaction is opened explicitly
    and holds its shared lock until the session ends.
    """
    if db.in_transaction():
        return
    if db.get_bind().dialect.name == "sqlite":
        db.connection(execution_options={"isolation_level": "SERIALIZABLE"})
        db.execute(text("BEGIN"))
    else:
        db.connection(execution_options={"isolation_level": "REPEATABLE READ"})


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session from the factory built at startup."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
