"""FastAPI application — main entry point."""

import structlog
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from app.config import Settings, get_settings
from app.infrastructure.database import Base, build_engine, build_session_factory
from app.infrastructure.identity_provider import KeycloakIdentityProvider
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.core.exceptions import register_exception_handlers
from app.domain.identity import IdentityProvider
from app.application.services.resource_locks import ResourceLocks

# Import all models so SQLAlchemy knows about them
from app.domain.models.user import User  # noqa: F401
from app.domain.models.resource import Resource  # noqa: F401
from app.domain.models.reservation import Reservation  # noqa: F401

# Import routers
from app.interfaces.api.auth import router as auth_router
from app.interfaces.api.home import router as home_router
from app.interfaces.api.resources import router as resources_router
from app.interfaces.api.reservations import router as reservations_router
from app.interfaces.api.users import router as users_router

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> FastAPI:
    """Build the application with its database, identity provider and lock table."""
    settings = settings or get_settings()
    configure_logging(settings)

    engine = engine or build_engine(settings.DATABASE_URL)
    identity_provider = identity_provider or KeycloakIdentityProvider(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan — startup and shutdown events."""
        logger.info("Starting booking backend...", env=settings.ENVIRONMENT)

        # Create DB tables (dev only — use migrations in production)
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

        yield

        close = getattr(app.state.identity_provider, "close", None)
        if close is not None:
            close()
        logger.info("Booking backend stopped")

    app = FastAPI(
        title="Booking Backend",
        description="API Backend — users, resources and non-overlapping reservations",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.identity_provider = identity_provider
    app.state.resource_locks = ResourceLocks()

    # Setup Middleware (Request logging, Correlation ID, CORS)
    setup_middleware(app, settings)

    # Exception Handling
    register_exception_handlers(app)

    # Include routers
    app.include_router(home_router)
    app.include_router(auth_router)
    app.include_router(resources_router)
    app.include_router(reservations_router)
    app.include_router(users_router)

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


app = create_app()
