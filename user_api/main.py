import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from . import models  # noqa: F401  (registers the users table on Base)
from .config import Settings, get_settings
from .database import Base, build_engine, build_session_factory
from .errors import register_exception_handlers
from .routers import users

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application together with the database handle it owns.

    The engine and session factory live on ``app.state`` rather than in
    module globals, so each app (one per test, for instance) gets its own.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    engine = build_engine(settings.sqlalchemy_url, echo=settings.echo_sql)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables on startup so the app is immediately usable.
        Base.metadata.create_all(bind=engine)
        logger.info("Database ready (%s)", engine.url.get_backend_name())
        yield
        engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Create, read, update, delete and list users.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    register_exception_handlers(app)
    app.include_router(users.router)
    return app
