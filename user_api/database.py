from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine that backs one application instance."""
    url = make_url(database_url)
    kwargs = {"echo": echo}

    if url.get_backend_name() == "sqlite":
        # Needed for SQLite in multi-threaded FastAPI
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # In-memory SQLite shared across connections via StaticPool.
            kwargs["poolclass"] = StaticPool

    return create_engine(url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session from the app's own factory and make sure it is closed.

    The data-access functions borrow this session; they commit or roll back
    their single statement but never close it.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
