import pytest
from fastapi.testclient import TestClient

from user_api.config import Settings
from user_api.main import create_app
from user_api.models import User

# In-memory SQLite database shared across connections via StaticPool.
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture()
def app():
    """A fresh application per test.

    Each app builds its own in-memory engine, so every test starts from an
    empty users table and ids start again at 1.
    """
    settings = Settings(_env_file=None, database_url=TEST_DATABASE_URL)
    return create_app(settings)


@pytest.fixture()
def client(app):
    """TestClient used as a context manager so the lifespan creates tables."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db_session(app, client):
    db = app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def user_factory(db_session):
    """Insert users straight through the ORM and return the refreshed rows.

    Lets a test seed the table (ids start at 1 in each fresh app) without
    depending on POST /user working.
    """

    def _create_user(name: str, age: int) -> User:
        user = User(name=name, age=age)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user
