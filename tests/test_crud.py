import pytest

from user_api import crud
from user_api.database import Base
from user_api.errors import QueryError


def test_list_users_empty_is_a_list(db_session):
    users = crud.list_users(db_session, offset=0, limit=10)
    assert users == []
    assert isinstance(users, list)


def test_create_user_returns_database_ids(db_session):
    assert crud.create_user(db_session, "first", 1) == 1
    assert crud.create_user(db_session, "second", 2) == 2


@pytest.mark.parametrize(
    "name, age",
    [
        ("test user", 30),
        ("", 0),
        ("O'Brien", -3),
        ("Robert'); DROP TABLE users;--", 7),
        ("1 OR 1=1", 2**31),
        ("名前 with ünïcode", 99),
        ("x" * 255, 1),
    ],
)
def test_create_then_fetch_round_trip(db_session, name, age):
    """Values are bound as parameters, so SQL metacharacters are stored verbatim."""
    user_id = crud.create_user(db_session, name, age)

    result = crud.fetch_user(db_session, user_id)
    assert isinstance(result, crud.Found)
    assert (result.user.id, result.user.name, result.user.age) == (user_id, name, age)

    # The table survived whatever was in the name.
    assert len(crud.list_users(db_session, offset=0, limit=10)) == 1


def test_fetch_missing_user_is_not_found(db_session):
    assert crud.fetch_user(db_session, 999) == crud.NotFound()


def test_update_user_overwrites_fields(db_session, user_factory):
    user_id = user_factory(name="before", age=10).id

    crud.update_user(db_session, user_id, "after", 11)

    result = crud.fetch_user(db_session, user_id)
    assert isinstance(result, crud.Found)
    assert (result.user.name, result.user.age) == ("after", 11)


def test_update_and_delete_missing_user_do_not_raise(db_session):
    crud.update_user(db_session, 123, "nobody", 1)
    crud.delete_user(db_session, 123)

    assert crud.list_users(db_session, offset=0, limit=10) == []


def test_delete_user_removes_row(db_session, user_factory):
    keep_id = user_factory(name="keep", age=1).id
    drop_id = user_factory(name="drop", age=2).id

    crud.delete_user(db_session, drop_id)

    assert crud.fetch_user(db_session, drop_id) == crud.NotFound()
    assert [u.id for u in crud.list_users(db_session, offset=0, limit=10)] == [keep_id]


def test_list_users_offset_and_limit(db_session, user_factory):
    for i in range(5):
        user_factory(name=f"user {i}", age=i)

    page = crud.list_users(db_session, offset=1, limit=2)
    assert [u.id for u in page] == [2, 3]


def test_driver_failures_become_query_errors(app, db_session):
    """With the table gone every operation reports the driver's message."""
    Base.metadata.drop_all(bind=app.state.engine)

    result = crud.fetch_user(db_session, 1)
    assert isinstance(result, crud.Failed)
    assert "no such table" in result.reason

    with pytest.raises(QueryError, match="no such table"):
        crud.create_user(db_session, "x", 1)
    with pytest.raises(QueryError, match="no such table"):
        crud.update_user(db_session, 1, "x", 1)
    with pytest.raises(QueryError, match="no such table"):
        crud.delete_user(db_session, 1)
    with pytest.raises(QueryError, match="no such table"):
        crud.list_users(db_session, offset=0, limit=10)
