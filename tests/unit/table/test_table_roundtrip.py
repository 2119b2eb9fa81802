"""
Round trips through a real SQLAlchemy engine.

SQLite stands in for MySQL: it accepts backtick identifiers and the
``LIMIT start, count`` form. It has no DEFAULT keyword inside VALUES, so
every inserted row here carries all of its columns.
"""

import pytest
from sqlalchemy import create_engine, text

from fakes import CatalogConnection, build_catalog
from tablescribe import ReturnShape, Row, Table


@pytest.fixture
def sqlite_connection():
    engine = create_engine("sqlite://")
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE app_users (id CHAR(32) PRIMARY KEY, user_name VARCHAR(255), "
                "role_id INTEGER, email VARCHAR(255))"
            )
        )
        conn.execute(text("CREATE TABLE app_roles (id INTEGER PRIMARY KEY, name VARCHAR(255))"))
    yield CatalogConnection(engine, build_catalog())
    engine.dispose()


@pytest.fixture
def seeded(sqlite_connection):
    roles = Table("roles", sqlite_connection)
    users = Table("users", sqlite_connection)
    roles.insert([{"id": 1, "name": "admin"}, {"id": 2, "name": "staff"}])
    users.insert(
        [
            {"id": "a", "userName": "al", "roleId": 1, "email": "a@x"},
            {"id": "b", "userName": "bo", "roleId": 2, "email": "b@x"},
            {"id": "c", "userName": "cy", "roleId": 1, "email": "c@x"},
        ]
    )
    return users, roles


@pytest.mark.unit
class TestRoundTrip:
    def test_insert_then_select_entities(self, seeded):
        users, _ = seeded

        (user,) = users.select([{"id": "a"}])

        assert isinstance(user, Row)
        assert user.to_dict() == {"id": "a", "userName": "al", "roleId": 1, "email": "a@x"}
        assert user.table is users

    def test_count_and_distinct(self, seeded):
        users, _ = seeded

        assert users.count() == 3
        assert users.count("email", [{"roleId": 1}]) == 2
        assert users.order_by("roleId").distinct("roleId") == [{"roleId": 1}, {"roleId": 2}]

    def test_order_and_limit(self, seeded):
        users, _ = seeded

        rows = users.order_by("userName", "DESC").limit(2, 1).select(shape=ReturnShape.RAW)

        assert [row["userName"] for row in rows] == ["bo", "al"]

    def test_update_and_delete(self, seeded):
        users, _ = seeded

        users.update([{"id": "a", "userName": "ally"}])
        users.delete([{"id": "b"}])

        rows = users.order_by("id").select(shape=ReturnShape.RAW)
        assert [(row["id"], row["userName"]) for row in rows] == [("a", "ally"), ("c", "cy")]

    def test_upsert(self, seeded):
        users, _ = seeded

        users.upsert(
            [
                {"id": "a", "userName": "ally", "roleId": 1, "email": "a@x"},
                {"id": "d", "userName": "di", "roleId": 2, "email": "d@x"},
            ]
        )

        assert users.count() == 4
        (user,) = users.select([{"id": "a"}], shape=ReturnShape.RAW)
        assert user["userName"] == "ally"

    def test_custom_where_and_like(self, seeded):
        users, _ = seeded

        rows = (
            users.like("email", "%@x")
            .custom_where("`:TBL:`.`role_id` = ?", params=[2])
            .select(shape=ReturnShape.RAW)
        )

        assert [row["id"] for row in rows] == ["b"]

    def test_join_and_seek(self, seeded):
        users, _ = seeded

        found = users.join("roles").order_by("id").select()

        assert [user.id for user in found] == ["a", "b", "c"]
        (role,) = users.seek_join("roles", {"id": 1})
        assert role.name == "admin"
        assert [r.name for r in users.seek_join("roles", {"id": [1, 2]}, order_by="name")] == [
            "admin",
            "staff",
        ]
