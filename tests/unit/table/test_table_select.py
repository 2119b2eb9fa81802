"""Unit tests for Table select-family operations and modifiers."""

import json

import pytest

from tablescribe import ConfigurationError, ExecutionError, ReturnShape, Row, Table
from tablescribe.table import PendingOperation

USER_COLUMNS = (
    "`app_users`.`id` AS `id`, `app_users`.`user_name` AS `userName`, "
    "`app_users`.`role_id` AS `roleId`, `app_users`.`email` AS `email`"
)
SELECT_USERS = f"SELECT {USER_COLUMNS} FROM `app_users`"


def _user(id, name="al", role=1, email=None):
    return {"id": id, "userName": name, "roleId": role, "email": email}


@pytest.mark.unit
class TestSelect:
    def test_empty_criteria_has_no_where(self, users, connection):
        assert users.select() == []

        assert connection.last["sql"] == SELECT_USERS
        assert connection.last["params"] == []

    def test_criteria_entries_are_ored(self, users, connection):
        users.select([{"id": 1}, {"id": 2}], shape=ReturnShape.RAW)

        assert connection.last["sql"] == (
            f"{SELECT_USERS} WHERE (`app_users`.`id` = ?) OR (`app_users`.`id` = ?)"
        )
        assert connection.last["params"] == [1, 2]

    def test_criteria_fields_are_anded_and_snake_cased(self, users, connection):
        users.select([{"roleId": 2, "userName": "al"}])

        assert connection.last["sql"] == (
            f"{SELECT_USERS} WHERE (`app_users`.`role_id` = ? AND `app_users`.`user_name` = ?)"
        )
        assert connection.last["params"] == [2, "al"]

    def test_list_value_is_bound_in(self, users, connection):
        users.select([{"id": ["a", "b"]}])

        assert connection.last["sql"].endswith("WHERE (`app_users`.`id` IN (?, ?))")
        assert connection.last["params"] == ["a", "b"]

    def test_entity_as_criteria(self, users, connection):
        criteria = Row()
        criteria.populate({"userName": "al"})

        users.select([criteria])

        assert connection.last["sql"].endswith("WHERE (`app_users`.`user_name` = ?)")
        assert connection.last["params"] == ["al"]

    def test_modifiers_without_criteria(self, users, connection):
        (
            users.group_by("roleId")
            .having("COUNT(`:TBL:`.`id`) > ?", params=[1])
            .order_by("userName", "desc")
            .limit(10, 5)
            .select(shape=ReturnShape.RAW)
        )

        assert connection.last["sql"] == (
            f"{SELECT_USERS} GROUP BY `app_users`.`role_id` "
            "HAVING COUNT(`app_users`.`id`) > ? "
            "ORDER BY `app_users`.`user_name` DESC LIMIT 5, 10"
        )
        assert connection.last["params"] == [1]

    def test_invalid_order_direction(self, users):
        with pytest.raises(ValueError):
            users.order_by("id", "UP")


@pytest.mark.unit
class TestCustomConditions:
    def test_custom_where_joined_to_criteria(self, users, connection):
        users.custom_where("`:TBL:`.`email` LIKE ?", params=["%@x"]).select(
            [{"roleId": 2}]
        )

        assert connection.last["sql"] == (
            f"{SELECT_USERS} WHERE (`app_users`.`role_id` = ?) "
            "AND `app_users`.`email` LIKE ?"
        )
        assert connection.last["params"] == [2, "%@x"]

    def test_custom_where_alone(self, users, connection):
        users.custom_where("`:TBL:`.`role_id` > 3", connector="OR").select()

        assert connection.last["sql"] == f"{SELECT_USERS} WHERE `app_users`.`role_id` > 3"

    def test_like_binds_value_and_honours_connector(self, users, connection):
        users.like("userName", "%al%").like("email", "%x%", logical_and=False).select()

        assert connection.last["sql"] == (
            f"{SELECT_USERS} WHERE `app_users`.`user_name` LIKE ? "
            "OR `app_users`.`email` LIKE ?"
        )
        assert connection.last["params"] == ["%al%", "%x%"]

    def test_in_binds_values(self, users, connection):
        users.in_("id", ["a", "b"]).select([{"roleId": 1}])

        assert connection.last["sql"] == (
            f"{SELECT_USERS} WHERE (`app_users`.`role_id` = ?) "
            "AND `app_users`.`id` IN (?, ?)"
        )
        assert connection.last["params"] == [1, "a", "b"]


@pytest.mark.unit
class TestResultShapes:
    def test_raw_rows_deduplicated_by_primary_key(self, users, connection):
        connection.queue([_user("a"), _user("b", "bo"), _user("a", "al2")])

        rows = users.select(shape=ReturnShape.RAW)

        assert rows == [_user("a", "al2"), _user("b", "bo")]

    def test_rows_without_primary_key_value_keep_arrival_order(self, users, connection):
        connection.queue([_user(None, "x"), _user(None, "y")])

        rows = users.select(shape=ReturnShape.RAW)

        assert [row["userName"] for row in rows] == ["x", "y"]

    def test_model_shape_builds_entities(self, users, connection):
        connection.queue([_user("a", email="a@x")])

        (entity,) = users.select()

        assert isinstance(entity, Row)
        assert entity.userName == "al"
        assert entity.email == "a@x"
        assert entity.table is users
        # The prototype itself stays untouched
        assert users.model.to_dict() == {}

    def test_custom_model_prototype(self, make_table, connection):
        class User(Row):
            def post_fetch(self) -> None:
                self.fetched = True

        table = make_table("users", model=User())
        connection.queue([_user("a")])

        (entity,) = table.select()

        assert isinstance(entity, User)
        assert entity.fetched is True

    def test_json_shape(self, users, connection):
        connection.queue([_user("a")])

        result = users.select(shape=ReturnShape.JSON)

        assert json.loads(result) == [_user("a")]


@pytest.mark.unit
class TestCountAndDistinct:
    def test_count(self, users, connection):
        connection.queue([{"row_count": 3}])

        assert users.count() == 3
        assert connection.last["sql"] == "SELECT COUNT(*) AS `row_count` FROM `app_users`"

    def test_count_column_with_criteria_and_group(self, users, connection):
        connection.queue([{"row_count": 2}])

        assert users.group_by("roleId").count("email", [{"roleId": 1}]) == 2
        assert connection.last["sql"] == (
            "SELECT COUNT(`app_users`.`email`) AS `row_count` FROM `app_users` "
            "WHERE (`app_users`.`role_id` = ?) GROUP BY `app_users`.`role_id`"
        )

    def test_count_of_nothing(self, users):
        assert users.count() == 0

    def test_distinct(self, users, connection):
        connection.queue([{"roleId": 1}, {"roleId": 2}])

        assert users.distinct("roleId") == [{"roleId": 1}, {"roleId": 2}]
        assert connection.last["sql"] == (
            "SELECT DISTINCT `app_users`.`role_id` AS `roleId` FROM `app_users`"
        )


@pytest.mark.unit
class TestStateMachine:
    def test_delayed_select_returns_table(self, users, connection):
        assert users.delay_execute().select([{"id": 1}]) is users
        assert connection.calls == []

        users.execute()

        assert connection.last["params"] == [1]

    def test_execute_resets_state(self, users, connection):
        users.order_by("id").limit(1).select()
        users.select()

        assert connection.last["sql"] == SELECT_USERS
        assert users._pending == PendingOperation()

    def test_failed_execute_resets_state(self, users, connection):
        connection.queue(ExecutionError("boom"))

        with pytest.raises(ExecutionError):
            users.order_by("id").select()

        assert users._pending == PendingOperation()
        users.select()
        assert connection.last["sql"] == SELECT_USERS

    def test_reset_discards_modifiers(self, users, connection):
        users.order_by("id").limit(3).reset().select()

        assert connection.last["sql"] == SELECT_USERS

    def test_missing_table_degrades_silently(self, make_table, connection):
        missing = make_table("ghosts")

        assert missing.exists() is False
        assert missing.select() == []
        assert missing.count() == 0
        assert missing.distinct("name") == []
        assert missing.delete() is False
        assert connection.calls == []

    def test_missing_table_join_degrades_silently(self, make_table, connection):
        missing = make_table("ghosts")

        assert missing.join("roles").select(shape=ReturnShape.RAW) == []
        assert connection.calls == []

    def test_missing_table_delayed(self, make_table):
        missing = make_table("ghosts")

        assert missing.delay_execute().count() is missing
        assert missing.execute() == 0

    def test_no_connection_is_fatal(self):
        table = Table("users")

        with pytest.raises(ConfigurationError):
            table.select()
        with pytest.raises(ConfigurationError):
            table.insert([{"id": 1}])

    def test_relationships_reflected_once(self, users, connection):
        before = list(connection.metadata_calls)

        users.select()
        users.select()

        assert connection.metadata_calls == before
        assert [rel.related_table for rel in users.relationships["app_roles"]] == ["app_roles"]
        assert users.model.get_relationship("app_roles") == users.relationships["app_roles"]
