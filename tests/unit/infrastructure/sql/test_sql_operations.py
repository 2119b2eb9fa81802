"""
Unit tests for the statement builders.
"""

import pytest

from tablescribe.infrastructure.sql.dialects import MySQLDialect
from tablescribe.infrastructure.sql.operations import (
    DeleteBuilder,
    InsertBuilder,
    SelectBuilder,
    UpdateBuilder,
    build_condition,
    build_criteria_where,
)


@pytest.fixture
def dialect():
    return MySQLDialect()


@pytest.mark.unit
class TestWhereBuilders:
    def test_equality(self, dialect):
        assert build_condition(dialect, "id", 5, "t") == ("`t`.`id` = ?", [5])

    def test_list_becomes_in(self, dialect):
        assert build_condition(dialect, "id", [1, 2, 3]) == ("`id` IN (?, ?, ?)", [1, 2, 3])

    def test_empty_list_never_matches(self, dialect):
        assert build_condition(dialect, "id", []) == ("1 = 0", [])

    def test_none_becomes_is_null(self, dialect):
        assert build_condition(dialect, "email", None) == ("`email` IS NULL", [])

    def test_criteria_are_anded_within_and_ored_across(self, dialect):
        where, values = build_criteria_where(
            dialect, [{"a": 1, "b": 2}, {"a": 3}], table="t"
        )

        assert where == "(`t`.`a` = ? AND `t`.`b` = ?) OR (`t`.`a` = ?)"
        assert values == [1, 2, 3]

    def test_skip_null_drops_fields_and_empty_groups(self, dialect):
        where, values = build_criteria_where(
            dialect, [{"a": None}, {"a": 1, "b": None}], skip_null=True
        )

        assert where == "(`a` = ?)"
        assert values == [1]

    def test_empty_criteria(self, dialect):
        assert build_criteria_where(dialect, []) == ("", [])


@pytest.mark.unit
class TestInsertBuilder:
    def test_column_union_in_first_seen_order(self, dialect):
        stmt = InsertBuilder(dialect).insert(
            "app_users", [{"id": "a", "email": "x@y"}, {"id": "b", "user_name": "bo"}]
        )

        assert stmt.sql == (
            "INSERT INTO `app_users` (`id`, `email`, `user_name`) "
            "VALUES (:id_0, :email_0, DEFAULT), (:id_1, DEFAULT, :user_name_1)"
        )
        assert stmt.params == {
            "id_0": "a",
            "email_0": "x@y",
            "id_1": "b",
            "user_name_1": "bo",
        }

    def test_no_columns_rejected(self, dialect):
        with pytest.raises(ValueError):
            InsertBuilder(dialect).insert("app_users", [{}, {}])


@pytest.mark.unit
class TestUpdateBuilder:
    def test_one_parameter_set_per_row(self, dialect):
        stmt = UpdateBuilder(dialect).update(
            "app_users",
            [{"id": "a", "user_name": "al"}, {"id": "b", "email": "b@x"}],
            ["id"],
            primary_key="id",
        )

        assert stmt.sql == (
            "UPDATE `app_users` SET `user_name` = :user_name, `email` = :email "
            "WHERE `id` = :id"
        )
        assert stmt.multiple is True
        assert stmt.params == [
            {"user_name": "al", "email": None, "id": "a"},
            {"user_name": None, "email": "b@x", "id": "b"},
        ]

    def test_primary_key_not_assigned_when_not_a_where_column(self, dialect):
        stmt = UpdateBuilder(dialect).update(
            "app_users",
            [{"id": "a", "email": "a@x", "user_name": "al"}],
            ["email"],
            primary_key="id",
        )

        assert stmt.sql == "UPDATE `app_users` SET `user_name` = :user_name WHERE `email` = :email"
        assert stmt.params == [{"user_name": "al", "email": "a@x"}]

    def test_nothing_to_set_rejected(self, dialect):
        with pytest.raises(ValueError, match="No columns to update"):
            UpdateBuilder(dialect).update("app_users", [{"id": "a"}], ["id"], "id")


@pytest.mark.unit
class TestSelectBuilder:
    def test_aliased_columns(self, dialect):
        builder = SelectBuilder(dialect)
        columns = builder.columns("app_users", {"id": "id", "user_name": "userName"})

        assert builder.select("app_users", columns) == (
            "SELECT `app_users`.`id` AS `id`, `app_users`.`user_name` AS `userName` "
            "FROM `app_users`"
        )

    def test_source_alias_for_self_join(self, dialect):
        columns = SelectBuilder(dialect).columns("app_c", {"id": "appC_id"}, source="t")

        assert columns == ["`t`.`id` AS `appC_id`"]

    def test_count(self, dialect):
        builder = SelectBuilder(dialect)

        assert builder.count("app_users") == "SELECT COUNT(*) AS `row_count` FROM `app_users`"
        assert builder.count("app_users", "email") == (
            "SELECT COUNT(`app_users`.`email`) AS `row_count` FROM `app_users`"
        )

    def test_distinct(self, dialect):
        assert SelectBuilder(dialect).distinct("app_users", "role_id", "roleId") == (
            "SELECT DISTINCT `app_users`.`role_id` AS `roleId` FROM `app_users`"
        )

    def test_left_join_ors_conditions_and_ands_extras(self, dialect):
        clause = SelectBuilder(dialect).left_join(
            "app_roles", ["c1", "c2"], extra=["`app_roles`.`name` = ?"]
        )

        assert clause == (
            "LEFT OUTER JOIN `app_roles` ON (c1 OR c2) AND `app_roles`.`name` = ?"
        )

    def test_left_join_single_condition_unwrapped(self, dialect):
        clause = SelectBuilder(dialect).left_join("app_roles", ["c1"], alias="t")

        assert clause == "LEFT OUTER JOIN `app_roles` t ON c1"

    def test_left_join_without_conditions_rejected(self, dialect):
        with pytest.raises(ValueError):
            SelectBuilder(dialect).left_join("app_roles", [])


@pytest.mark.unit
class TestDeleteBuilder:
    def test_delete_with_criteria(self, dialect):
        stmt = DeleteBuilder(dialect).delete("app_users", [{"id": 1}, {"id": 2}])

        assert stmt.sql == "DELETE FROM `app_users` WHERE (`id` = ?) OR (`id` = ?)"
        assert stmt.params == [1, 2]

    def test_delete_skips_null_fields(self, dialect):
        stmt = DeleteBuilder(dialect).delete("app_users", [{"id": 1, "email": None}])

        assert stmt.sql == "DELETE FROM `app_users` WHERE (`id` = ?)"
        assert stmt.params == [1]

    def test_delete_everything(self, dialect):
        stmt = DeleteBuilder(dialect).delete("app_users")

        assert stmt.sql == "DELETE FROM `app_users`"
        assert stmt.params == []
