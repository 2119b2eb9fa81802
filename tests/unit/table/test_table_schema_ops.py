"""Unit tests for Table schema inspection and pending schema changes."""

import pytest

from tablescribe import ConfigurationError, Table
from tablescribe.infrastructure.schema import NewReference


@pytest.mark.unit
class TestSchemaInspection:
    def test_reflected_schema(self, users):
        assert users.exists() is True
        assert users.primary_key == "id"
        assert users.get_columns(just_names=True) == ["id", "user_name", "role_id", "email"]
        assert users.get_columns()["role_id"].type == "int(11)"

    def test_indexes(self, users):
        assert users.get_indexes("email") == "uq_email"
        assert users.get_indexes("user_name") is None
        assert set(users.get_indexes()) == {"id", "role_id", "email"}

    def test_references(self, users):
        assert users.get_constraint_name("role_id") == "fk_users_roles"
        assert users.get_constraint_name("email") is None
        assert users.get_references()["role_id"].table == "app_roles"

    def test_name_is_prefixed_and_snake_cased(self, make_table):
        assert make_table("userRoles").name == "app_user_roles"
        assert make_table("app_users").name == "app_users"

    def test_table_without_connection(self):
        table = Table("users")

        assert table.name == "users"
        assert table.exists() is False
        with pytest.raises(ConfigurationError):
            table.last_insert_id()


@pytest.mark.unit
class TestSchemaChanges:
    def test_add_index_skips_indexed_columns(self, users):
        users.add_index("user_name").add_index("email").add_index("user_name", "UNIQUE")

        assert users.get_new_indexes() == {"user_name": "INDEX"}

    def test_add_index_rejects_unknown_type(self, users):
        with pytest.raises(ValueError):
            users.add_index("user_name", "SPATIAL")

    def test_drop_index_drops_reference(self, users):
        users.drop_index("role_id").drop_column("role_id")

        assert users.get_drop_indexes() == ["role_id"]
        assert users.get_drop_columns() == ["role_id"]
        assert users.get_drop_references() == ["role_id"]

    def test_drop_column_without_reference(self, users):
        users.drop_column("email")

        assert users.get_drop_references() == []

    def test_add_reference_indexes_column(self, make_table):
        posts = make_table("posts")

        posts.add_reference("title", "app_tags", "label", on_delete="CASCADE")

        assert posts.get_new_indexes() == {"title": "INDEX"}
        assert posts.get_new_references() == {
            "title": NewReference(table="app_tags", column="label", on_delete="CASCADE")
        }

    def test_alter_reference_drops_then_adds(self, users):
        users.alter_reference("role_id", "app_roles", "id", on_update="CASCADE")

        assert users.get_drop_references() == ["role_id"]
        assert users.get_new_references()["role_id"].on_update == "CASCADE"
        # Already indexed
        assert users.get_new_indexes() == {}

    def test_set_primary_key(self, users):
        users.set_primary_key("id")
        assert users.get_new_primary_key() is None
        assert users.should_drop_primary_key() is False

        users.set_primary_key("email")
        assert users.get_new_primary_key() == "email"
        assert users.should_drop_primary_key() is True

    def test_columns(self, users):
        users.add_column("age", "int(11) NULL").alter_column("email", "varchar(320)")

        assert users.get_new_columns() == {"age": "int(11) NULL"}
        assert users.get_alter_columns() == {"email": "varchar(320)"}

    def test_descriptions(self, users):
        users.set_description("ENGINE=MyISAM").set_description()
        users.change_description()

        assert users.get_description() == "ENGINE=MyISAM"
        assert users.get_new_description() == "ENGINE=InnoDB"

    def test_reset_drains_accumulator(self, users):
        users.add_column("age", "int(11)")

        assert users.get_new_columns(reset=True) == {"age": "int(11)"}
        assert users.get_new_columns() == {}

    def test_schema_changes_without_connection(self):
        table = Table("audit")

        table.set_primary_key("id").add_index("id", "UNIQUE")

        assert table.get_new_primary_key() == "id"
        assert table.should_drop_primary_key() is False
        assert table.get_new_indexes() == {"id": "UNIQUE"}
