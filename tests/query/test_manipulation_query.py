"""Tests for masqline.manipulation: INSERT, UPDATE and DELETE SQL and parameters."""

import datetime

import pytest

from masqline.errors import InvalidReference, NotFound, UnknownClause
from masqline.expressions import raw
from masqline.manipulation import DeleteQuery, InsertQuery, UpdateQuery
from masqline.types import DATETIME, INTEGER, STRING, TEXT


class TestInsertQuery:

    def test_insert(self, schema):
        posted_at = datetime.datetime(2024, 4, 1, 12, 0)
        query = InsertQuery(None, schema).into("posts").values({
            "title": "New",
            "body": "Text",
            "posted_at": posted_at,
        })
        assert query.to_sql() == "INSERT INTO `posts` (`title`, `body`, `posted_at`)\nVALUES (?, ?, ?)"
        assert query.get_param_values() == ["New", "Text", posted_at]
        assert query.get_param_types() == [STRING, TEXT, DATETIME]

    def test_insert_qualified_column_and_explicit_type(self, schema):
        query = InsertQuery(None, schema).into("posts").set("posts.author_id", "7", "string")
        assert query.to_sql() == "INSERT INTO `posts` (`author_id`)\nVALUES (?)"
        assert query.get_param_types() == [STRING]

    def test_insert_default_values(self, schema):
        query = InsertQuery(None, schema).into("authors")
        assert query.to_sql() == "INSERT INTO `authors` DEFAULT VALUES"
        assert query.get_param_values() == []

    def test_insert_raw_value(self, schema):
        query = InsertQuery(None, schema).into("posts").set("title", "x").set("posted_at", raw("CURRENT_TIMESTAMP"))
        assert query.to_sql() == "INSERT INTO `posts` (`title`, `posted_at`)\nVALUES (?, CURRENT_TIMESTAMP)"
        assert query.get_param_values() == ["x"]
        assert query.get_param_types() == [STRING]

    def test_setting_column_twice_keeps_last(self, schema):
        query = InsertQuery(None, schema).into("posts").set("title", "a").set("title", "b")
        assert query.get_param_values() == ["b"]

    def test_insert_has_no_where(self, schema):
        with pytest.raises(UnknownClause):
            InsertQuery(None, schema).into("posts").where(lambda where: where.equals("posts.id", 1))

    def test_assigning_before_target_raises(self, schema):
        with pytest.raises(InvalidReference):
            InsertQuery(None, schema).set("title", "x")

    def test_unknown_column_raises(self, schema):
        with pytest.raises(NotFound):
            InsertQuery(None, schema).into("posts").set("nope", 1)

    def test_column_of_another_table_raises(self, schema):
        with pytest.raises(InvalidReference):
            InsertQuery(None, schema).into("posts").set("authors.username", "x")

    def test_failed_values_assigns_nothing(self, schema):
        query = InsertQuery(None, schema).into("posts").set("title", "a")
        with pytest.raises(NotFound):
            query.values({"body": "b", "nope": 1})
        assert query.to_sql() == "INSERT INTO `posts` (`title`)\nVALUES (?)"
        assert query.get_param_values() == ["a"]


class TestUpdateQuery:

    def test_update(self, schema):
        query = (
            UpdateQuery(None, schema)
            .update("posts")
            .set("title", "Renamed")
            .set("author_id", 2)
            .where(lambda where: where.equals("posts.id", 3))
        )
        assert query.to_sql() == "UPDATE `posts`\nSET `title` = ?, `author_id` = ?\nWHERE `posts`.`id` = ?"
        assert query.get_param_values() == ["Renamed", 2, 3]
        assert query.get_param_types() == [STRING, INTEGER, INTEGER]

    def test_update_raw_value(self, schema):
        query = UpdateQuery(None, schema).update("posts").set("title", raw("UPPER(`title`)"))
        assert query.to_sql() == "UPDATE `posts`\nSET `title` = UPPER(`title`)"
        assert query.get_param_values() == []

    def test_update_unknown_table_raises(self, schema):
        with pytest.raises(NotFound):
            UpdateQuery(None, schema).update("comments")

    def test_update_without_assignments_raises(self, schema):
        query = UpdateQuery(None, schema).update("posts").where(lambda where: where.equals("posts.id", 1))
        with pytest.raises(ValueError, match="no column to set"):
            query.to_sql()
        query.set("title", "x")
        assert query.to_sql() == "UPDATE `posts`\nSET `title` = ?\nWHERE `posts`.`id` = ?"

    def test_update_without_assignments_does_not_execute(self, connection, schema):
        query = UpdateQuery(connection, schema).update("posts")
        with pytest.raises(ValueError):
            query.execute()


class TestDeleteQuery:

    def test_delete(self, schema):
        query = DeleteQuery(None, schema).from_("posts").where(lambda where: where.in_("posts.id", [1, 2]))
        assert query.to_sql() == "DELETE FROM `posts`\nWHERE `posts`.`id` IN (?)"
        assert query.get_param_values() == [[1, 2]]

    def test_delete_everything(self, schema):
        assert DeleteQuery(None, schema).from_("posts").to_sql() == "DELETE FROM `posts`"

    def test_delete_has_no_set(self, schema):
        with pytest.raises(UnknownClause):
            DeleteQuery(None, schema).from_("posts").set("title", "x")
