"""Tests for executing queries against SQLite: decoding, array expansion, affected rows."""

import datetime

import pytest

from masqline.errors import ConnectionNotConfigured, InvalidReference
from masqline.expressions import raw
from masqline.manipulation import DeleteQuery, InsertQuery, UpdateQuery
from masqline.query import SelectQuery


@pytest.fixture
def select(connection, schema):
    return SelectQuery(connection, schema)


def test_fetch_all_decodes_types(select):
    rows = select.select({"posts.id": "post_id"}, "posts.posted_at").from_("posts").where(
        lambda where: where.equals("posts.id", 1)
    ).fetch_all()
    assert rows == [{"post_id": 1, "posted_at": datetime.datetime(2024, 1, 1, 10, 0)}]


def test_execute_is_fetch_all(select):
    select.select("posts.id").from_("posts").order_by("posts.id")
    assert select.execute() == select.fetch_all() == [{"id": 1}, {"id": 2}, {"id": 3}]


def test_iteration(select):
    select.select("posts.title").from_("posts").order_by("posts.id")
    assert [row["title"] for row in select] == ["Foo bar", "Hello", "Foo baz"]


def test_fetch_one(select):
    select.select("posts.title").from_("posts").order_by("-posts.id")
    assert select.fetch_one() == {"title": "Foo baz"}
    select.where(lambda where: where.equals("posts.id", 42))
    assert select.fetch_one() is None


def test_fetch_list(select):
    select.select("posts.id", "posts.title").from_("posts").order_by("-posts.id")
    assert select.fetch_list() == [3, 2, 1]
    assert select.fetch_list("title") == ["Foo baz", "Hello", "Foo bar"]
    with pytest.raises(InvalidReference):
        select.fetch_list("nope")


def test_fetch_value(select):
    assert select.select().select_count(alias="num").from_("posts").fetch_value() == 3
    select.where(lambda where: where.equals("posts.id", 42))
    assert select.select("posts.id").fetch_value() is None


def test_in_expands_array(select):
    select.select("posts.id").from_("posts").where(lambda where: where.in_("posts.id", [1, 3])).order_by("posts.id")
    assert select.fetch_list() == [1, 3]


def test_in_empty_array_matches_nothing(select):
    select.select("posts.id").from_("posts").where(lambda where: where.in_("posts.id", []))
    assert select.fetch_all() == []


def test_not_in(select):
    select.select("posts.id").from_("posts").where(lambda where: where.not_in("posts.title", ["Hello"]))
    assert sorted(select.fetch_list()) == [1, 3]


def test_like(select):
    select.select("posts.id").from_("posts").where(lambda where: where.like("posts.title", "Foo%"))
    assert sorted(select.fetch_list()) == [1, 3]


def test_datetime_parameter(select):
    select.select("posts.id").from_("posts").where(
        lambda where: where.greater_than("posts.posted_at", datetime.datetime(2024, 1, 15))
    )
    assert sorted(select.fetch_list()) == [2, 3]


def test_join_group_having(select):
    rows = (
        select.select("authors.username")
        .select_count(alias="num")
        .from_("posts")
        .inner_join("posts.author_id", "authors.id")
        .group_by("authors.username")
        .having(lambda having: having.greater_than(raw("COUNT(*)"), 1, "integer"))
        .fetch_all()
    )
    assert rows == [{"username": "alice", "num": 2}]


def test_limit_offset(select):
    select.select("posts.id").from_("posts").order_by("posts.id").limit(1, 1)
    assert select.fetch_list() == [2]


def test_insert(connection, schema):
    query = InsertQuery(connection, schema).into("posts").values({
        "author_id": 2,
        "title": "New",
        "posted_at": datetime.datetime(2024, 4, 1, 12, 30),
    })
    assert query.execute() == 1
    assert query.last_insert_id == 4
    row = (
        SelectQuery(connection, schema)
        .select("posts.title", "posts.posted_at")
        .from_("posts")
        .where(lambda where: where.equals("posts.id", 4))
        .fetch_one()
    )
    assert row == {"title": "New", "posted_at": datetime.datetime(2024, 4, 1, 12, 30)}


def test_update(connection, schema):
    count = (
        UpdateQuery(connection, schema)
        .update("posts")
        .set("title", raw("`title` || '!'"))
        .where(lambda where: where.equals("posts.author_id", 1))
        .execute()
    )
    assert count == 2
    titles = SelectQuery(connection, schema).select("posts.title").from_("posts").order_by("posts.id").fetch_list()
    assert titles == ["Foo bar!", "Hello!", "Foo baz"]


def test_delete(connection, schema):
    count = DeleteQuery(connection, schema).from_("posts").where(lambda where: where.in_("posts.id", [1, 2])).execute()
    assert count == 2
    assert SelectQuery(connection, schema).select("posts.id").from_("posts").fetch_list() == [3]


def test_execute_without_connection_raises(schema):
    query = SelectQuery(None, schema).select("posts.id").from_("posts")
    with pytest.raises(ConnectionNotConfigured):
        query.fetch_all()
