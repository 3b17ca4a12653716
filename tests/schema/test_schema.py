"""Tests for masqline.schema: lookups, NotFound, building from dicts and reflecting SQLite."""

import enum

import pytest

from masqline.errors import InvalidReference, NotFound
from masqline.schema import Schema
from masqline.types import DATETIME, INTEGER, STRING, TEXT, TypeRegistry


def test_resolve_column(schema):
    assert schema.resolve_column("posts", "posted_at") == DATETIME
    assert schema.resolve_column("authors", "username") == STRING


def test_resolve_column_not_found(schema):
    with pytest.raises(NotFound, match="`posts`.`nope`"):
        schema.resolve_column("posts", "nope")
    with pytest.raises(NotFound, match="comments"):
        schema.resolve_column("comments", "id")


def test_not_found_is_invalid_reference():
    assert issubclass(NotFound, InvalidReference)
    assert issubclass(NotFound, ValueError)


def test_table_exists(schema):
    assert schema.table_exists("posts")
    assert not schema.table_exists("comments")


def test_column_types_in_declaration_order(schema):
    assert list(schema.column_types("posts").items()) == [
        ("id", INTEGER),
        ("author_id", INTEGER),
        ("title", STRING),
        ("body", TEXT),
        ("posted_at", DATETIME),
    ]


def test_column_options(schema):
    table = schema.get_table("posts")
    assert table.primary_key == ["id"]
    assert not table.get_column("id").nullable
    assert table.get_column("title").nullable
    assert table.has_column("body")
    assert not table.has_column("nope")


def test_from_dict_uses_given_registry():
    registry = TypeRegistry.default()
    registry.register_enum("status", enum.Enum("Status", "DRAFT PUBLISHED"))
    schema = Schema.from_dict({"posts": {"status": "status"}}, types=registry)
    assert schema.types is registry
    assert schema.resolve_column("posts", "status").name == "status"


def test_reflect(connection):
    schema = Schema.reflect(connection)
    assert sorted(schema.tables) == ["authors", "posts"]
    assert schema.column_types("posts") == {
        "id": INTEGER,
        "author_id": INTEGER,
        "title": STRING,
        "body": TEXT,
        "posted_at": DATETIME,
    }
    assert schema.get_table("posts").primary_key == ["id"]
    assert not schema.get_table("authors").get_column("username").nullable
