import pytest

from masqline.connection import connect, get_connection
from masqline.schema import Schema


@pytest.fixture(scope="function")
def schema():
    """Blog schema: posts written by authors."""
    return Schema.from_dict({
        "authors": {
            "id": {"type": "integer", "primary_key": True, "nullable": False},
            "username": "string",
        },
        "posts": {
            "id": {"type": "integer", "primary_key": True, "nullable": False},
            "author_id": "integer",
            "title": "string",
            "body": "text",
            "posted_at": "datetime",
        },
    })


@pytest.fixture(scope="function")
def connection():
    """Fresh in-memory SQLite database matching the `schema` fixture, with a few rows."""
    connect("sqlite:///:memory:", name="tests")
    conn = get_connection("tests")
    conn.execute("CREATE TABLE authors (id INTEGER PRIMARY KEY, username VARCHAR(255) NOT NULL)")
    conn.execute(
        "CREATE TABLE posts ("
        "id INTEGER PRIMARY KEY, "
        "author_id INTEGER REFERENCES authors(id), "
        "title VARCHAR(255), "
        "body TEXT, "
        "posted_at DATETIME)"
    )
    conn.execute("INSERT INTO authors (id, username) VALUES (1, 'alice'), (2, 'bob')")
    conn.execute(
        "INSERT INTO posts (id, author_id, title, body, posted_at) VALUES "
        "(1, 1, 'Foo bar', 'first %foobar% body', '2024-01-01 10:00:00'), "
        "(2, 1, 'Hello', 'second', '2024-02-01 10:00:00'), "
        "(3, 2, 'Foo baz', 'third', '2024-03-01 10:00:00')"
    )
    conn.commit()
    yield conn
    conn.close()
