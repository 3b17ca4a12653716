"""Tests for masqline.dialects: scheme lookup, placeholders, connect."""

import pytest

from masqline.dialects import Dialect, MysqlDialect, SqliteDialect, get_dialect_for_scheme
from masqline.errors import ConnectionNotConfigured


@pytest.mark.parametrize(
    "scheme, expected",
    [
        ("sqlite", SqliteDialect),
        ("SQLite", SqliteDialect),
        ("mysql", MysqlDialect),
        ("mysql+pymysql", MysqlDialect),
    ],
)
def test_get_dialect_for_scheme(scheme, expected):
    assert isinstance(get_dialect_for_scheme(scheme), expected)


@pytest.mark.parametrize("scheme", ["postgresql", "", None])
def test_get_dialect_for_unsupported_scheme(scheme):
    with pytest.raises(ConnectionNotConfigured, match="Unsupported database scheme"):
        get_dialect_for_scheme(scheme)


def test_dialect_is_abstract():
    with pytest.raises(TypeError):
        Dialect()


def test_placeholders():
    assert SqliteDialect.PLACEHOLDER == "?"
    assert MysqlDialect.PLACEHOLDER == "%s"


def test_escape_text():
    assert SqliteDialect().escape_text("LIKE '%a%'") == "LIKE '%a%'"
    assert MysqlDialect().escape_text("LIKE '%a%'") == "LIKE '%%a%%'"


def test_sqlite_connect_creates_connection(tmp_path):
    url = f"sqlite:///{tmp_path / 'test.db'}"
    conn = SqliteDialect().connect(url)
    conn.execute("SELECT 1")
    conn.close()
    assert (tmp_path / "test.db").exists()


def test_sqlite_connect_enables_foreign_keys():
    conn = SqliteDialect().connect("sqlite:///:memory:")
    assert conn.execute("PRAGMA foreign_keys").fetchone() == (1,)
    conn.close()
