"""Named connections and the execution boundary.

``connect(url, name)`` registers where a database lives; ``get_connection``
opens it through the dialect matching the URL scheme and wraps the driver
connection in a :class:`Connection`, which is what queries execute against.
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, Field

from .dialects import Dialect, get_dialect_for_scheme
from .errors import ConnectionNotConfigured
from .types import ArrayType, Type

logger = logging.getLogger("masqline")

_urls: dict[str, str | Callable[[], str]] = {}


def connect(database_url: str | Callable[[], str], name: str = "default") -> None:
    """Register a database URL (or a callable returning one) under ``name``."""
    if not isinstance(database_url, str) and not callable(database_url):
        raise ValueError("`database_url` should be either a `str`, or a method returning a `str`")
    _urls[name] = database_url


def get_connection(name: str = "default") -> Connection:
    """Open a new :class:`Connection` to the database registered under ``name``."""
    try:
        url = _urls[name]
    except KeyError as error:
        raise ConnectionNotConfigured(f"No connection configured with name=`{name}`") from error
    if callable(url):
        url = url()
    dialect = get_dialect_for_scheme(urllib.parse.urlparse(url).scheme)
    return Connection(driver=dialect.connect(url), dialect=dialect)


def placeholder_positions(sql: str) -> list[int]:
    """Offsets of ``?`` placeholders in ``sql``, ignoring quoted strings and identifiers."""
    positions = []
    quote = None
    for index, char in enumerate(sql):
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "'\"`":
            quote = char
        elif char == "?":
            positions.append(index)
    return positions


class Result(BaseModel):
    """Materialized outcome of one statement."""

    columns: list[str] = Field(default_factory=list)
    rows: list[tuple] = Field(default_factory=list)
    rowcount: int = -1
    lastrowid: Optional[int] = None

    def as_dicts(self) -> list[dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self.rows]


class Connection(BaseModel):
    """DB-API connection plus its dialect.

    ``execute`` takes SQL with ``?`` placeholders and ``(value, type)`` pairs:
    each value is encoded with its type, array-typed values are expanded to
    one placeholder per element (``NULL`` for an empty list), and placeholders
    are rewritten for the driver.
    """

    model_config = {"arbitrary_types_allowed": True}

    driver: Any
    dialect: Dialect

    def expand(self, sql: str, params: Iterable[tuple[Any, Optional[Type]]] = ()) -> tuple[str, tuple[Any, ...]]:
        """Return the driver-ready SQL and flat value tuple for ``sql`` and ``params``."""
        params = list(params)
        positions = placeholder_positions(sql)
        if len(positions) != len(params):
            raise ValueError(
                f"Statement has {len(positions)} placeholder(s) but {len(params)} parameter(s) were given"
            )
        placeholder = self.dialect.PLACEHOLDER
        chunks = []
        values = []
        last = 0
        for position, (value, type_) in zip(positions, params):
            chunks.append(self.dialect.escape_text(sql[last:position]))
            if isinstance(type_, ArrayType):
                encoded = type_.to_database(value) or []
                chunks.append(", ".join([placeholder] * len(encoded)) if encoded else "NULL")
                values.extend(encoded)
            else:
                chunks.append(placeholder)
                values.append(type_.to_database(value) if type_ is not None else value)
            last = position + 1
        chunks.append(self.dialect.escape_text(sql[last:]))
        return "".join(chunks), tuple(values)

    def execute(self, sql: str, params: Iterable[tuple[Any, Optional[Type]]] = ()) -> Result:
        """Run one statement; driver errors propagate unchanged."""
        sql, values = self.expand(sql, params)
        logger.debug("%s %r", sql, values)
        cursor = self.driver.cursor()
        try:
            cursor.execute(sql, values)
            if cursor.description:
                columns = [description[0] for description in cursor.description]
                rows = [tuple(row) for row in cursor.fetchall()]
            else:
                columns, rows = [], []
            return Result(
                columns=columns,
                rows=rows,
                rowcount=cursor.rowcount,
                lastrowid=getattr(cursor, "lastrowid", None),
            )
        finally:
            cursor.close()

    def commit(self) -> None:
        self.driver.commit()

    def rollback(self) -> None:
        self.driver.rollback()

    def close(self) -> None:
        self.driver.close()


__all__ = ["Connection", "Result", "connect", "get_connection", "placeholder_positions"]
