"""Column references: ``table.column``, ``table.*`` and raw SQL."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from ..errors import InvalidReference
from ..types import Type
from ._bases import Expression, quote_identifier

WILDCARD = "*"


class Raw(BaseModel):
    """Opaque SQL fragment, rendered verbatim and never checked against the schema."""

    model_config = ConfigDict(frozen=True)

    sql: str

    def __str__(self) -> str:
        return self.sql


def raw(sql: str) -> Raw:
    """Mark a string as raw SQL (e.g. ``raw("COUNT(*)")``)."""
    return Raw(sql=sql)


class ColumnPath(Expression):
    """A resolved reference to ``table.column``, ``table.*`` or raw SQL.

    Use :meth:`parse` rather than the constructor: it validates the reference
    against the schema and looks up the column type.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    table: Optional[str] = None
    column: Optional[str] = None
    type: Optional[Type] = None
    raw_sql: Optional[str] = None

    @classmethod
    def parse(cls, schema, reference: Any, alias: Optional[str] = None) -> ColumnPath:
        """Resolve ``reference`` against ``schema``.

        Raises:
            InvalidReference: malformed reference, or a wildcard with an alias.
            NotFound: table or column missing from the schema.
        """
        if isinstance(reference, ColumnPath):
            if alias is not None and reference.is_wildcard:
                raise InvalidReference(f"Wildcard reference `{reference.sql}` cannot be aliased")
            return reference
        if isinstance(reference, Raw):
            return cls(raw_sql=reference.sql)
        if not isinstance(reference, str):
            raise InvalidReference(f"Expected a `table.column` string or raw SQL; got {type(reference)}")
        parts = reference.split(".")
        if len(parts) != 2 or not all(parts):
            raise InvalidReference(f"Expected a `table.column` reference; got {reference!r}")
        table, column = parts
        if column == WILDCARD:
            if alias is not None:
                raise InvalidReference(f"Wildcard reference {reference!r} cannot be aliased")
            schema.get_table(table)
            return cls(table=table, column=WILDCARD)
        return cls(table=table, column=column, type=schema.resolve_column(table, column))

    @property
    def is_raw(self) -> bool:
        return self.raw_sql is not None

    @property
    def is_wildcard(self) -> bool:
        return self.column == WILDCARD

    @property
    def name(self) -> str:
        """Name of the column in a result row when no alias is given."""
        if self.is_raw:
            return self.raw_sql
        return self.column

    @property
    def sql(self) -> str:
        if self.is_raw:
            return self.raw_sql
        if self.is_wildcard:
            return f"{quote_identifier(self.table)}.{WILDCARD}"
        return f"{quote_identifier(self.table)}.{quote_identifier(self.column)}"


class Identifier(Expression):
    """Bare, unqualified name (an output alias or a column of the FROM table)."""

    model_config = ConfigDict(frozen=True)

    name: str

    @property
    def sql(self) -> str:
        return quote_identifier(self.name)


__all__ = ["ColumnPath", "Identifier", "Raw", "raw", "WILDCARD"]
