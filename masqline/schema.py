"""Read-only schema lookup: tables, their columns and declared types."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from pydantic import BaseModel, Field

from .errors import NotFound
from .types import Type, TypeRegistry

logger = logging.getLogger("masqline")

# Declared SQLite column types -> registered type names (first match wins).
_SQLITE_AFFINITIES: tuple[tuple[str, str], ...] = (
    (r"BIGINT", "bigint"),
    (r"SMALLINT|TINYINT", "smallint"),
    (r"INT", "integer"),
    (r"BOOL", "boolean"),
    (r"DATETIME|TIMESTAMP", "datetime"),
    (r"DATE", "date"),
    (r"TIME", "time"),
    (r"JSON", "json"),
    (r"DECIMAL|NUMERIC", "decimal"),
    (r"REAL|FLOA|DOUB", "float"),
    (r"CHAR|CLOB", "string"),
    (r"TEXT", "text"),
)


class SchemaColumn(BaseModel):
    """One column: name, declared type, and a few constraints."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    type: Type
    nullable: bool = True
    primary_key: bool = False


class SchemaTable(BaseModel):
    """A table and its columns, in declaration order."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    columns: dict[str, SchemaColumn] = Field(default_factory=dict)

    def get_column(self, name: str) -> SchemaColumn:
        try:
            return self.columns[name]
        except KeyError as error:
            raise NotFound(f"Unknown column `{self.name}`.`{name}`") from error

    def has_column(self, name: str) -> bool:
        return name in self.columns

    @property
    def primary_key(self) -> list[str]:
        return [c.name for c in self.columns.values() if c.primary_key]


class Schema(BaseModel):
    """Lookup structure queries resolve ``table.column`` references against.

    Each schema carries its own :class:`TypeRegistry`, which is also where
    queries built on it resolve type names like ``"integer"``.
    """

    model_config = {"arbitrary_types_allowed": True}

    tables: dict[str, SchemaTable] = Field(default_factory=dict)
    types: TypeRegistry = Field(default_factory=TypeRegistry.default)

    @classmethod
    def from_dict(
        cls,
        tables: Mapping[str, Mapping[str, Any]],
        types: TypeRegistry | None = None,
    ) -> Schema:
        """Build a schema from ``{table: {column: type_or_name_or_options}}``.

        A column spec is a type name, a :class:`Type`, or a dict with ``type``
        and optionally ``nullable`` / ``primary_key``.
        """
        schema = cls(types=types or TypeRegistry.default())
        for table_name, columns in tables.items():
            table = SchemaTable(name=table_name)
            for column_name, spec in columns.items():
                options = dict(spec) if isinstance(spec, Mapping) else {"type": spec}
                options["type"] = schema.types.resolve_type(options["type"])
                table.columns[column_name] = SchemaColumn(name=column_name, **options)
            schema.add_table(table)
        return schema

    @classmethod
    def reflect(cls, connection, types: TypeRegistry | None = None) -> Schema:
        """Build a schema from an SQLite database (through ``pragma_table_info``)."""
        schema = cls(types=types or TypeRegistry.default())
        result = connection.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name",
            (),
        )
        for table_name, in result.rows:
            table = SchemaTable(name=table_name)
            info = connection.execute(
                "SELECT name, type, \"notnull\", pk FROM pragma_table_info(?)",
                ((table_name, schema.types.type_by_name("string")),),
            )
            for name, declared, notnull, pk in info.rows:
                table.columns[name] = SchemaColumn(
                    name=name,
                    type=schema.types.type_by_name(_affinity(declared)),
                    nullable=not notnull,
                    primary_key=bool(pk),
                )
            schema.add_table(table)
            logger.debug("Reflected table %s (%d columns)", table_name, len(table.columns))
        return schema

    def add_table(self, table: SchemaTable) -> SchemaTable:
        self.tables[table.name] = table
        return table

    def table_exists(self, table: str) -> bool:
        return table in self.tables

    def get_table(self, table: str) -> SchemaTable:
        try:
            return self.tables[table]
        except KeyError as error:
            raise NotFound(f"Unknown table `{table}`") from error

    def resolve_column(self, table: str, column: str) -> Type:
        """Declared type of ``table.column``; raises :class:`NotFound`."""
        return self.get_table(table).get_column(column).type

    def column_types(self, table: str) -> dict[str, Type]:
        """Ordered ``column -> Type`` for every column of ``table``."""
        return {name: column.type for name, column in self.get_table(table).columns.items()}


def _affinity(declared: str) -> str:
    declared = (declared or "").upper()
    for pattern, type_name in _SQLITE_AFFINITIES:
        if re.search(pattern, declared):
            return type_name
    return "string"


__all__ = ["Schema", "SchemaTable", "SchemaColumn"]
