"""INSERT, UPDATE and DELETE queries.

Column values are typed from the schema (or explicitly), bound as ``?``
parameters in the order the columns were set; :func:`~masqline.expressions.raw`
values are written into the statement as they are.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .clauses import Assignment, Clause, InsertClause, SetClause, TableClause, WhereClause
from .errors import InvalidReference
from .expressions import ColumnPath, Raw
from .query import Query
from .types import Type


class ManipulationQuery(Query):
    """Shared behaviour: a target table, typed assignments, affected-row count."""

    TABLE_SLOT = ""
    ASSIGNMENTS_SLOT = "SET"

    last_insert_id: Optional[int] = None

    @property
    def target_table(self) -> Optional[str]:
        return self._clause(self.TABLE_SLOT).table

    def _set_target(self, table: str) -> None:
        self.schema.get_table(table)
        self._clause(self.TABLE_SLOT).table = table

    def _assignment(self, column: str, value: Any, type_: str | Type | None) -> Assignment:
        table = self.target_table
        if table is None:
            raise InvalidReference("No target table: set it before assigning columns")
        if "." in column:
            path = ColumnPath.parse(self.schema, column)
            if path.is_wildcard or path.table != table:
                raise InvalidReference(f"Cannot assign {column!r} in a statement on `{table}`")
            column = path.column
        declared = self.schema.resolve_column(table, column)
        resolved = self.schema.types.resolve_type(type_)
        if resolved is None and not isinstance(value, Raw):
            resolved = declared
        return Assignment(column=column, value=value, type=resolved)

    def set(self, column: str, value: Any, type_: str | Type | None = None) -> ManipulationQuery:
        """Assign ``value`` to ``column`` (``"title"`` or ``"posts.title"``)."""
        self._clause(self.ASSIGNMENTS_SLOT).assign(self._assignment(column, value, type_))
        return self

    def values(self, values: Mapping[str, Any], types: Optional[Mapping[str, str | Type]] = None) -> ManipulationQuery:
        """Assign several columns at once; ``types`` optionally overrides some column types."""
        types = types or {}
        assignments = [self._assignment(column, value, types.get(column)) for column, value in values.items()]
        clause = self._clause(self.ASSIGNMENTS_SLOT)
        for assignment in assignments:
            clause.assign(assignment)
        return self

    def execute(self) -> int:
        """Run the statement and return the number of affected rows."""
        result = self._execute()
        self.last_insert_id = result.lastrowid
        return result.rowcount


class InsertQuery(ManipulationQuery):
    """``INSERT INTO `t` (`a`, ...)`` / ``VALUES (?, ...)``."""

    TABLE_SLOT = "INSERT"
    ASSIGNMENTS_SLOT = "INSERT"

    def _create_clauses(self) -> dict[str, Optional[Clause]]:
        return {"INSERT": InsertClause()}

    def into(self, table: str) -> InsertQuery:
        self._set_target(table)
        return self


class UpdateQuery(ManipulationQuery):
    """``UPDATE `t`` / ``SET `a` = ?, ...`` / ``WHERE ...``."""

    TABLE_SLOT = "UPDATE"

    def _create_clauses(self) -> dict[str, Optional[Clause]]:
        return {
            "UPDATE": TableClause(keyword="UPDATE"),
            "SET": SetClause(),
            "WHERE": WhereClause(),
        }

    def update(self, table: str) -> UpdateQuery:
        self._set_target(table)
        return self

    def to_sql(self) -> str:
        if self.target_table is not None and self._clause("SET").is_empty:
            raise ValueError(f"UPDATE `{self.target_table}` has no column to set")
        return super().to_sql()


class DeleteQuery(ManipulationQuery):
    """``DELETE FROM `t`` / ``WHERE ...``."""

    TABLE_SLOT = "DELETE"

    def _create_clauses(self) -> dict[str, Optional[Clause]]:
        return {
            "DELETE": TableClause(keyword="DELETE FROM"),
            "WHERE": WhereClause(),
        }

    def from_(self, table: str) -> DeleteQuery:
        self._set_target(table)
        return self


__all__ = ["ManipulationQuery", "InsertQuery", "UpdateQuery", "DeleteQuery"]
