"""FROM clause, with its INNER / LEFT joins."""

from typing import Literal, Optional

from pydantic import Field

from ..expressions import Expression, quote_identifier
from ._bases import Clause


class Join(Expression):
    """``{kind} `table` ON {condition}``"""

    kind: Literal["INNER JOIN", "LEFT JOIN"]
    table: str
    condition: Expression

    @property
    def sql(self) -> str:
        return f"{self.kind} {quote_identifier(self.table)} ON {self.condition.sql}"

    @property
    def values(self):
        return self.condition.values

    @property
    def types(self):
        return self.condition.types


class FromClause(Clause):
    """Base table on the first line, then one line per join in insertion order."""

    table: Optional[str] = None
    joins: list[Join] = Field(default_factory=list)

    def add_join(self, kind: str, table: str, condition: Expression) -> Join:
        join = Join(kind=kind, table=table, condition=condition)
        self.joins.append(join)
        return join

    @property
    def parts(self) -> tuple[Expression, ...]:
        return tuple(self.joins)

    @property
    def sql(self) -> str:
        if self.table is None:
            return ""
        if not self.table:
            raise ValueError("Expected a table name to be set")
        lines = [f"FROM {quote_identifier(self.table)}"]
        lines.extend(join.sql for join in self.joins)
        return "\n".join(lines)
