"""ORDER BY and GROUP BY clauses."""

from typing import Literal

from pydantic import Field

from ..expressions import Expression
from ._bases import Clause


class OrderEntry(Expression):
    """A sort key and its direction."""

    reference: Expression
    direction: Literal["ASC", "DESC"] = "ASC"

    @property
    def sql(self) -> str:
        return f"{self.reference.sql} {self.direction}"


class OrderByClause(Clause):
    """``ORDER BY col1 DIR1, col2 DIR2, ...``"""

    entries: list[OrderEntry] = Field(default_factory=list)

    @property
    def sql(self) -> str:
        if not self.entries:
            return ""
        return "ORDER BY " + ", ".join(entry.sql for entry in self.entries)


class GroupByClause(Clause):
    """``GROUP BY col1, col2, ...``"""

    references: list[Expression] = Field(default_factory=list)

    @property
    def sql(self) -> str:
        if not self.references:
            return ""
        return "GROUP BY " + ", ".join(reference.sql for reference in self.references)
