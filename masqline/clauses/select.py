"""SELECT clause."""

from typing import Optional

from pydantic import Field

from ..expressions import ColumnPath, Expression, quote_identifier
from ..types import Type
from ._bases import Clause


class SelectEntry(Expression):
    """One selected column (or raw expression), its alias and its type."""

    column: ColumnPath
    alias: Optional[str] = None
    type: Optional[Type] = None

    @property
    def name(self) -> str:
        """Key of this column in result rows."""
        return self.alias if self.alias is not None else self.column.name

    @property
    def sql(self) -> str:
        if self.alias is None:
            return self.column.sql
        return f"{self.column.sql} AS {quote_identifier(self.alias)}"


class SelectClause(Clause):
    """``SELECT [DISTINCT] col [AS alias], ...``"""

    entries: list[SelectEntry] = Field(default_factory=list)
    distinct: bool = False

    @property
    def parts(self) -> tuple[Expression, ...]:
        return tuple(self.entries)

    @property
    def sql(self) -> str:
        if not self.entries:
            return ""
        keyword = "SELECT DISTINCT" if self.distinct else "SELECT"
        return f"{keyword} " + ", ".join(entry.sql for entry in self.entries)
