"""Clauses of INSERT, UPDATE and DELETE statements."""

from typing import Any, Optional

from pydantic import Field

from ..expressions import Expression, Raw, quote_identifier
from ..types import Type
from ._bases import Clause


class Assignment(Expression):
    """A column and the value it receives: ``?`` bound with ``type``, or raw SQL."""

    column: str
    value: Any = None
    type: Optional[Type] = None

    @property
    def placeholder(self) -> str:
        if isinstance(self.value, Raw):
            return self.value.sql
        return "?"

    @property
    def sql(self) -> str:
        return f"{quote_identifier(self.column)} = {self.placeholder}"

    @property
    def values(self) -> tuple[Any, ...]:
        if isinstance(self.value, Raw):
            return ()
        return (self.value,)

    @property
    def types(self) -> tuple[Type, ...]:
        if isinstance(self.value, Raw):
            return ()
        return (self.type,)


class AssignmentsClause(Clause):
    """Ordered column assignments; assigning a column twice keeps the last value."""

    assignments: list[Assignment] = Field(default_factory=list)

    def assign(self, assignment: Assignment) -> None:
        self.assignments = [a for a in self.assignments if a.column != assignment.column]
        self.assignments.append(assignment)

    @property
    def parts(self) -> tuple[Expression, ...]:
        return tuple(self.assignments)


class InsertClause(AssignmentsClause):
    """``INSERT INTO `t` (`a`, `b`)`` then ``VALUES (?, ?)``."""

    table: Optional[str] = None

    @property
    def sql(self) -> str:
        if self.table is None:
            return ""
        head = f"INSERT INTO {quote_identifier(self.table)}"
        if not self.assignments:
            return f"{head} DEFAULT VALUES"
        columns = ", ".join(quote_identifier(a.column) for a in self.assignments)
        placeholders = ", ".join(a.placeholder for a in self.assignments)
        return f"{head} ({columns})\nVALUES ({placeholders})"


class SetClause(AssignmentsClause):
    """``SET `a` = ?, `b` = ?``"""

    @property
    def sql(self) -> str:
        if not self.assignments:
            return ""
        return "SET " + ", ".join(a.sql for a in self.assignments)


class TableClause(Clause):
    """Statement head naming the target table (``UPDATE `t``` / ``DELETE FROM `t```)."""

    keyword: str
    table: Optional[str] = None

    @property
    def sql(self) -> str:
        if self.table is None:
            return ""
        return f"{self.keyword} {quote_identifier(self.table)}"
