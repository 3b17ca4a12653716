"""WHERE and HAVING clauses: a keyword in front of a condition tree."""

from typing import ClassVar

from pydantic import Field

from ..expressions import Expression, Group
from ._bases import Clause


class ConditionsClause(Clause):
    """Renders ``{KEYWORD} {root}``, or nothing while the root group is empty.

    Conditions added through successive calls accumulate in the root group,
    joined with AND.
    """

    KEYWORD: ClassVar[str] = ""

    root: Group = Field(default_factory=Group)

    @property
    def parts(self) -> tuple[Expression, ...]:
        return (self.root,)

    @property
    def sql(self) -> str:
        if self.root.is_empty:
            return ""
        return f"{self.KEYWORD} {self.root.sql}"


class WhereClause(ConditionsClause):
    KEYWORD: ClassVar[str] = "WHERE"


class HavingClause(ConditionsClause):
    KEYWORD: ClassVar[str] = "HAVING"
