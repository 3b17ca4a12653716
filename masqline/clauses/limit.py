"""LIMIT clause."""

from typing import Optional

from ._bases import Clause


class LimitClause(Clause):
    """``LIMIT {offset},{count}``; renders only once a count is set."""

    count: Optional[int] = None
    offset: int = 0

    @property
    def sql(self) -> str:
        if self.count is None:
            return ""
        return f"LIMIT {self.offset},{self.count}"
