"""Base expression type: a SQL fragment plus its bound parameters."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from ..types import Type


def quote_identifier(name: str) -> str:
    """Backtick-quote an identifier (``posts`` -> ```posts```)."""
    return "`" + name.replace("`", "``") + "`"


class Expression(BaseModel):
    """Base type for every SQL fragment (columns, conditions, clauses).

    Subclasses implement ``sql``. ``values`` and ``types`` hold one entry per
    ``?`` placeholder in ``sql``, in the order the placeholders appear; the
    defaults are empty for fragments that bind nothing.
    """

    model_config = {"arbitrary_types_allowed": True}

    @property
    def sql(self) -> str:
        """SQL fragment for this expression, with ``?`` for bound parameters."""
        raise NotImplementedError("Subclasses must implement `sql` property")

    @property
    def values(self) -> tuple[Any, ...]:
        """Bound values for placeholders in ``sql``, in order."""
        return ()

    @property
    def types(self) -> tuple[Type, ...]:
        """Types of ``values``, position by position."""
        return ()

    @property
    def params(self) -> tuple[tuple[Any, Type], ...]:
        """``(value, type)`` pairs, as handed to the connection."""
        return tuple(zip(self.values, self.types))

    @property
    def is_empty(self) -> bool:
        """True when the expression renders nothing."""
        return not self.sql

    def __str__(self) -> str:
        return self.sql


class CompositeExpression(Expression):
    """Expression whose parameters are those of its parts, concatenated."""

    @property
    def parts(self) -> tuple[Expression, ...]:
        """Sub-expressions, in the order they appear in ``sql``."""
        raise NotImplementedError("Subclasses must implement `parts` property")

    @property
    def values(self) -> tuple[Any, ...]:
        return sum((part.values for part in self.parts), ())

    @property
    def types(self) -> tuple[Type, ...]:
        return sum((part.types for part in self.parts), ())
