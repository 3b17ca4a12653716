"""Condition trees for WHERE, HAVING and JOIN ... ON.

A tree is made of leaves (:class:`Comparison`, :class:`ColumnComparison`,
:class:`Membership`, :class:`NullCheck`) grouped by :class:`Group` nodes that
join their children with ``AND`` or ``OR``. Build trees with
:class:`ConditionsBuilder`:

    builder.like("posts.title", "Foo%").or_where(
        lambda w: w.equals("posts.id", 2).equals("posts.author_id", 1)
    )

A group with one rendered child renders that child bare; with several it is
parenthesized. Values and types come out in pre-order, left to right, which
is the order of the ``?`` placeholders in the text.
"""

from __future__ import annotations

from typing import Any, Callable, Literal, Optional

from pydantic import Field

from ..errors import InvalidReference, MissingType
from ..types import ArrayType, Type, array_type_for
from ._bases import CompositeExpression, Expression
from .column_path import ColumnPath

COMPARISON_OPERATORS: tuple[str, ...] = ("=", "<>", ">", "<", ">=", "<=", "LIKE", "NOT LIKE")


class Comparison(Expression):
    """``column OP ?`` with one bound value."""

    column: ColumnPath
    operator: str
    value: Any = None
    type: Type

    @property
    def sql(self) -> str:
        return f"{self.column.sql} {self.operator} ?"

    @property
    def values(self) -> tuple[Any, ...]:
        return (self.value,)

    @property
    def types(self) -> tuple[Type, ...]:
        return (self.type,)


class ColumnComparison(Expression):
    """``left OP right`` between two columns; binds nothing."""

    left: ColumnPath
    operator: str = "="
    right: ColumnPath

    @property
    def sql(self) -> str:
        return f"{self.left.sql} {self.operator} {self.right.sql}"


class Membership(Expression):
    """``column IN (?)``: the whole list is bound as one array-typed parameter."""

    column: ColumnPath
    items: list[Any] = Field(default_factory=list)
    type: ArrayType
    negated: bool = False

    @property
    def sql(self) -> str:
        operator = "NOT IN" if self.negated else "IN"
        return f"{self.column.sql} {operator} (?)"

    @property
    def values(self) -> tuple[Any, ...]:
        return (list(self.items),)

    @property
    def types(self) -> tuple[Type, ...]:
        return (self.type,)


class NullCheck(Expression):
    """``column IS [NOT] NULL``."""

    column: ColumnPath
    negated: bool = False

    @property
    def sql(self) -> str:
        return f"{self.column.sql} IS {'NOT ' if self.negated else ''}NULL"


class Group(CompositeExpression):
    """Children joined by ``AND`` or ``OR``; empty children are skipped."""

    combinator: Literal["AND", "OR"] = "AND"
    children: list[Expression] = Field(default_factory=list)

    @property
    def parts(self) -> tuple[Expression, ...]:
        return tuple(child for child in self.children if not child.is_empty)

    @property
    def sql(self) -> str:
        rendered = [part.sql for part in self.parts]
        if not rendered:
            return ""
        if len(rendered) == 1:
            return rendered[0]
        return "(" + f" {self.combinator} ".join(rendered) + ")"

    @property
    def is_empty(self) -> bool:
        return not self.parts


class ConditionsBuilder:
    """Appends conditions to one :class:`Group`, resolving columns and types.

    Every method returns the builder itself so calls can be chained. Nested
    groups are opened with :meth:`and_where` / :meth:`or_where` (aliases
    :meth:`and_group` / :meth:`or_group`), which call the given function with
    a builder scoped to the new group.
    """

    def __init__(self, schema, group: Optional[Group] = None):
        self.schema = schema
        self.group = group if group is not None else Group(combinator="AND")

    # resolution

    def _column(self, reference: Any) -> ColumnPath:
        column = ColumnPath.parse(self.schema, reference)
        if column.is_wildcard:
            raise InvalidReference(f"Wildcard reference `{column.sql}` cannot be used in a condition")
        return column

    def _type(self, column: ColumnPath, type_: str | Type | None) -> Type:
        resolved = self.schema.types.resolve_type(type_)
        if resolved is not None:
            return resolved
        if column.is_raw:
            raise MissingType(f"Raw expression `{column.sql}` requires an explicit type")
        return column.type

    # leaves

    def add(self, condition: Expression) -> ConditionsBuilder:
        """Append an already built condition node."""
        self.group.children.append(condition)
        return self

    def compare(self, reference: Any, operator: str, value: Any, type_: str | Type | None = None) -> ConditionsBuilder:
        if operator not in COMPARISON_OPERATORS:
            raise ValueError(f"Unsupported comparison operator: {operator!r}")
        column = self._column(reference)
        return self.add(Comparison(column=column, operator=operator, value=value, type=self._type(column, type_)))

    def equals(self, reference: Any, value: Any, type_: str | Type | None = None) -> ConditionsBuilder:
        return self.compare(reference, "=", value, type_)

    def not_equals(self, reference: Any, value: Any, type_: str | Type | None = None) -> ConditionsBuilder:
        return self.compare(reference, "<>", value, type_)

    def greater_than(self, reference: Any, value: Any, type_: str | Type | None = None) -> ConditionsBuilder:
        return self.compare(reference, ">", value, type_)

    def smaller_than(self, reference: Any, value: Any, type_: str | Type | None = None) -> ConditionsBuilder:
        return self.compare(reference, "<", value, type_)

    def greater_than_or_equals(self, reference: Any, value: Any, type_: str | Type | None = None) -> ConditionsBuilder:
        return self.compare(reference, ">=", value, type_)

    def smaller_than_or_equals(self, reference: Any, value: Any, type_: str | Type | None = None) -> ConditionsBuilder:
        return self.compare(reference, "<=", value, type_)

    def like(self, reference: Any, pattern: str, type_: str | Type | None = None) -> ConditionsBuilder:
        """``column LIKE ?``; the pattern is bound as given (no escaping)."""
        return self.compare(reference, "LIKE", pattern, type_)

    def not_like(self, reference: Any, pattern: str, type_: str | Type | None = None) -> ConditionsBuilder:
        return self.compare(reference, "NOT LIKE", pattern, type_)

    def in_(self, reference: Any, values: Any, type_: str | Type | None = None) -> ConditionsBuilder:
        """``column IN (?)`` with ``values`` bound as a single array parameter.

        The array type follows ``type_`` when given (a scalar type is mapped
        to its array variant), else the column type, else the elements.
        """
        return self._membership(reference, values, type_, negated=False)

    def not_in(self, reference: Any, values: Any, type_: str | Type | None = None) -> ConditionsBuilder:
        return self._membership(reference, values, type_, negated=True)

    def _membership(self, reference, values, type_, negated: bool) -> ConditionsBuilder:
        column = self._column(reference)
        items = list(values)
        scalar = self.schema.types.resolve_type(type_)
        if scalar is None and not column.is_raw:
            scalar = column.type
        return self.add(
            Membership(column=column, items=items, type=array_type_for(scalar, items), negated=negated)
        )

    def is_null(self, reference: Any) -> ConditionsBuilder:
        return self.add(NullCheck(column=self._column(reference)))

    def is_not_null(self, reference: Any) -> ConditionsBuilder:
        return self.add(NullCheck(column=self._column(reference), negated=True))

    def equals_column(self, left: Any, right: Any) -> ConditionsBuilder:
        """``left = right`` between two columns (the default JOIN ... ON)."""
        return self.add(ColumnComparison(left=self._column(left), right=self._column(right)))

    # groups

    def _nest(self, combinator: str, build: Callable[[ConditionsBuilder], Any]) -> ConditionsBuilder:
        child = Group(combinator=combinator)
        build(ConditionsBuilder(self.schema, child))
        return self.add(child)

    def and_where(self, build: Callable[[ConditionsBuilder], Any]) -> ConditionsBuilder:
        """Open a nested group whose conditions are joined with AND."""
        return self._nest("AND", build)

    def or_where(self, build: Callable[[ConditionsBuilder], Any]) -> ConditionsBuilder:
        """Open a nested group whose conditions are joined with OR."""
        return self._nest("OR", build)

    and_group = and_where
    or_group = or_where


__all__ = [
    "COMPARISON_OPERATORS",
    "Comparison",
    "ColumnComparison",
    "Membership",
    "NullCheck",
    "Group",
    "ConditionsBuilder",
]
