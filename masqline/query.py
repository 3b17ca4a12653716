"""Query builders: ordered clause slots rendered into SQL plus parameters.

A query owns one clause per slot, in canonical order. Builder methods mutate
those clauses and return the query itself; ``to_sql()`` renders every
non-empty clause in slot order, one per line, and ``get_param_values()`` /
``get_param_types()`` walk the same clauses in the same order, so positions
line up with the ``?`` placeholders (JOIN ... ON parameters first, as FROM
comes before WHERE, then WHERE, then HAVING).

Queries are mutable and not meant to be shared between threads.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Optional

from .clauses import (
    Clause,
    FromClause,
    GroupByClause,
    HavingClause,
    LimitClause,
    OrderByClause,
    OrderEntry,
    SelectClause,
    SelectEntry,
    WhereClause,
)
from .connection import Result
from .errors import ConnectionNotConfigured, InvalidReference, MissingType, UnknownClause
from .expressions import ColumnPath, ConditionsBuilder, Expression, Group, Identifier, Raw, raw
from .schema import Schema
from .types import INTEGER, Type

logger = logging.getLogger("masqline")

Condition = Callable[[ConditionsBuilder], Any] | Expression


class Query:
    """Base for every statement: clause slots, SQL rendering and execution.

    Args:
        connection: :class:`~masqline.connection.Connection` used by the
            execution methods only; may be ``None`` to just build SQL.
        schema: :class:`~masqline.schema.Schema` references are resolved against.
    """

    raw = staticmethod(raw)

    def __init__(self, connection, schema: Schema):
        self.connection = connection
        self.schema = schema
        self._clauses: dict[str, Optional[Clause]] = self._create_clauses()

    def _create_clauses(self) -> dict[str, Optional[Clause]]:
        """Slot name -> initial clause, in rendering order."""
        raise NotImplementedError("Subclasses must implement `_create_clauses`")

    # clause slots

    def get_clause(self, name: str) -> Optional[Clause]:
        try:
            return self._clauses[name]
        except KeyError as error:
            raise UnknownClause(f"Unknown clause specified: '{name}'") from error

    def set_clause(self, name: str, clause: Optional[Clause]) -> Query:
        if name not in self._clauses:
            raise UnknownClause(f"Unknown clause specified: '{name}'")
        self._clauses[name] = clause
        return self

    def _clause(self, name: str) -> Clause:
        """Clause of slot ``name``, recreated empty if it was cleared with ``set_clause(name, None)``."""
        clause = self.get_clause(name)
        if clause is None:
            clause = self._create_clauses()[name]
            self._clauses[name] = clause
        return clause

    def _rendered_clauses(self) -> list[Clause]:
        return [clause for clause in self._clauses.values() if clause is not None and not clause.is_empty]

    # SQL generation

    def to_sql(self) -> str:
        return "\n".join(clause.sql for clause in self._rendered_clauses())

    def __str__(self) -> str:
        return self.to_sql()

    def get_param_values(self) -> list[Any]:
        """Bound values, in placeholder order."""
        return [value for clause in self._rendered_clauses() for value in clause.values]

    def get_param_types(self) -> list[Type]:
        """Types of :meth:`get_param_values`, position by position."""
        return [type_ for clause in self._rendered_clauses() for type_ in clause.types]

    @property
    def params(self) -> list[tuple[Any, Type]]:
        return list(zip(self.get_param_values(), self.get_param_types()))

    # conditions

    def _apply_conditions(self, slot: str, conditions: tuple[Condition, ...]) -> Query:
        root = self._clause(slot).root
        builder = ConditionsBuilder(self.schema, Group(combinator=root.combinator))
        for condition in conditions:
            if isinstance(condition, Expression):
                builder.add(condition)
            elif callable(condition):
                condition(builder)
            else:
                raise TypeError(f"Expected a callable or an expression; got {type(condition)}")
        root.children.extend(builder.group.children)
        return self

    def where(self, *conditions: Condition) -> Query:
        """Add WHERE conditions, ANDed with the ones already there.

        Each condition is either a function receiving a
        :class:`~masqline.expressions.ConditionsBuilder`, or a prebuilt
        condition expression.
        """
        return self._apply_conditions("WHERE", conditions)

    def or_where(self, build: Callable[[ConditionsBuilder], Any]) -> Query:
        """Add one group of WHERE conditions joined with OR."""
        return self.where(lambda where: where.or_where(build))

    # execution

    def _execute(self) -> Result:
        if self.connection is None:
            raise ConnectionNotConfigured(f"{type(self).__name__} has no connection to execute on")
        return self.connection.execute(self.to_sql(), self.params)


class SelectQuery(Query):
    """``SELECT ... FROM ... [JOIN ...] [WHERE] [GROUP BY] [HAVING] [ORDER BY] [LIMIT]``.

    Example:
        SelectQuery(connection, schema)
            .select({"posts.id": "post_id"}, "posts.title")
            .from_("posts")
            .where(lambda w: w.like("posts.title", "Foo%"))
            .order_by("-posts.posted_at")
            .limit(10)
    """

    def _create_clauses(self) -> dict[str, Optional[Clause]]:
        return {
            "SELECT": SelectClause(),
            "FROM": FromClause(),
            "WHERE": WhereClause(),
            "GROUP BY": GroupByClause(),
            "HAVING": HavingClause(),
            "ORDER BY": OrderByClause(),
            "LIMIT": LimitClause(),
        }

    # SELECT

    def _entry(self, reference: Any, alias: Optional[str], type_: str | Type | None) -> SelectEntry:
        column = ColumnPath.parse(self.schema, reference, alias)
        resolved = self.schema.types.resolve_type(type_)
        if column.is_wildcard:
            if resolved is not None:
                raise InvalidReference(f"Wildcard reference `{column.sql}` cannot be given a type")
        elif resolved is None:
            if column.is_raw:
                raise MissingType(f"Raw expression `{column.sql}` requires an explicit type")
            resolved = column.type
        return SelectEntry(column=column, alias=alias, type=resolved)

    def _entries(self, column: Any, type_: str | Type | None = None, alias: Optional[str] = None) -> list[SelectEntry]:
        if isinstance(column, dict):
            return [self._entry(reference, column_alias, type_) for reference, column_alias in column.items()]
        return [self._entry(column, alias, type_)]

    def select(self, *columns: Any) -> SelectQuery:
        """Replace the selected columns.

        Each column is a ``table.column`` string, a ``table.*`` wildcard, a
        :func:`~masqline.expressions.raw` expression, or a ``{reference: alias}``
        dict. Types come from the schema; use :meth:`add_select` to give one.
        """
        entries = [entry for column in columns for entry in self._entries(column)]
        self.set_clause("SELECT", SelectClause(entries=entries, distinct=self._clause("SELECT").distinct))
        return self

    def add_select(self, column: Any, type_: str | Type | None = None, alias: Optional[str] = None) -> SelectQuery:
        """Append one column (or a ``{reference: alias}`` dict), optionally typed explicitly."""
        self._clause("SELECT").entries.extend(self._entries(column, type_, alias))
        return self

    def distinct(self, distinct: bool = True) -> SelectQuery:
        self._clause("SELECT").distinct = distinct
        return self

    def select_aggr(self, function: str, column: Any, alias: str, type_: str | Type | None = None) -> SelectQuery:
        """Append ``FUNCTION(column) AS alias``, typed like the column unless told otherwise."""
        path = ColumnPath.parse(self.schema, column)
        if path.is_wildcard:
            raise InvalidReference(f"Wildcard reference `{path.sql}` cannot be aggregated")
        if type_ is None:
            if path.is_raw:
                raise MissingType(f"Raw expression `{path.sql}` requires an explicit type")
            type_ = INTEGER if function.upper() == "COUNT" else path.type
        return self.add_select({raw(f"{function.upper()}({path.sql})"): alias}, type_)

    def select_count(self, column: Any = None, alias: str = "count") -> SelectQuery:
        """Append ``COUNT(*)`` (or ``COUNT(column)``) as an integer."""
        if column is None:
            return self.add_select({raw("COUNT(*)"): alias}, INTEGER)
        return self.select_aggr("COUNT", column, alias, INTEGER)

    def get_conversion_types(self) -> dict[str, Type]:
        """Output column name -> Type, in SELECT order; wildcards expand to their table's columns."""
        types: dict[str, Type] = {}
        for entry in self._clause("SELECT").entries:
            if entry.column.is_wildcard:
                expanded = self.schema.column_types(entry.column.table)
            else:
                expanded = {entry.name: entry.type}
            for name, type_ in expanded.items():
                types.pop(name, None)
                types[name] = type_
        return types

    # FROM / JOIN

    def from_(self, table: str) -> SelectQuery:
        self.schema.get_table(table)
        self._clause("FROM").table = table
        return self

    def _join(self, kind: str, origin: Any, target: Any) -> SelectQuery:
        builder = ConditionsBuilder(self.schema)
        if callable(target):
            table = origin
            self.schema.get_table(table)
            target(builder)
            if builder.group.is_empty:
                raise ValueError(f"{kind} `{table}` requires at least one ON condition")
        else:
            table = ColumnPath.parse(self.schema, target).table
            builder.equals_column(origin, target)
        self._clause("FROM").add_join(kind, table, builder.group)
        return self

    def inner_join(self, origin: Any, target: Any) -> SelectQuery:
        """``INNER JOIN``, on ``origin = target`` columns, or on conditions built by ``target``.

        With a callable ``target``, ``origin`` is the name of the joined table.
        """
        return self._join("INNER JOIN", origin, target)

    def left_join(self, origin: Any, target: Any) -> SelectQuery:
        """``LEFT JOIN``; same arguments as :meth:`inner_join`."""
        return self._join("LEFT JOIN", origin, target)

    # HAVING / GROUP BY / ORDER BY / LIMIT

    def having(self, *conditions: Condition) -> SelectQuery:
        return self._apply_conditions("HAVING", conditions)

    def _reference(self, reference: Any) -> Expression:
        """Sort/group key: qualified column, raw SQL, or a bare name such as an alias."""
        if isinstance(reference, (Raw, ColumnPath)) or (isinstance(reference, str) and "." in reference):
            column = ColumnPath.parse(self.schema, reference)
            if column.is_wildcard:
                raise InvalidReference(f"Wildcard reference `{column.sql}` cannot be used here")
            return column
        if isinstance(reference, str) and reference:
            return Identifier(name=reference)
        raise InvalidReference(f"Invalid column reference: {reference!r}")

    def group_by(self, *references: Any) -> SelectQuery:
        """Replace the GROUP BY list."""
        self.set_clause("GROUP BY", GroupByClause(references=[self._reference(reference) for reference in references]))
        return self

    def add_group_by(self, reference: Any) -> SelectQuery:
        self._clause("GROUP BY").references.append(self._reference(reference))
        return self

    def order_by(self, *references: Any) -> SelectQuery:
        """Replace the ORDER BY list; ``"-posts.posted_at"`` sorts descending."""
        self.set_clause("ORDER BY", OrderByClause(entries=[self._order_entry(reference) for reference in references]))
        return self

    def add_order_by(self, reference: Any, direction: Optional[str] = None) -> SelectQuery:
        self._clause("ORDER BY").entries.append(self._order_entry(reference, direction))
        return self

    def _order_entry(self, reference: Any, direction: Optional[str] = None) -> OrderEntry:
        if isinstance(reference, str) and reference.startswith("-"):
            reference = reference[1:]
            default = "DESC"
        else:
            default = "ASC"
        direction = (direction or default).upper()
        if direction not in ("ASC", "DESC"):
            raise ValueError(f"Invalid sort direction: {direction!r}")
        return OrderEntry(reference=self._reference(reference), direction=direction)

    def limit(self, count: Optional[int], offset: Optional[int] = None) -> SelectQuery:
        """Set LIMIT (``None`` removes it) and optionally the offset."""
        if count is not None and count < 0:
            raise ValueError("LIMIT must not be negative")
        if offset is not None:
            self.offset(offset)
        self._clause("LIMIT").count = count
        return self

    def offset(self, offset: int) -> SelectQuery:
        if offset < 0:
            raise ValueError("OFFSET must not be negative")
        self._clause("LIMIT").offset = offset
        return self

    # execution

    def _decode(self, result: Result) -> list[dict[str, Any]]:
        types = self.get_conversion_types()
        return [
            {
                name: types[name].from_database(value) if types.get(name) is not None else value
                for name, value in row.items()
            }
            for row in result.as_dicts()
        ]

    def execute(self) -> list[dict[str, Any]]:
        """Run the query and return every row, decoded (same as :meth:`fetch_all`)."""
        return self.fetch_all()

    def fetch_all(self) -> list[dict[str, Any]]:
        """All rows as dicts keyed by output column name, values decoded by type."""
        return self._decode(self._execute())

    def fetch_one(self) -> Optional[dict[str, Any]]:
        """First row, or ``None`` when there is none."""
        rows = self.fetch_all()
        return rows[0] if rows else None

    def fetch_list(self, column: Optional[str] = None) -> list[Any]:
        """One column (the first by default) of every row."""
        result = self._execute()
        if column is None:
            if not result.columns:
                return []
            column = result.columns[0]
        elif column not in result.columns:
            raise InvalidReference(f"Column {column!r} is not part of the result")
        return [row[column] for row in self._decode(result)]

    def fetch_value(self, column: Optional[str] = None) -> Any:
        """One column (the first by default) of the first row, or ``None``."""
        values = self.fetch_list(column)
        return values[0] if values else None

    def __iter__(self) -> Iterator[dict[str, Any]]:
        yield from self.fetch_all()


__all__ = ["Query", "SelectQuery"]
