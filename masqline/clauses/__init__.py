"""Clause types: one renderable fragment per statement slot."""

from ._bases import Clause
from .conditions import ConditionsClause, HavingClause, WhereClause
from .from_clause import FromClause, Join
from .limit import LimitClause
from .manipulation import Assignment, AssignmentsClause, InsertClause, SetClause, TableClause
from .ordering import GroupByClause, OrderByClause, OrderEntry
from .select import SelectClause, SelectEntry

__all__ = [
    "Assignment",
    "AssignmentsClause",
    "Clause",
    "ConditionsClause",
    "FromClause",
    "GroupByClause",
    "HavingClause",
    "InsertClause",
    "Join",
    "LimitClause",
    "OrderByClause",
    "OrderEntry",
    "SelectClause",
    "SelectEntry",
    "SetClause",
    "TableClause",
    "WhereClause",
]
