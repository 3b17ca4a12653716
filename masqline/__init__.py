"""masqline: typed SQL query construction on top of a DB-API connection."""

from .connection import Connection, connect, get_connection
from .errors import (
    ConnectionNotConfigured,
    InvalidReference,
    MasqlineError,
    MissingType,
    NotFound,
    UnknownClause,
    UnknownType,
)
from .expressions import ColumnPath, ConditionsBuilder, raw
from .manipulation import DeleteQuery, InsertQuery, UpdateQuery
from .query import Query, SelectQuery
from .schema import Schema, SchemaColumn, SchemaTable
from .types import Type, TypeRegistry
