"""Types governing how values are encoded for binding and decoded from rows.

A :class:`Type` is an immutable tag with two conversions: ``to_database`` for
values bound to ``?`` placeholders and ``from_database`` for values read back
from a result column. ``None`` always passes through unchanged.

Array types (:data:`INT_ARRAY`, :data:`STR_ARRAY`) only ever describe the
single parameter bound to an ``IN (?)`` condition; the connection expands them
into one placeholder per element at execution time.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import json
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownType


class Type(BaseModel):
    """Base type: identity conversion both ways."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str

    def to_database(self, value: Any) -> Any:
        """Convert a Python value to what the driver expects."""
        if value is None:
            return None
        return self._encode(value)

    def from_database(self, value: Any) -> Any:
        """Convert a driver value back to a Python value."""
        if value is None:
            return None
        return self._decode(value)

    def _encode(self, value: Any) -> Any:
        return value

    def _decode(self, value: Any) -> Any:
        return value

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class IntegerType(Type):

    def _encode(self, value):
        return int(value)

    def _decode(self, value):
        return int(value)


class StringType(Type):

    def _encode(self, value):
        return str(value)

    def _decode(self, value):
        return str(value)


class BooleanType(Type):

    def _encode(self, value):
        return 1 if value else 0

    def _decode(self, value):
        return bool(value)


class FloatType(Type):

    def _encode(self, value):
        return float(value)

    def _decode(self, value):
        return float(value)


class DecimalType(Type):
    """Stored as text so that no precision is lost on the way in."""

    def _encode(self, value):
        return str(value)

    def _decode(self, value):
        return decimal.Decimal(str(value))


class DateTimeType(Type):

    def _encode(self, value):
        if isinstance(value, datetime.datetime):
            return value.isoformat(sep=" ")
        return value

    def _decode(self, value):
        if isinstance(value, datetime.datetime):
            return value
        if isinstance(value, bytes):
            value = value.decode()
        return datetime.datetime.fromisoformat(value)


class DateType(Type):

    def _encode(self, value):
        if isinstance(value, datetime.datetime):
            return value.date().isoformat()
        if isinstance(value, datetime.date):
            return value.isoformat()
        return value

    def _decode(self, value):
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, datetime.date):
            return value
        return datetime.date.fromisoformat(str(value)[:10])


class TimeType(Type):

    def _encode(self, value):
        if isinstance(value, datetime.time):
            return value.isoformat()
        return value

    def _decode(self, value):
        if isinstance(value, datetime.time):
            return value
        if isinstance(value, datetime.timedelta):
            return (datetime.datetime.min + value).time()
        return datetime.time.fromisoformat(str(value))


class JsonType(Type):

    def _encode(self, value):
        return json.dumps(value, ensure_ascii=False)

    def _decode(self, value):
        if not isinstance(value, (str, bytes)):
            return value
        return json.loads(value)


class EnumType(Type):
    """Custom type storing an :class:`enum.Enum` member by name."""

    enum_class: Any

    def _encode(self, value):
        if isinstance(value, self.enum_class):
            return value.name
        return self.enum_class[value].name

    def _decode(self, value):
        return self.enum_class[value]


class ArrayType(Type):
    """Marker type for a list bound as a single ``IN (?)`` parameter."""

    element: Type

    def _encode(self, value):
        return [self.element.to_database(v) for v in value]

    def _decode(self, value):
        return [self.element.from_database(v) for v in value]


INTEGER = IntegerType(name="integer")
SMALLINT = IntegerType(name="smallint")
BIGINT = IntegerType(name="bigint")
STRING = StringType(name="string")
TEXT = StringType(name="text")
BOOLEAN = BooleanType(name="boolean")
FLOAT = FloatType(name="float")
DECIMAL = DecimalType(name="decimal")
DATETIME = DateTimeType(name="datetime")
DATE = DateType(name="date")
TIME = TimeType(name="time")
JSON = JsonType(name="json")

INT_ARRAY = ArrayType(name="int_array", element=INTEGER)
STR_ARRAY = ArrayType(name="string_array", element=STRING)

BUILTIN_TYPES: tuple[Type, ...] = (
    INTEGER, SMALLINT, BIGINT, STRING, TEXT, BOOLEAN, FLOAT, DECIMAL,
    DATETIME, DATE, TIME, JSON, INT_ARRAY, STR_ARRAY,
)


def array_type_for(scalar: Type | None, values: Iterable[Any] = ()) -> ArrayType:
    """Pick the array marker for an IN list.

    The scalar type decides when known; otherwise the elements do (a list made
    only of integers is an int array, anything else a string array).
    """
    if isinstance(scalar, ArrayType):
        return scalar
    if scalar is not None:
        return INT_ARRAY if isinstance(scalar, IntegerType) else STR_ARRAY
    values = list(values)
    if values and all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        return INT_ARRAY
    return STR_ARRAY


class TypeRegistry(BaseModel):
    """Name → Type lookup, owned by a schema (there is no global registry)."""

    model_config = {"arbitrary_types_allowed": True}

    types: dict[str, Type] = Field(default_factory=dict)

    @classmethod
    def default(cls) -> TypeRegistry:
        """Registry holding every built-in type."""
        return cls(types={t.name: t for t in BUILTIN_TYPES})

    def register(self, type_: Type) -> Type:
        """Add (or replace) a type under its own name and return it."""
        self.types[type_.name] = type_
        return type_

    def register_enum(self, name: str, enum_class: type[enum.Enum]) -> EnumType:
        """Register a custom enum type (e.g. ``registry.register_enum("status", Status)``)."""
        return self.register(EnumType(name=name, enum_class=enum_class))

    def type_by_name(self, name: str) -> Type:
        try:
            return self.types[name]
        except KeyError as error:
            raise UnknownType(f"Unknown type: {name!r}") from error

    def resolve_type(self, type_: str | Type | None) -> Type | None:
        """Normalize a type name or a Type instance into a Type (``None`` stays ``None``)."""
        if type_ is None or isinstance(type_, Type):
            return type_
        if isinstance(type_, str):
            return self.type_by_name(type_)
        raise TypeError(f"Expected a type name or a Type; got {type(type_)}")


__all__ = [
    "Type",
    "IntegerType",
    "StringType",
    "BooleanType",
    "FloatType",
    "DecimalType",
    "DateTimeType",
    "DateType",
    "TimeType",
    "JsonType",
    "EnumType",
    "ArrayType",
    "TypeRegistry",
    "array_type_for",
    "INTEGER",
    "SMALLINT",
    "BIGINT",
    "STRING",
    "TEXT",
    "BOOLEAN",
    "FLOAT",
    "DECIMAL",
    "DATETIME",
    "DATE",
    "TIME",
    "JSON",
    "INT_ARRAY",
    "STR_ARRAY",
]
