"""Exceptions raised while building queries.

Everything here is raised synchronously by builder calls; nothing is deferred
to SQL generation. Errors coming from the database driver are not wrapped.
"""


class MasqlineError(Exception):
    """Base class for all masqline errors."""


class InvalidReference(MasqlineError, ValueError):
    """Malformed ``table.column`` reference, or a wildcard used where it cannot be."""


class NotFound(InvalidReference):
    """Table or column absent from the schema."""


class MissingType(MasqlineError, ValueError):
    """A raw SQL expression was used where a type is required, without one."""


class UnknownType(MasqlineError, ValueError):
    """Type name not registered in the type registry."""


class UnknownClause(MasqlineError, KeyError):
    """Clause slot name not recognized by the query."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class ConnectionNotConfigured(MasqlineError, ValueError):
    """No usable connection (unknown name, unsupported scheme, or none given)."""


__all__ = [
    "MasqlineError",
    "InvalidReference",
    "NotFound",
    "MissingType",
    "UnknownType",
    "UnknownClause",
    "ConnectionNotConfigured",
]
