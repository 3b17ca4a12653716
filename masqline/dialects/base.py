"""Base Dialect type: subclasses open driver connections for one engine."""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel


class Dialect(BaseModel, ABC):
    """Base for database dialects; subclasses implement connect() for a given URL.

    Generated SQL is the same for every dialect; a dialect only knows how to
    reach its engine and which placeholder its driver expects.
    """

    model_config = {"arbitrary_types_allowed": True}

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ()
    """URL schemes this dialect handles (e.g. ('sqlite',))."""

    PLACEHOLDER: ClassVar[str] = "?"
    """Placeholder the driver expects (``?`` for qmark, ``%s`` for format)."""

    def escape_text(self, text: str) -> str:
        """Escape SQL text lying between placeholders, as the driver requires."""
        return text

    @abstractmethod
    def connect(self, url: str) -> Any:
        """Return a new raw DB-API connection for the given URL.

        The return value is engine-specific (e.g. sqlite3.Connection, pymysql.Connection).
        """
        ...  # pylint: disable=unnecessary-ellipsis
