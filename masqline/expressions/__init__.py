"""SQL expression types for query building.

Each expression has a ``.sql`` property (SQL fragment with ``?``
placeholders), ``.values`` (bound values in placeholder order) and ``.types``
(one :class:`~masqline.types.Type` per value).
"""

from ._bases import CompositeExpression, Expression, quote_identifier
from .column_path import WILDCARD, ColumnPath, Identifier, Raw, raw
from .conditions import (
    COMPARISON_OPERATORS,
    ColumnComparison,
    Comparison,
    ConditionsBuilder,
    Group,
    Membership,
    NullCheck,
)

__all__ = [
    "COMPARISON_OPERATORS",
    "ColumnComparison",
    "ColumnPath",
    "Comparison",
    "CompositeExpression",
    "ConditionsBuilder",
    "Expression",
    "Group",
    "Identifier",
    "Membership",
    "NullCheck",
    "Raw",
    "WILDCARD",
    "quote_identifier",
    "raw",
]
