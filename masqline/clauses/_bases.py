"""Base clause type."""

from ..expressions import CompositeExpression, Expression


class Clause(CompositeExpression):
    """One named, independently renderable line (or lines) of a statement.

    A clause renders ``""`` while empty; queries skip empty clauses.
    """

    @property
    def parts(self) -> tuple[Expression, ...]:
        return ()
