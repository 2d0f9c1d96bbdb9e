"""
Sub-query builder: ``from_('project_members').select('project_id').where(...)``.

Used as the right-hand side of ``column(...).in_(...)``. Builders are
generative: every call returns a new Subquery.
"""

import copy
from typing import Any

from .expressions import Condition
from .sql import PolicyDefinitionError, SqlQuery, quote_ident

_JOIN_KINDS = frozenset({"INNER", "LEFT", "RIGHT", "FULL"})


class Subquery(SqlQuery):
    def __init__(self, table: str) -> None:
        quote_ident(table)
        self.table = table
        self._columns: tuple[str, ...] = ()
        self._joins: tuple[tuple[str, str, Condition], ...] = ()
        self._where: Condition | None = None

    def __repr__(self) -> str:
        return f"from_({self.table!r})"

    def _clone(self) -> "Subquery":
        return copy.copy(self)

    def select(self, *columns: Any) -> "Subquery":
        """Columns to select; accepts names or a single list of names."""
        if len(columns) == 1 and isinstance(columns[0], (list, tuple)):
            columns = tuple(columns[0])
        if not columns:
            raise PolicyDefinitionError(f"select() on {self.table!r} needs at least one column")
        for c in columns:
            quote_ident(c)
        q = self._clone()
        q._columns = tuple(columns)
        return q

    def where(self, condition: Condition) -> "Subquery":
        """Filter rows; repeated calls are combined with AND."""
        if not isinstance(condition, Condition):
            raise PolicyDefinitionError(
                f"where() on {self.table!r} expects a condition, got {type(condition).__name__}"
            )
        q = self._clone()
        q._where = condition if self._where is None else self._where.and_(condition)
        return q

    def join(self, table: str, on: Condition, kind: str = "INNER") -> "Subquery":
        quote_ident(table)
        if not isinstance(on, Condition):
            raise PolicyDefinitionError(f"join() on {table!r} expects a condition for 'on'")
        kind = str(kind).upper()
        if kind not in _JOIN_KINDS:
            raise PolicyDefinitionError(
                f"Unknown join kind {kind!r}; expected one of {', '.join(sorted(_JOIN_KINDS))}"
            )
        q = self._clone()
        q._joins = (*self._joins, (kind, table, on))
        return q

    def render(self) -> str:
        if not self._columns:
            raise PolicyDefinitionError(
                f"Sub-query on {self.table!r} needs .select(...) before it can be used"
            )
        parts = [
            f"SELECT {', '.join(quote_ident(c) for c in self._columns)}",
            f"FROM {quote_ident(self.table)}",
        ]
        for kind, table, on in self._joins:
            keyword = "JOIN" if kind == "INNER" else f"{kind} JOIN"
            parts.append(f"{keyword} {quote_ident(table)} ON {on.render()}")
        if self._where is not None:
            parts.append(f"WHERE {self._where.render()}")
        return " ".join(parts)


def from_(table: str) -> Subquery:
    return Subquery(table)
