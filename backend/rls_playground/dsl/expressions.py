"""
Column references and boolean conditions.

``column('user_id').isOwner().or_(column('is_public').isPublic())`` builds a
tree of Condition nodes; ``render()`` turns it into a SQL predicate.
Python keywords get a trailing underscore: ``in_``, ``and_``, ``or_``, ``not_``.
"""

from collections.abc import Iterable
from typing import Any

from .context import ContextExpression, auth, session
from .sql import (
    PolicyDefinitionError,
    SqlExpression,
    check_qualified_name,
    quote_ident,
    render_value,
    sql_string,
)


class Condition(SqlExpression):
    """Base for boolean predicates."""

    def columns(self) -> tuple[str, ...]:
        """Column names this predicate filters on (used for index suggestions)."""
        return ()

    def and_(self, *others: "Condition") -> "Condition":
        return BoolOp("AND", (self, *_check_conditions(others, "and_")))

    def or_(self, *others: "Condition") -> "Condition":
        return BoolOp("OR", (self, *_check_conditions(others, "or_")))

    def not_(self) -> "Condition":
        return Not(self)


def _check_conditions(others: Iterable[Any], method: str) -> tuple[Condition, ...]:
    out = tuple(others)
    if not out:
        raise PolicyDefinitionError(f"{method}() needs at least one condition")
    for o in out:
        if not isinstance(o, Condition):
            raise PolicyDefinitionError(
                f"{method}() expects conditions, got {type(o).__name__}"
            )
    return out


class BoolOp(Condition):
    def __init__(self, op: str, parts: tuple[Condition, ...]) -> None:
        self.op = op
        # Flatten a.or_(b).or_(c) into one OR
        flat: list[Condition] = []
        for p in parts:
            if isinstance(p, BoolOp) and p.op == op:
                flat.extend(p.parts)
            else:
                flat.append(p)
        self.parts = tuple(flat)

    def render(self) -> str:
        rendered = []
        for p in self.parts:
            sql = p.render()
            if isinstance(p, BoolOp):
                sql = f"({sql})"
            rendered.append(sql)
        return f" {self.op} ".join(rendered)

    def columns(self) -> tuple[str, ...]:
        return tuple(c for p in self.parts for c in p.columns())


class Not(Condition):
    def __init__(self, inner: Condition) -> None:
        self.inner = inner

    def render(self) -> str:
        return f"NOT ({self.inner.render()})"

    def columns(self) -> tuple[str, ...]:
        return self.inner.columns()


class Comparison(Condition):
    def __init__(self, column: "Column", op: str, value: Any) -> None:
        self.column = column
        self.op = op
        self.value = value

    def render(self) -> str:
        return f"{self.column.render()} {self.op} {render_value(self.value)}"

    def columns(self) -> tuple[str, ...]:
        return (self.column.name,)


class NullCheck(Condition):
    def __init__(self, column: "Column", negated: bool = False) -> None:
        self.column = column
        self.negated = negated

    def render(self) -> str:
        keyword = "IS NOT NULL" if self.negated else "IS NULL"
        return f"{self.column.render()} {keyword}"

    def columns(self) -> tuple[str, ...]:
        return (self.column.name,)


class InCondition(Condition):
    def __init__(self, column: "Column", values: Any) -> None:
        self.column = column
        self.values = values

    def render(self) -> str:
        if isinstance(self.values, SqlExpression):
            inner = self.values.render()
        else:
            inner = ", ".join(render_value(v) for v in self.values)
        return f"{self.column.render()} IN ({inner})"

    def columns(self) -> tuple[str, ...]:
        return (self.column.name,)


class RawPredicate(Condition):
    """A predicate rendered verbatim (helpers such as hasRole, alwaysTrue)."""

    def __init__(self, sql: str) -> None:
        self._sql = sql

    def render(self) -> str:
        return self._sql


class FunctionCall(Condition):
    """``call('is_admin', auth.uid())``; usable as a predicate or as a value."""

    def __init__(self, name: str, args: tuple[Any, ...]) -> None:
        self.name = check_qualified_name(name, "function name")
        self.args = args

    def render(self) -> str:
        return f"{self.name}({', '.join(render_value(a) for a in self.args)})"


class Column(SqlExpression):
    """Reference to a column of the policy's table."""

    def __init__(self, name: str) -> None:
        quote_ident(name)
        self.name = name

    def render(self) -> str:
        return quote_ident(self.name)

    def __repr__(self) -> str:
        return f"column({self.name!r})"

    def _compare(self, op: str, value: Any) -> Condition:
        render_value(value)  # fail early on unsupported values
        return Comparison(self, op, value)

    def eq(self, value: Any) -> Condition:
        if value is None:
            return NullCheck(self)
        return self._compare("=", value)

    def neq(self, value: Any) -> Condition:
        if value is None:
            return NullCheck(self, negated=True)
        return self._compare("<>", value)

    def gt(self, value: Any) -> Condition:
        return self._compare(">", value)

    def gte(self, value: Any) -> Condition:
        return self._compare(">=", value)

    def lt(self, value: Any) -> Condition:
        return self._compare("<", value)

    def lte(self, value: Any) -> Condition:
        return self._compare("<=", value)

    def like(self, pattern: str) -> Condition:
        return self._compare("LIKE", _check_pattern(pattern, "like"))

    def ilike(self, pattern: str) -> Condition:
        return self._compare("ILIKE", _check_pattern(pattern, "ilike"))

    def in_(self, values: Any) -> Condition:
        """IN (list of values) or IN (sub-query built with from_())."""
        if isinstance(values, SqlExpression):
            return InCondition(self, values)
        if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
            raise PolicyDefinitionError(
                f"in_() on {self.name!r} expects a list of values or a sub-query"
            )
        items = tuple(values)
        if not items:
            raise PolicyDefinitionError(f"in_() on {self.name!r} needs at least one value")
        for v in items:
            render_value(v)
        return InCondition(self, items)

    def isNull(self) -> Condition:
        return NullCheck(self)

    def isNotNull(self) -> Condition:
        return NullCheck(self, negated=True)

    # Helpers for common ownership patterns

    def isOwner(self) -> Condition:
        """Row belongs to the authenticated user."""
        return self.eq(auth.uid())

    def isPublic(self) -> Condition:
        """Boolean visibility flag is set."""
        return self.eq(True)

    def belongsToTenant(self, sessionKey: str = "app.current_tenant_id") -> Condition:
        """Row's tenant matches the tenant id set on the session."""
        return self.eq(session.get(sessionKey, "uuid"))

    def isMemberOf(self, table: str, key: str, memberColumn: str = "user_id") -> Condition:
        """Value appears in ``table.key`` for rows owned by the authenticated user."""
        sub = (
            f"SELECT {quote_ident(key)} FROM {quote_ident(table)} "
            f"WHERE {quote_ident(memberColumn)} = {auth.uid().render()}"
        )
        return InCondition(self, ContextExpression(sub))


def _check_pattern(pattern: Any, method: str) -> str:
    if not isinstance(pattern, str):
        raise PolicyDefinitionError(f"{method}() expects a string pattern, got {type(pattern).__name__}")
    return pattern


def column(name: str) -> Column:
    return Column(name)


def hasRole(role: str) -> Condition:
    """Authenticated user's JWT carries the given role claim."""
    if not isinstance(role, str) or not role:
        raise PolicyDefinitionError(f"hasRole() expects a role name, got {role!r}")
    return RawPredicate(f"(auth.jwt() ->> 'role') = {sql_string(role)}")


def alwaysTrue() -> Condition:
    return RawPredicate("true")


def call(name: str, *args: Any) -> Condition:
    for a in args:
        render_value(a)
    return FunctionCall(name, args)
