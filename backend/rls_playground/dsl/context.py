"""
Context accessors: auth.uid(), session.get(key, type), currentUser().

Each returns a ContextExpression usable as a comparison value.
"""

from .sql import (
    PolicyDefinitionError,
    SqlExpression,
    check_qualified_name,
    sql_string,
)

# Casts accepted by session.get()
SESSION_TYPES = frozenset({
    "text",
    "uuid",
    "integer",
    "bigint",
    "numeric",
    "boolean",
    "timestamptz",
    "jsonb",
})


class ContextExpression(SqlExpression):
    """A request-context value such as ``auth.uid()`` or ``current_user``."""

    def __init__(self, sql: str) -> None:
        self._sql = sql

    def render(self) -> str:
        return self._sql

    def __repr__(self) -> str:
        return f"ContextExpression({self._sql!r})"


class AuthContext:
    """``auth``: identity of the authenticated subject (Supabase-style helpers)."""

    def uid(self) -> ContextExpression:
        return ContextExpression("auth.uid()")

    def role(self) -> ContextExpression:
        return ContextExpression("auth.role()")

    def jwt(self, claim: str | None = None) -> ContextExpression:
        """Whole JWT (jsonb) or a single claim as text."""
        if claim is None:
            return ContextExpression("auth.jwt()")
        if not isinstance(claim, str) or not claim:
            raise PolicyDefinitionError(f"JWT claim must be a non-empty string, got {claim!r}")
        return ContextExpression(f"(auth.jwt() ->> {sql_string(claim)})")


class SessionContext:
    """``session``: custom settings set per request with ``set_config``."""

    def get(self, key: str, type: str = "text") -> ContextExpression:
        check_qualified_name(key, "session key")
        if "." not in key:
            raise PolicyDefinitionError(
                f"Session key {key!r} must be namespaced, e.g. 'app.{key}'"
            )
        if type not in SESSION_TYPES:
            raise PolicyDefinitionError(
                f"Unknown session type {type!r}; expected one of {', '.join(sorted(SESSION_TYPES))}"
            )
        expr = f"current_setting({sql_string(key)}, true)"
        if type != "text":
            expr = f"{expr}::{type}"
        return ContextExpression(expr)


def currentUser() -> ContextExpression:
    """The database role executing the query."""
    return ContextExpression("current_user")


auth = AuthContext()
session = SessionContext()
