"""
SQL rendering helpers for the policy DSL.

Literal and identifier quoting for PostgreSQL, plus the ``SqlExpression`` base
every DSL node derives from. Literals are escaped here, never by callers.
"""

import re
from datetime import date, datetime
from typing import Any

# Single-quote escape for SQL strings
_SQL_QUOTE_ESCAPE = str.maketrans({"'": "''"})

_SIMPLE_IDENT_RE = re.compile(r"^[a-z_][a-z0-9_]*$")
_QUALIFIED_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")

# Words that must be quoted when used as identifiers
_RESERVED_WORDS = frozenset({
    "all", "and", "any", "as", "check", "column", "constraint", "create",
    "default", "desc", "distinct", "do", "else", "end", "false", "for",
    "foreign", "from", "grant", "group", "having", "in", "limit", "not",
    "null", "offset", "on", "only", "or", "order", "primary", "references",
    "select", "table", "then", "to", "true", "union", "unique", "user",
    "using", "when", "where", "with",
})


class PolicyDefinitionError(ValueError):
    """Raised when a policy, condition or sub-query is built from malformed input."""

    pass


class SqlExpression:
    """Anything that renders to a SQL fragment."""

    def render(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()


class SqlQuery(SqlExpression):
    """A SELECT statement; parenthesized when used as a value."""

    pass


def sql_string(value: Any) -> str:
    """Escape a string literal. None -> NULL."""
    if value is None:
        return "NULL"
    s = str(value).translate(_SQL_QUOTE_ESCAPE)
    return f"'{s}'"


def sql_bool(value: Any) -> str:
    if value is None:
        return "NULL"
    return "TRUE" if bool(value) else "FALSE"


def render_value(value: Any) -> str:
    """
    Render a right-hand side value: DSL expressions as-is, Python scalars as
    escaped literals. Unsupported types raise PolicyDefinitionError.
    """
    if isinstance(value, SqlQuery):
        return f"({value.render()})"
    if isinstance(value, SqlExpression):
        return value.render()
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return sql_bool(value)
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return sql_string(value)
    if isinstance(value, datetime):
        return f"'{value.isoformat()}'"
    if isinstance(value, date):
        return f"'{value.isoformat()}'"
    raise PolicyDefinitionError(
        f"Unsupported value of type {type(value).__name__}; "
        "use str, int, float, bool, None, a date or a DSL expression"
    )


def quote_ident(name: Any) -> str:
    """
    Quote an identifier. Plain lowercase names are left bare; dotted names are
    quoted part by part.
    """
    if not isinstance(name, str) or not name.strip():
        raise PolicyDefinitionError(f"Identifier must be a non-empty string, got {name!r}")
    parts = name.split(".")
    if any(not p for p in parts):
        raise PolicyDefinitionError(f"Invalid identifier: {name!r}")
    return ".".join(_quote_part(p) for p in parts)


def _quote_part(part: str) -> str:
    if _SIMPLE_IDENT_RE.match(part) and part not in _RESERVED_WORDS:
        return part
    escaped = part.replace('"', '""')
    return f'"{escaped}"'


def quote_name(name: Any) -> str:
    """Always double-quote (policy names)."""
    if not isinstance(name, str) or not name.strip():
        raise PolicyDefinitionError(f"Name must be a non-empty string, got {name!r}")
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def check_qualified_name(name: Any, what: str) -> str:
    """Validate a bare function/setting name like ``auth.uid`` or ``app.org_id``."""
    if not isinstance(name, str) or not _QUALIFIED_NAME_RE.match(name):
        raise PolicyDefinitionError(f"Invalid {what}: {name!r}")
    return name
