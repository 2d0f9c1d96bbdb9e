"""
Policy builder: ``createPolicy(name).on(table).read().when(cond).toSQL()``.

Rendering uses a Jinja2 template; every value reaching the template is
already quoted by the DSL, so autoescape stays off.

Condition placement by command:

    SELECT, DELETE   USING only
    INSERT           WITH CHECK only
    UPDATE, ALL      USING, plus WITH CHECK when .allow()/.withCheck() is used
"""

import copy
import re

from jinja2 import Environment, StrictUndefined, Template

from .expressions import Condition
from .sql import PolicyDefinitionError, quote_ident, quote_name

COMMANDS = ("SELECT", "INSERT", "UPDATE", "DELETE", "ALL")

_POLICY_TEMPLATE = """\
CREATE POLICY {{ name }} ON {{ table }}
  AS {{ kind }}
  FOR {{ command }}
{%- if roles %}
  TO {{ roles | join(", ") }}
{%- endif %}
{%- if using %}
  USING ({{ using }})
{%- endif %}
{%- if check %}
  WITH CHECK ({{ check }})
{%- endif %};
{%- for index in indexes %}
CREATE INDEX IF NOT EXISTS {{ index.name }} ON {{ table }} ({{ index.column }});
{%- endfor %}
"""

_INDEX_NAME_CLEAN_RE = re.compile(r"[^a-z0-9_]+")

_template: Template | None = None


def _get_template() -> Template:
    global _template
    if _template is None:
        env = Environment(autoescape=False, undefined=StrictUndefined)
        _template = env.from_string(_POLICY_TEMPLATE)
    return _template


class PolicyBuilder:
    """Fluent, generative builder for one ``CREATE POLICY`` statement."""

    def __init__(self, name: str) -> None:
        quote_name(name)
        self.name = name
        self._table: str | None = None
        self._command: str | None = None
        self._using: Condition | None = None
        self._allow: Condition | None = None
        self._check: Condition | None = None
        self._roles: tuple[str, ...] = ()
        self._restrictive = False

    def __repr__(self) -> str:
        return f"createPolicy({self.name!r})"

    def _clone(self) -> "PolicyBuilder":
        return copy.copy(self)

    # -- target ---------------------------------------------------------------

    def on(self, table: str) -> "PolicyBuilder":
        quote_ident(table)
        p = self._clone()
        p._table = table
        return p

    def _for(self, command: str) -> "PolicyBuilder":
        p = self._clone()
        p._command = command
        return p

    def read(self) -> "PolicyBuilder":
        return self._for("SELECT")

    def write(self) -> "PolicyBuilder":
        return self._for("INSERT")

    def update(self) -> "PolicyBuilder":
        return self._for("UPDATE")

    def delete(self) -> "PolicyBuilder":
        return self._for("DELETE")

    def all(self) -> "PolicyBuilder":
        return self._for("ALL")

    def to(self, *roles: str) -> "PolicyBuilder":
        """Roles the policy applies to (default: PUBLIC)."""
        if not roles:
            raise PolicyDefinitionError("to() needs at least one role")
        for r in roles:
            quote_ident(r)
        p = self._clone()
        p._roles = tuple(roles)
        return p

    def requireAll(self) -> "PolicyBuilder":
        """Mark the policy RESTRICTIVE: it must pass together with the others."""
        p = self._clone()
        p._restrictive = True
        return p

    def permissive(self) -> "PolicyBuilder":
        p = self._clone()
        p._restrictive = False
        return p

    # -- conditions -----------------------------------------------------------

    def _condition(self, cond: Condition, method: str) -> Condition:
        if not isinstance(cond, Condition):
            raise PolicyDefinitionError(
                f"{method}() on policy {self.name!r} expects a condition, got {type(cond).__name__}"
            )
        return cond

    def when(self, condition: Condition) -> "PolicyBuilder":
        """Rows visible to / affected by the policy (USING)."""
        p = self._clone()
        p._using = self._condition(condition, "when")
        return p

    def allow(self, condition: Condition) -> "PolicyBuilder":
        """Row condition placed wherever the command needs it."""
        p = self._clone()
        p._allow = self._condition(condition, "allow")
        return p

    def withCheck(self, condition: Condition) -> "PolicyBuilder":
        """Explicit WITH CHECK for rows being written."""
        p = self._clone()
        p._check = self._condition(condition, "withCheck")
        return p

    # -- rendering ------------------------------------------------------------

    def _resolve(self) -> tuple[str, str, Condition | None, Condition | None]:
        """(table, command, using, check) after checking the policy is complete."""
        table = self._table
        if table is None:
            raise PolicyDefinitionError(f"Policy {self.name!r} has no table; call .on(table)")
        if self._command is None:
            raise PolicyDefinitionError(
                f"Policy {self.name!r} has no operation; call .read(), .write(), "
                ".update(), .delete() or .all()"
            )
        command = self._command
        using = self._using or self._allow
        check = self._check
        if command in ("SELECT", "DELETE"):
            if check is not None:
                raise PolicyDefinitionError(
                    f"Policy {self.name!r}: WITH CHECK is not allowed for {command} policies"
                )
        elif command == "INSERT":
            if self._using is not None:
                raise PolicyDefinitionError(
                    f"Policy {self.name!r}: INSERT policies only take a check condition; "
                    "use .allow() or .withCheck()"
                )
            using, check = None, check or self._allow
        elif check is None and self._allow is not None:
            check = self._allow
        if using is None and check is None:
            raise PolicyDefinitionError(
                f"Policy {self.name!r} has no condition; call .when() or .allow()"
            )
        return table, command, using, check

    def conditions(self) -> tuple[Condition, ...]:
        _, _, using, check = self._resolve()
        return tuple(c for c in (using, check) if c is not None)

    def indexedColumns(self) -> list[str]:
        """Columns worth indexing for this policy's predicates, first use first."""
        seen: list[str] = []
        for cond in self.conditions():
            for name in cond.columns():
                if "." not in name and name not in seen:
                    seen.append(name)
        return seen

    def toSQL(self, includeIndexes: bool = False) -> str:
        table, command, using, check = self._resolve()
        indexes = []
        if includeIndexes:
            table_slug = _INDEX_NAME_CLEAN_RE.sub("_", table.lower())
            for col in self.indexedColumns():
                col_slug = _INDEX_NAME_CLEAN_RE.sub("_", col.lower())
                indexes.append({
                    "name": quote_ident(f"idx_{table_slug}_{col_slug}"),
                    "column": quote_ident(col),
                })
        return _get_template().render(
            name=quote_name(self.name),
            table=quote_ident(table),
            kind="RESTRICTIVE" if self._restrictive else "PERMISSIVE",
            command=command,
            roles=[quote_ident(r) for r in self._roles],
            using=using.render() if using is not None else "",
            check=check.render() if check is not None else "",
            indexes=indexes,
        )


def createPolicy(name: str) -> PolicyBuilder:
    return PolicyBuilder(name)
