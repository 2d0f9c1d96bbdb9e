"""
Template library exposed as ``policies``: ready-made policies for common
row level security patterns.
"""

from typing import Any

from .expressions import alwaysTrue, column, hasRole
from .policy import COMMANDS, PolicyBuilder, createPolicy
from .sql import PolicyDefinitionError

_COMMAND_METHODS = {
    "SELECT": "read",
    "INSERT": "write",
    "UPDATE": "update",
    "DELETE": "delete",
    "ALL": "all",
}


def _commands(operations: Any) -> list[str]:
    if isinstance(operations, str):
        operations = [operations]
    try:
        ops = [str(o).upper() for o in operations]
    except TypeError as e:
        raise PolicyDefinitionError(f"operations must be a string or a list, got {operations!r}") from e
    if not ops:
        raise PolicyDefinitionError("operations must name at least one command")
    for op in ops:
        if op not in COMMANDS:
            raise PolicyDefinitionError(
                f"Unknown operation {op!r}; expected one of {', '.join(COMMANDS)}"
            )
    return ops


def _for_command(policy: PolicyBuilder, command: str) -> PolicyBuilder:
    return getattr(policy, _COMMAND_METHODS[command])()


class PolicyTemplates:
    def userOwned(
        self, table: str, operations: Any = "ALL", ownerColumn: str = "user_id"
    ) -> list[PolicyBuilder]:
        """One policy per operation restricting rows to their owner."""
        return [
            _for_command(
                createPolicy(f"{table}_{op.lower()}_own").on(table), op
            ).allow(column(ownerColumn).isOwner())
            for op in _commands(operations)
        ]

    def tenantIsolation(
        self,
        table: str,
        tenantColumn: str = "tenant_id",
        sessionKey: str = "app.current_tenant_id",
    ) -> list[PolicyBuilder]:
        """Restrictive ALL policy pinning rows to the session's tenant."""
        return [
            createPolicy(f"{table}_tenant_isolation")
            .on(table)
            .all()
            .requireAll()
            .allow(column(tenantColumn).belongsToTenant(sessionKey))
        ]

    def publicAccess(self, table: str, visibilityColumn: str | None = "is_public") -> PolicyBuilder:
        """Read access to rows flagged public, or to every row when visibilityColumn is None."""
        cond = alwaysTrue() if visibilityColumn is None else column(visibilityColumn).isPublic()
        return createPolicy(f"{table}_public_read").on(table).read().when(cond)

    def roleAccess(self, table: str, role: str, operations: Any = "ALL") -> list[PolicyBuilder]:
        """One policy per operation granted to holders of a JWT role claim."""
        return [
            _for_command(
                createPolicy(f"{table}_{role}_{op.lower()}").on(table), op
            ).allow(hasRole(role))
            for op in _commands(operations)
        ]


policies = PolicyTemplates()
