"""
Policy DSL: builders that render PostgreSQL row level security policies.

Public surface (the names scripts see):
createPolicy, column, auth, session, currentUser, from_, hasRole,
alwaysTrue, call, policies.
"""

from .context import AuthContext, ContextExpression, SessionContext, auth, currentUser, session
from .expressions import Column, Condition, alwaysTrue, call, column, hasRole
from .policy import PolicyBuilder, createPolicy
from .sql import PolicyDefinitionError
from .subquery import Subquery, from_
from .templates import PolicyTemplates, policies

__all__ = [
    "createPolicy",
    "column",
    "auth",
    "session",
    "currentUser",
    "from_",
    "hasRole",
    "alwaysTrue",
    "call",
    "policies",
    "AuthContext",
    "Column",
    "Condition",
    "ContextExpression",
    "PolicyBuilder",
    "PolicyDefinitionError",
    "PolicyTemplates",
    "SessionContext",
    "Subquery",
]
