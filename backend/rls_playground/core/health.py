"""
Health-check helpers for liveness and readiness probes.

Liveness:  is the process alive and not deadlocked?  (cheap, no I/O)
Readiness: can it serve traffic?  (registry builds, sandbox runs a trivial program)
"""

import logging

from rls_playground.engines import SandboxExecutor, default_registry
from rls_playground.models import Success

logger = logging.getLogger(__name__)

_PROBE_PROGRAM = "return 'ok'"


def check_registry() -> bool:
    """Check the policy DSL bindings can be assembled."""
    try:
        return len(default_registry()) > 0
    except Exception:
        logger.warning("Binding registry check failed", exc_info=True)
        return False


def check_sandbox() -> bool:
    """Run a trivial program through the sandbox; True if it succeeds."""
    result = SandboxExecutor(timeout=0).run(_PROBE_PROGRAM, default_registry())
    if not isinstance(result, Success):
        logger.warning("Sandbox check failed: %s", result.message)
        return False
    return True


def liveness_check() -> tuple[bool, list[str]]:
    """
    Lightweight liveness probe; just confirms the Python process is responsive.
    Return format matches readiness_check for consistency.
    """
    return (True, [])


def readiness_check() -> tuple[bool, list[str]]:
    """Returns (ok, list of failure names)."""
    failures: list[str] = []
    if not check_registry():
        failures.append("registry")
    elif not check_sandbox():
        failures.append("sandbox")
    return (not failures, failures)
