"""
SandboxExecutor: run(source, registry) -> Success | Failure.

The source is compiled with RestrictedPython as the body of a function whose
parameters are the registry names, then called once with the registry values.
Whatever happens inside, the caller gets a tagged result back:

    returns a str          -> Success(text)
    returns anything else  -> Failure(RETURN_CONTRACT_MESSAGE)
    raises                 -> Failure(str(exc) or FALLBACK_ERROR_MESSAGE)

Each run gets fresh globals; nothing carries over between runs.
Only a host KeyboardInterrupt propagates; anything else the program raises,
SystemExit included, becomes a Failure.

There is no time limit unless SCRIPT_EXEC_TIMEOUT is set (SIGALRM, Unix main
thread only): a program that never returns blocks its caller. Programs are
not isolated from the host process beyond RestrictedPython's guards.
"""

import logging
import signal
import threading
from typing import Any, Protocol

from rls_playground.core.config import settings
from rls_playground.models import (
    FALLBACK_ERROR_MESSAGE,
    RETURN_CONTRACT_MESSAGE,
    ExecutionResult,
    Failure,
    Success,
)

from .registry import BindingRegistry
from .sandbox import PROGRAM_FUNCTION_NAME, build_program_globals, compile_program

logger = logging.getLogger(__name__)


class ScriptTimeoutError(TimeoutError):
    """Raised when a program runs longer than SCRIPT_EXEC_TIMEOUT."""

    pass


class ProgramScope(Protocol):
    """Anything that can run a program against a registry and report the outcome."""

    def run(self, source: str, registry: BindingRegistry) -> ExecutionResult: ...


def _call_with_timeout(fn: Any, args: list[Any], timeout_sec: int) -> Any:
    """Call fn(*args) under signal.SIGALRM. Unix only; must be on the main thread."""

    def _handler(signum: int, frame: Any) -> None:
        raise ScriptTimeoutError(f"Script execution timed out after {timeout_sec}s")

    old = signal.signal(signal.SIGALRM, _handler)
    try:
        signal.alarm(timeout_sec)
        try:
            return fn(*args)
        finally:
            signal.alarm(0)
    finally:
        signal.signal(signal.SIGALRM, old)


def _use_timeout(timeout: int | None) -> bool:
    return (
        timeout is not None
        and timeout > 0
        and hasattr(signal, "SIGALRM")
        and threading.current_thread() is threading.main_thread()
    )


def error_message(exc: BaseException) -> str:
    """Human-readable text of an exception, or the generic fallback."""
    try:
        text = str(exc).strip()
    except Exception:
        logger.debug("Could not render %s as text", type(exc).__name__, exc_info=True)
        return FALLBACK_ERROR_MESSAGE
    return text or FALLBACK_ERROR_MESSAGE


class SandboxExecutor:
    """Default ProgramScope backed by RestrictedPython."""

    def __init__(self, timeout: int | None = None) -> None:
        self._timeout = timeout

    def _invoke(self, source: str, registry: BindingRegistry) -> Any:
        names = registry.names
        code = compile_program(source, names)
        g = build_program_globals()
        exec(code, g)  # noqa: S102 - restricted environment
        fn = g[PROGRAM_FUNCTION_NAME]
        args = [registry[name] for name in names]
        timeout = self._timeout if self._timeout is not None else settings.SCRIPT_EXEC_TIMEOUT
        if _use_timeout(timeout):
            return _call_with_timeout(fn, args, timeout)
        return fn(*args)

    def run(self, source: str, registry: BindingRegistry) -> ExecutionResult:
        logger.debug("Running program (%d chars) with bindings %s", len(source), registry.names)
        try:
            value = self._invoke(source, registry)
        except KeyboardInterrupt:
            raise
        except BaseException as e:
            message = error_message(e)
            logger.info("Program failed: %s: %s", type(e).__name__, message)
            return Failure(message=message)
        if isinstance(value, str):
            return Success(text=value)
        logger.info("Program returned %s instead of str", type(value).__name__)
        return Failure(message=RETURN_CONTRACT_MESSAGE)


def run(source: str, registry: BindingRegistry) -> ExecutionResult:
    """Run one program with the default executor."""
    return SandboxExecutor().run(source, registry)
