"""
Result channel: pure transitions over SessionState.

    IDLE --begin_execute--> RUNNING --complete_execute--> SUCCEEDED | FAILED
    any  --edit / load_example--> IDLE (result and acknowledgement cleared)

FAILED stays until the next execute or edit; nothing is retried.
The "copied" acknowledgement is a deadline, so it turns off by itself once
the clock passes it.
"""

import logging
import time
from typing import Protocol

from rls_playground.core.config import settings
from rls_playground.models import (
    Example,
    ExecutionResult,
    SessionState,
    SessionStatusEnum,
    Success,
)

from .program import ProgramScope, SandboxExecutor
from .registry import BindingRegistry

logger = logging.getLogger(__name__)


class Clipboard(Protocol):
    async def write_text(self, text: str) -> None: ...


def new_session(source: str = "") -> SessionState:
    return SessionState(source=source)


def edit(state: SessionState, source: str) -> SessionState:
    """Replace the program wholesale; back to IDLE with no result."""
    return SessionState(source=source, revision=state.revision + 1)


def load_example(state: SessionState, example: Example) -> SessionState:
    """Replace the program with the example's code; back to IDLE with no result."""
    return edit(state, example.code)


def begin_execute(state: SessionState) -> SessionState:
    return state.model_copy(
        update={
            "status": SessionStatusEnum.RUNNING,
            "result": None,
            "revision": state.revision + 1,
            "copied_until": None,
        }
    )


def complete_execute(
    state: SessionState, revision: int, result: ExecutionResult
) -> SessionState:
    """
    Record the outcome of the run started at ``revision``. If the session moved
    on since (edit, example load, newer execute) the result is stale and dropped.
    """
    if state.revision != revision or state.status != SessionStatusEnum.RUNNING:
        logger.debug("Dropping stale result for revision %s (now %s)", revision, state.revision)
        return state
    status = (
        SessionStatusEnum.SUCCEEDED
        if isinstance(result, Success)
        else SessionStatusEnum.FAILED
    )
    return state.model_copy(update={"status": status, "result": result})


def execute(
    state: SessionState,
    registry: BindingRegistry,
    scope: ProgramScope | None = None,
) -> SessionState:
    """Run the session's program synchronously and record the result."""
    running = begin_execute(state)
    result = (scope or SandboxExecutor()).run(running.source, registry)
    return complete_execute(running, running.revision, result)


def acknowledge_copy(
    state: SessionState, now: float | None = None, duration: float | None = None
) -> SessionState:
    """Turn the "copied" flag on for COPY_ACK_SECONDS; only meaningful after a success."""
    if state.status != SessionStatusEnum.SUCCEEDED:
        return state
    now = time.monotonic() if now is None else now
    duration = settings.COPY_ACK_SECONDS if duration is None else duration
    return state.model_copy(update={"copied_until": now + duration})


def is_copied(state: SessionState, now: float | None = None) -> bool:
    if state.copied_until is None:
        return False
    now = time.monotonic() if now is None else now
    return now < state.copied_until


def copyable_text(state: SessionState) -> str | None:
    if state.status == SessionStatusEnum.SUCCEEDED and isinstance(state.result, Success):
        return state.result.text
    return None


async def copy_output(
    state: SessionState, clipboard: Clipboard, now: float | None = None
) -> SessionState:
    """
    Write the generated text to the clipboard, then acknowledge. Nothing to
    copy is a no-op; a clipboard failure is logged and leaves the state as is.
    """
    text = copyable_text(state)
    if text is None:
        return state
    try:
        await clipboard.write_text(text)
    except Exception as e:
        logger.warning("Clipboard write failed: %s", e)
        return state
    return acknowledge_copy(state, now)
