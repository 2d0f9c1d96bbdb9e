"""
Playground sessions: program source, last result and the "copied" flag.

Endpoints: create, get, set source, load example, execute, mark copied, delete.
Every change goes through the pure transitions in engines.session.
"""

import time
import uuid

from fastapi import APIRouter, HTTPException

from rls_playground.api.deps import ExecutorDep, RegistryDep, SessionStoreDep
from rls_playground.engines.session import acknowledge_copy, edit, is_copied, load_example, new_session
from rls_playground.examples import DEFAULT_EXAMPLE, get_example
from rls_playground.models import Example, Message, SessionState
from rls_playground.schemas import LoadExampleIn, SessionCreate, SessionPublic, SessionSourceIn

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _public(sid: uuid.UUID, state: SessionState | None) -> SessionPublic:
    if state is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return SessionPublic.from_state(sid, state, copied=is_copied(state, time.monotonic()))


def _example_or_404(name: str) -> Example:
    example = get_example(name)
    if example is None:
        raise HTTPException(status_code=404, detail=f"Example not found: {name}")
    return example


@router.post("", status_code=201)
def create_session(store: SessionStoreDep, body: SessionCreate | None = None) -> SessionPublic:
    """New IDLE session seeded with body.source, a named example, or the default example."""
    body = body or SessionCreate()
    if body.source is not None:
        state = new_session(body.source)
    else:
        example = _example_or_404(body.example) if body.example else DEFAULT_EXAMPLE
        state = new_session(example.code)
    sid = store.create(state)
    return _public(sid, state)


@router.get("/{id}")
def read_session(id: uuid.UUID, store: SessionStoreDep) -> SessionPublic:
    return _public(id, store.get(id))


@router.post("/{id}/source")
def update_source(id: uuid.UUID, body: SessionSourceIn, store: SessionStoreDep) -> SessionPublic:
    """Replace the program; clears any result."""
    return _public(id, store.update(id, lambda s: edit(s, body.source)))


@router.post("/{id}/load-example")
def load_session_example(id: uuid.UUID, body: LoadExampleIn, store: SessionStoreDep) -> SessionPublic:
    """Replace the program with an example's code; clears any result."""
    example = _example_or_404(body.name)
    return _public(id, store.update(id, lambda s: load_example(s, example)))


@router.post("/{id}/execute")
def execute_session(
    id: uuid.UUID,
    store: SessionStoreDep,
    registry: RegistryDep,
    executor: ExecutorDep,
) -> SessionPublic:
    """Run the session's program; the outcome is in ``result`` either way."""
    return _public(id, store.execute(id, registry, executor))


@router.post("/{id}/copied")
def mark_copied(id: uuid.UUID, store: SessionStoreDep) -> SessionPublic:
    """
    The client copied the output. Turns ``copied`` on for COPY_ACK_SECONDS;
    ignored unless the last run succeeded.
    """
    now = time.monotonic()
    return _public(id, store.update(id, lambda s: acknowledge_copy(s, now)))


@router.delete("/{id}")
def delete_session(id: uuid.UUID, store: SessionStoreDep) -> Message:
    if not store.delete(id):
        raise HTTPException(status_code=404, detail="Session not found")
    return Message(message="Session deleted successfully")
