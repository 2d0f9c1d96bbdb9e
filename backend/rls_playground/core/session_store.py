"""
In-memory playground sessions.

Each session is a frozen SessionState swapped as a whole under a lock, so a
reader never sees half an update. Programs run outside the lock; their result
is applied only if the session did not move on meanwhile (see
engines.session.complete_execute). Oldest sessions are evicted past
SESSION_MAX_COUNT.
"""

import logging
import threading
import uuid
from collections import OrderedDict
from collections.abc import Callable

from rls_playground.core.config import settings
from rls_playground.engines.program import ProgramScope
from rls_playground.engines.registry import BindingRegistry
from rls_playground.engines.session import begin_execute, complete_execute
from rls_playground.models import SessionState

_LOG = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, max_count: int | None = None) -> None:
        self._max_count = max_count
        self._sessions: OrderedDict[uuid.UUID, SessionState] = OrderedDict()
        self._lock = threading.Lock()

    def _limit(self) -> int:
        return self._max_count if self._max_count is not None else settings.SESSION_MAX_COUNT

    def create(self, state: SessionState) -> uuid.UUID:
        sid = uuid.uuid4()
        with self._lock:
            self._sessions[sid] = state
            while len(self._sessions) > max(self._limit(), 1):
                evicted, _ = self._sessions.popitem(last=False)
                _LOG.info("Evicted playground session %s", evicted)
        return sid

    def get(self, sid: uuid.UUID) -> SessionState | None:
        with self._lock:
            return self._sessions.get(sid)

    def update(
        self, sid: uuid.UUID, fn: Callable[[SessionState], SessionState]
    ) -> SessionState | None:
        """Apply fn to the current state atomically; None if the session is gone."""
        with self._lock:
            state = self._sessions.get(sid)
            if state is None:
                return None
            new_state = fn(state)
            self._sessions[sid] = new_state
            self._sessions.move_to_end(sid)
            return new_state

    def delete(self, sid: uuid.UUID) -> bool:
        with self._lock:
            return self._sessions.pop(sid, None) is not None

    def execute(
        self, sid: uuid.UUID, registry: BindingRegistry, scope: ProgramScope
    ) -> SessionState | None:
        running = self.update(sid, begin_execute)
        if running is None:
            return None
        result = scope.run(running.source, registry)
        return self.update(sid, lambda s: complete_execute(s, running.revision, result))

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


session_store = SessionStore()
