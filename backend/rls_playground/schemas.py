"""
Request/response bodies for the playground HTTP API.
"""

import uuid

from pydantic import BaseModel, Field

from rls_playground.models import ExecutionResult, SessionState, SessionStatusEnum

MAX_SOURCE_LENGTH = 100_000


class RunIn(BaseModel):
    """Body for POST /playground/run."""

    source: str = Field(..., max_length=MAX_SOURCE_LENGTH)


class SessionCreate(BaseModel):
    """Body for POST /sessions; both optional (default: the first example)."""

    source: str | None = Field(default=None, max_length=MAX_SOURCE_LENGTH)
    example: str | None = None


class SessionSourceIn(BaseModel):
    source: str = Field(..., max_length=MAX_SOURCE_LENGTH)


class LoadExampleIn(BaseModel):
    name: str = Field(..., min_length=1)


class SessionPublic(BaseModel):
    id: uuid.UUID
    source: str
    status: SessionStatusEnum
    result: ExecutionResult | None = None
    revision: int
    copied: bool = False

    @classmethod
    def from_state(cls, sid: uuid.UUID, state: SessionState, copied: bool) -> "SessionPublic":
        return cls(
            id=sid,
            source=state.source,
            status=state.status,
            result=state.result,
            revision=state.revision,
            copied=copied,
        )
