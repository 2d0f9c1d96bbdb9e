"""
Core value types: execution results, examples and playground session state.

All models are frozen; state changes produce new values
(see rls_playground.engines.session).
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

# Fixed message for a program that finishes without returning text
RETURN_CONTRACT_MESSAGE = "Code must return a string (use policy.toSQL())"
# Used when a raised exception carries no text
FALLBACK_ERROR_MESSAGE = "An error occurred"


class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    text: str


class Failure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    message: str = Field(..., min_length=1)


ExecutionResult = Annotated[Success | Failure, Field(discriminator="kind")]


class Example(BaseModel):
    """A named seed program from the catalog."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    code: str


class SessionStatusEnum(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class SessionState(BaseModel):
    """
    One playground session: the program being edited, the last result and
    the copy acknowledgement deadline. ``revision`` moves on every edit,
    example load and execute so late results can be recognised as stale.
    """

    model_config = ConfigDict(frozen=True)

    source: str = ""
    status: SessionStatusEnum = SessionStatusEnum.IDLE
    result: ExecutionResult | None = None
    revision: int = 0
    copied_until: float | None = None


class Message(BaseModel):
    message: str
