import warnings
from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, HttpUrl, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./backend/)
        env_file="../.env",
        env_ignore_empty=True,
        extra="ignore",
    )
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "RLS Policy Playground"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    FRONTEND_HOST: str = "http://localhost:5173"
    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    SENTRY_DSN: HttpUrl | None = None

    # Wall-clock limit for one script run (SIGALRM, Unix main thread only).
    # None = no limit: a script that never returns blocks its caller.
    SCRIPT_EXEC_TIMEOUT: int | None = None

    # How long the "copied" acknowledgement stays on after a copy
    COPY_ACK_SECONDS: float = 2.0

    # Type snapshot produced by scripts/snapshot_types.py; synthesized when missing
    TYPE_SNAPSHOT_PATH: str | None = None
    EDITOR_PYTHON_VERSION: str = "3.10"

    # In-memory playground sessions kept before the oldest is evicted
    SESSION_MAX_COUNT: int = 1000

    @model_validator(mode="after")
    def _check_timeout(self) -> "Settings":
        if self.SCRIPT_EXEC_TIMEOUT is not None and self.SCRIPT_EXEC_TIMEOUT <= 0:
            warnings.warn(
                "SCRIPT_EXEC_TIMEOUT <= 0 disables the script time limit",
                stacklevel=1,
            )
            self.SCRIPT_EXEC_TIMEOUT = None
        return self


settings = Settings()  # type: ignore
