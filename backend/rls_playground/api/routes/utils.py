from fastapi import APIRouter
from fastapi.responses import JSONResponse

from rls_playground.core.health import liveness_check, readiness_check

router = APIRouter(prefix="/utils", tags=["utils"])


def _probe_response(ok: bool, failures: list[str], message: str) -> bool | JSONResponse:
    if ok:
        return True
    return JSONResponse(
        status_code=503,
        content={"success": False, "message": message, "data": failures},
    )


@router.get("/liveness/", response_model=None)
async def liveness() -> bool | JSONResponse:
    """Process is up; no I/O."""
    return _probe_response(*liveness_check(), "Process unhealthy")


@router.get("/health-check/", response_model=None)
def health_check() -> bool | JSONResponse:
    """Registry builds and the sandbox runs a trivial program; 503 lists what failed."""
    return _probe_response(*readiness_check(), "Service Unavailable")
