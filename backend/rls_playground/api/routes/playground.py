"""
Playground endpoints: run a program, browse the example catalog, fetch the
editor configuration.
"""

from fastapi import APIRouter, HTTPException

from rls_playground.api.deps import EditorConfigDep, ExecutorDep, RegistryDep
from rls_playground.editor import EditorConfig
from rls_playground.examples import EXAMPLES, get_example
from rls_playground.models import Example, Failure, Success
from rls_playground.schemas import RunIn

router = APIRouter(prefix="/playground", tags=["playground"])


@router.post("/run", response_model=Success | Failure)
def run_program(body: RunIn, registry: RegistryDep, executor: ExecutorDep) -> Success | Failure:
    """
    Run the program once and return ``{kind: "success", text}`` or
    ``{kind: "failure", message}``. Program errors are never HTTP errors.

    Sync route: FastAPI runs it in the thread pool, so a slow program does not
    block the event loop (it does hold a worker thread until it returns).
    """
    return executor.run(body.source, registry)


@router.get("/examples")
def list_examples() -> list[Example]:
    return list(EXAMPLES)


@router.get("/examples/{name}")
def read_example(name: str) -> Example:
    example = get_example(name)
    if example is None:
        raise HTTPException(status_code=404, detail="Example not found")
    return example


@router.get("/editor")
def read_editor_config(config: EditorConfigDep) -> EditorConfig:
    """Virtual documents and options a browser editor applies at mount time."""
    return config
