from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from rls_playground.core.session_store import SessionStore, session_store
from rls_playground.editor import EditorConfig, InMemoryEditorSurface, configure, load_type_snapshot
from rls_playground.engines import BindingRegistry, ProgramScope, SandboxExecutor, default_registry


@lru_cache
def get_registry() -> BindingRegistry:
    """One registry for the process lifetime; its composition never changes."""
    return default_registry()


def get_executor() -> ProgramScope:
    return SandboxExecutor()


def get_session_store() -> SessionStore:
    return session_store


RegistryDep = Annotated[BindingRegistry, Depends(get_registry)]
ExecutorDep = Annotated[ProgramScope, Depends(get_executor)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]


@lru_cache
def warm_type_snapshot() -> str:
    """Editor type snapshot, loaded once per process."""
    return load_type_snapshot()


def get_editor_config(registry: RegistryDep) -> EditorConfig:
    surface = InMemoryEditorSurface()
    configure(surface, registry, snapshot=warm_type_snapshot())
    return surface.export()


EditorConfigDep = Annotated[EditorConfig, Depends(get_editor_config)]
