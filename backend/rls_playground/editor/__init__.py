"""
Editor augmentation: type snapshot, editing surfaces and the configure() bridge.
"""

from .bridge import GLOBALS_URI, SNIPPET_URI, TYPES_URI, build_globals_declarations, configure
from .snapshot import SnapshotOriginEnum, build_type_snapshot, load_type_snapshot, synthesize_stub
from .surfaces import (
    CompilerOptions,
    DiagnosticsOptions,
    EditorConfig,
    EditorSurface,
    InMemoryEditorSurface,
    WorkspaceEditorSurface,
)

__all__ = [
    "GLOBALS_URI",
    "SNIPPET_URI",
    "TYPES_URI",
    "CompilerOptions",
    "DiagnosticsOptions",
    "EditorConfig",
    "EditorSurface",
    "InMemoryEditorSurface",
    "SnapshotOriginEnum",
    "WorkspaceEditorSurface",
    "build_globals_declarations",
    "build_type_snapshot",
    "configure",
    "load_type_snapshot",
    "synthesize_stub",
]
