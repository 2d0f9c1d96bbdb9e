"""
Editor augmentation bridge.

Lets a snippet use the binding names as bare globals with completion:

1. the DSL type snapshot is installed as a virtual stub document;
2. a ``__builtins__.pyi`` document declares every binding name as an ambient
   constant typed by reference into that stub, so no import is needed;
3. diagnostics are turned off for the snippet document, because a body of
   top-level statements ending in ``return`` is not a valid module;
4. compiler options are set so the stub resolves.

Authoring-time checking is deliberately weak; running the program is what
decides whether it is correct. The executor never depends on this module.
"""

import logging

from rls_playground.core.config import settings
from rls_playground.engines.registry import BindingRegistry, default_registry

from .snapshot import load_type_snapshot
from .surfaces import CompilerOptions, DiagnosticsOptions, EditorSurface

logger = logging.getLogger(__name__)

DSL_MODULE = "rls_playground.dsl"
TYPES_URI = "file:///typings/rls_playground/dsl.pyi"
GLOBALS_URI = "file:///__builtins__.pyi"
SNIPPET_URI = "file:///snippet.py"


def build_globals_declarations(registry: BindingRegistry, module: str = DSL_MODULE) -> str:
    """Ambient declarations: ``name: Final = RLS.name`` for each binding, in order."""
    lines = [
        "# Names available to playground programs without imports",
        "from typing import Final",
        "",
        f"import {module} as RLS",
        "",
    ]
    lines.extend(f"{name}: Final = RLS.{name}" for name in registry)
    return "\n".join(lines) + "\n"


def configure(
    surface: EditorSurface,
    registry: BindingRegistry | None = None,
    snapshot: str | None = None,
    python_version: str | None = None,
) -> None:
    """Install declarations and relaxed diagnostics on surface. Safe to call repeatedly."""
    registry = registry if registry is not None else default_registry()
    snapshot = snapshot if snapshot is not None else load_type_snapshot()
    surface.set_extra_lib(TYPES_URI, snapshot)
    surface.set_extra_lib(GLOBALS_URI, build_globals_declarations(registry))
    surface.set_diagnostics_options(
        DiagnosticsOptions(
            document_uri=SNIPPET_URI,
            no_semantic_validation=True,
            no_syntax_validation=True,
            no_suggestion_diagnostics=True,
        )
    )
    surface.set_compiler_options(
        CompilerOptions(python_version=python_version or settings.EDITOR_PYTHON_VERSION)
    )
    logger.debug("Configured editor surface %s with %d bindings", type(surface).__name__, len(registry))
