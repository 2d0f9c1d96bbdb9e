"""
Type snapshot: one ``.pyi`` payload declaring the policy DSL's public surface.

Sources, in order of preference:

1. a bundled ``bundle.pyi`` shipped next to the DSL (e.g. produced by stubgen);
2. a stub synthesized from the DSL modules with ``inspect``;
3. a bare re-export stub.

A missing or broken source only degrades editor assistance; nothing here
raises for it.
"""

import inspect
import logging
import re
import shutil
from enum import Enum
from pathlib import Path
from types import ModuleType
from typing import Any

from rls_playground import dsl
from rls_playground.core.config import settings
from rls_playground.dsl import context, expressions, policy, sql, subquery, templates

logger = logging.getLogger(__name__)

# Constituent modules, dependencies first
SNAPSHOT_MODULES: tuple[ModuleType, ...] = (sql, context, expressions, subquery, policy, templates)

BUNDLE_PATH = Path(dsl.__file__).parent / "bundle.pyi"
DEFAULT_SNAPSHOT_PATH = Path(__file__).parent / "typings" / "dsl.pyi"

FALLBACK_STUB = "# Fallback type declarations\nfrom rls_playground.dsl import *\n"

_DSL_QUALNAME_RE = re.compile(r"\brls_playground\.dsl\.\w+\.")


class SnapshotOriginEnum(str, Enum):
    BUNDLE = "BUNDLE"
    SYNTHESIZED = "SYNTHESIZED"
    STUB = "STUB"


def _signature(fn: Any) -> str:
    try:
        sig = str(inspect.signature(fn))
    except (TypeError, ValueError):
        return "(*args: Any, **kwargs: Any) -> Any"
    return _DSL_QUALNAME_RE.sub("", sig)


def _is_local(obj: Any, module: ModuleType) -> bool:
    return getattr(obj, "__module__", None) == module.__name__


def _class_lines(cls: type) -> list[str]:
    bases = [b.__name__ for b in cls.__bases__ if b is not object]
    header = f"class {cls.__name__}({', '.join(bases)}):" if bases else f"class {cls.__name__}:"
    lines = [header]
    for attr, value in cls.__dict__.items():
        if attr.startswith("_") and attr != "__init__":
            continue
        if isinstance(value, property):
            lines.append("    @property")
            lines.append(f"    def {attr}{_signature(value.fget)}: ...")
        elif inspect.isfunction(value):
            lines.append(f"    def {attr}{_signature(value)}: ...")
    if len(lines) == 1:
        lines.append("    ...")
    return lines


def synthesize_stub(modules: tuple[ModuleType, ...] = SNAPSHOT_MODULES) -> str:
    """Declarations for every public class, function and instance the modules define."""
    out = [
        "# Auto-generated type declarations for rls_playground.dsl",
        "from typing import Any",
        "",
    ]
    dsl_classes = {
        name for m in modules for name, obj in vars(m).items()
        if inspect.isclass(obj) and _is_local(obj, m)
    }
    for module in modules:
        out.append(f"# {module.__name__}")
        for name, obj in vars(module).items():
            if name.startswith("_"):
                continue
            if inspect.isclass(obj) and _is_local(obj, module):
                out.extend(_class_lines(obj))
                out.append("")
            elif inspect.isfunction(obj) and _is_local(obj, module):
                out.append(f"def {name}{_signature(obj)}: ...")
                out.append("")
            elif type(obj).__name__ in dsl_classes and _is_local(type(obj), module):
                out.append(f"{name}: {type(obj).__name__}")
                out.append("")
    return "\n".join(out).rstrip() + "\n"


def build_type_snapshot(
    target: Path = DEFAULT_SNAPSHOT_PATH, bundle: Path = BUNDLE_PATH
) -> SnapshotOriginEnum:
    """Write the snapshot to target and report which source was used."""
    target.parent.mkdir(parents=True, exist_ok=True)
    if bundle.exists():
        shutil.copyfile(bundle, target)
        logger.info("Copied bundled DSL declarations to %s", target)
        return SnapshotOriginEnum.BUNDLE
    logger.warning("%s not found, synthesizing declarations from the DSL modules", bundle)
    try:
        content = synthesize_stub()
    except Exception:
        logger.warning("Stub synthesis failed; writing fallback declarations", exc_info=True)
        target.write_text(FALLBACK_STUB, encoding="utf-8")
        return SnapshotOriginEnum.STUB
    target.write_text(content, encoding="utf-8")
    logger.info("Generated DSL declarations at %s", target)
    return SnapshotOriginEnum.SYNTHESIZED


def load_type_snapshot(path: str | Path | None = None) -> str:
    """Snapshot text for the editor; synthesized in-process when the file is missing."""
    p = Path(path or settings.TYPE_SNAPSHOT_PATH or DEFAULT_SNAPSHOT_PATH)
    try:
        return p.read_text(encoding="utf-8")
    except OSError:
        logger.info("Type snapshot %s not available, synthesizing", p)
    try:
        return synthesize_stub()
    except Exception:
        logger.warning("Stub synthesis failed; using fallback declarations", exc_info=True)
        return FALLBACK_STUB
