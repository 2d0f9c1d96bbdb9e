"""
Editing surfaces the augmentation bridge can configure.

A surface holds keyed virtual documents plus diagnostics and compiler options.
Setting a document or an option replaces what was there, so configuring a
surface twice leaves it in the same state as configuring it once.
"""

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Protocol

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

FILE_URI_PREFIX = "file:///"


class DiagnosticsOptions(BaseModel):
    """Which diagnostics to report for one document."""

    model_config = ConfigDict(frozen=True)

    document_uri: str
    no_semantic_validation: bool = False
    no_syntax_validation: bool = False
    no_suggestion_diagnostics: bool = False

    @property
    def all_disabled(self) -> bool:
        return (
            self.no_semantic_validation
            and self.no_syntax_validation
            and self.no_suggestion_diagnostics
        )


class CompilerOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    python_version: str
    # Resolve imports from the virtual typings directory first
    stub_path: str = "typings"
    use_library_code_for_types: bool = True
    no_emit: bool = True


class VirtualDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    uri: str
    content: str


class EditorConfig(BaseModel):
    """Serializable snapshot of a configured surface, for browser editors."""

    documents: list[VirtualDocument]
    diagnostics: DiagnosticsOptions | None = None
    compiler: CompilerOptions | None = None


class EditorSurface(Protocol):
    def set_extra_lib(self, uri: str, content: str) -> None: ...

    def set_diagnostics_options(self, options: DiagnosticsOptions) -> None: ...

    def set_compiler_options(self, options: CompilerOptions) -> None: ...


class InMemoryEditorSurface:
    """Records the configuration; ``export()`` hands it to a remote editor."""

    def __init__(self) -> None:
        self.documents: dict[str, str] = {}
        self.diagnostics: DiagnosticsOptions | None = None
        self.compiler: CompilerOptions | None = None

    def set_extra_lib(self, uri: str, content: str) -> None:
        self.documents[uri] = content

    def set_diagnostics_options(self, options: DiagnosticsOptions) -> None:
        self.diagnostics = options

    def set_compiler_options(self, options: CompilerOptions) -> None:
        self.compiler = options

    def export(self) -> EditorConfig:
        return EditorConfig(
            documents=[VirtualDocument(uri=u, content=c) for u, c in self.documents.items()],
            diagnostics=self.diagnostics,
            compiler=self.compiler,
        )


def uri_to_relative_path(uri: str) -> PurePosixPath:
    """``file:///typings/x.pyi`` -> ``typings/x.pyi``; rejects anything escaping the root."""
    if not uri.startswith(FILE_URI_PREFIX):
        raise ValueError(f"Only {FILE_URI_PREFIX} URIs are supported, got {uri!r}")
    rel = PurePosixPath(uri[len(FILE_URI_PREFIX):])
    if not rel.parts or ".." in rel.parts:
        raise ValueError(f"Invalid document URI: {uri!r}")
    return rel


class WorkspaceEditorSurface:
    """
    Materializes the configuration into a directory for pyright-based editors:
    documents become files, options become ``pyrightconfig.json``.
    """

    CONFIG_FILE = "pyrightconfig.json"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self._diagnostics: DiagnosticsOptions | None = None
        self._compiler: CompilerOptions | None = None

    def set_extra_lib(self, uri: str, content: str) -> None:
        path = self.root / uri_to_relative_path(uri)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote editor document %s", path)

    def set_diagnostics_options(self, options: DiagnosticsOptions) -> None:
        self._diagnostics = options
        self._write_config()

    def set_compiler_options(self, options: CompilerOptions) -> None:
        self._compiler = options
        self._write_config()

    def pyright_config(self) -> dict[str, object]:
        cfg: dict[str, object] = {}
        if self._compiler is not None:
            cfg["pythonVersion"] = self._compiler.python_version
            cfg["stubPath"] = self._compiler.stub_path
            cfg["useLibraryCodeForTypes"] = self._compiler.use_library_code_for_types
        d = self._diagnostics
        if d is not None:
            snippet = str(uri_to_relative_path(d.document_uri))
            if d.no_semantic_validation:
                cfg["typeCheckingMode"] = "off"
                cfg["reportUndefinedVariable"] = "none"
            if d.all_disabled:
                cfg["ignore"] = [snippet]
        return cfg

    def _write_config(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.root / self.CONFIG_FILE
        path.write_text(json.dumps(self.pyright_config(), indent=2) + "\n", encoding="utf-8")
