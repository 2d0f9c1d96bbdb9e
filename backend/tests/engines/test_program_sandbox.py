"""Unit tests for engines.sandbox."""

import pytest

from rls_playground.engines.sandbox import (
    PROGRAM_FUNCTION_NAME,
    build_program_globals,
    compile_program,
)


class TestCompileProgram:
    def test_compile_simple(self) -> None:
        code = compile_program("return 'x'", [])
        assert code is not None

    def test_compile_with_parameters(self) -> None:
        code = compile_program("return column", ["column", "auth"])
        g = build_program_globals()
        exec(code, g)
        assert g[PROGRAM_FUNCTION_NAME]("c", "a") == "c"

    def test_compile_empty_body(self) -> None:
        code = compile_program("", [])
        g = build_program_globals()
        exec(code, g)
        assert g[PROGRAM_FUNCTION_NAME]() is None

    def test_compile_comment_only(self) -> None:
        code = compile_program("# nothing here", [])
        assert code is not None

    def test_compile_syntax_error(self) -> None:
        with pytest.raises(SyntaxError):
            compile_program("return (", [])

    def test_compile_rejects_underscore_names(self) -> None:
        with pytest.raises(SyntaxError, match="_secret"):
            compile_program("return _secret", [])

    def test_compile_rejects_dunder_attribute(self) -> None:
        with pytest.raises(SyntaxError, match="__class__"):
            compile_program("return ''.__class__", [])


class TestBuildProgramGlobals:
    def test_includes_builtins_and_guards(self) -> None:
        g = build_program_globals()
        assert "__builtins__" in g
        assert "_getattr_" in g
        assert "_getiter_" in g
        assert "_getitem_" in g
        assert "_write_" in g
        assert "_unpack_sequence_" in g

    def test_no_dangerous_builtins(self) -> None:
        builtins = build_program_globals()["__builtins__"]
        for name in (
            "open",
            "exec",
            "eval",
            "compile",
            "__import__",
            "SystemExit",
            "GeneratorExit",
            "KeyboardInterrupt",
        ):
            assert name not in builtins

    def test_fresh_dict_per_call(self) -> None:
        a = build_program_globals()
        b = build_program_globals()
        assert a is not b
        assert a["__builtins__"] is not b["__builtins__"]
