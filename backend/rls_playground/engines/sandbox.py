"""
RestrictedPython sandbox for playground programs.

A program is the body of a function: its parameters are the binding names,
so those names are its only free variables besides the safe builtins below.

Allowed: safe_builtins (str, int, list, dict, len, range, sorted, ...),
attribute/item access and iteration through RestrictedPython guards.

Blocked: open, exec, eval, __import__, compile, SystemExit and friends,
underscore names and attributes, attribute writes on objects the program
did not create.
"""

import builtins
import operator
from typing import Any

from RestrictedPython import compile_restricted_function, safe_builtins
from RestrictedPython.Eval import default_guarded_getitem, default_guarded_getiter
from RestrictedPython.Guards import (
    full_write_guard,
    guarded_iter_unpack_sequence,
    guarded_unpack_sequence,
    safer_getattr,
)
from RestrictedPython.PrintCollector import PrintCollector

PROGRAM_FUNCTION_NAME = "program"

_HOST_EXIT_EXCEPTIONS = ("SystemExit", "GeneratorExit", "KeyboardInterrupt")

_INPLACE_OPERATORS = {
    "+=": operator.iadd,
    "-=": operator.isub,
    "*=": operator.imul,
    "/=": operator.itruediv,
    "//=": operator.ifloordiv,
    "%=": operator.imod,
    "|=": operator.ior,
    "&=": operator.iand,
}


def _inplacevar(op: str, x: Any, y: Any) -> Any:
    fn = _INPLACE_OPERATORS.get(op)
    if fn is None:
        raise SyntaxError(f"Operator {op!r} is not allowed")
    return fn(x, y)


def _apply(f: Any, *args: Any, **kwargs: Any) -> Any:
    return f(*args, **kwargs)


def _make_safe_builtins() -> dict[str, Any]:
    """Copy of RestrictedPython's safe_builtins plus a few read-only helpers."""
    b = dict(safe_builtins)
    # Exceptions that unwind the host process, not just the program
    for name in _HOST_EXIT_EXCEPTIONS:
        b.pop(name, None)
    for name in ("list", "dict", "set", "min", "max", "sum", "any", "all", "enumerate", "map", "filter"):
        b.setdefault(name, getattr(builtins, name))
    return b


def _make_guard_globals() -> dict[str, Any]:
    """Guards required by RestrictedPython's rewritten bytecode."""
    return {
        "_getattr_": safer_getattr,
        "_getiter_": default_guarded_getiter,
        "_getitem_": default_guarded_getitem,
        "_iter_unpack_sequence_": guarded_iter_unpack_sequence,
        "_unpack_sequence_": guarded_unpack_sequence,
        "_write_": full_write_guard,
        "_inplacevar_": _inplacevar,
        "_apply_": _apply,
        "_print_": PrintCollector,
    }


def compile_program(
    source: str, parameters: list[str], filename: str = "<program>"
) -> Any:
    """
    Compile source as the body of ``def program(<parameters>)``.

    Raises SyntaxError with RestrictedPython's messages when the body is
    invalid or uses forbidden names. Returns a code object that defines
    the function when exec'd.
    """
    # A trailing statement keeps empty and comment-only bodies valid
    body = f"{source}\npass\n"
    result = compile_restricted_function(
        ", ".join(parameters),
        body,
        PROGRAM_FUNCTION_NAME,
        filename=filename,
    )
    if result.errors:
        raise SyntaxError("; ".join(result.errors))
    if result.code is None:
        raise SyntaxError("RestrictedPython: compile failed")
    return result.code


def build_program_globals() -> dict[str, Any]:
    """
    Fresh globals for one run: safe builtins and guards only. Bindings are
    passed as arguments, never stored here.
    """
    g: dict[str, Any] = {
        "__builtins__": _make_safe_builtins(),
        "__name__": "program",
    }
    g.update(_make_guard_globals())
    return g
