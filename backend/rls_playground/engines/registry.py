"""
BindingRegistry: the fixed, ordered set of names a program can see.

Values are opaque: the registry never calls, inspects or mutates them.
"""

import keyword
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from rls_playground import dsl


class BindingRegistryError(ValueError):
    """Raised when a registry is built with a duplicate or unusable name."""

    pass


def _check_name(name: Any) -> str:
    if not isinstance(name, str) or not name.isidentifier():
        raise BindingRegistryError(f"Binding name must be a Python identifier, got {name!r}")
    if keyword.iskeyword(name):
        raise BindingRegistryError(f"Binding name {name!r} is a Python keyword")
    if name.startswith("_"):
        # RestrictedPython refuses underscore names in programs
        raise BindingRegistryError(f"Binding name {name!r} must not start with '_'")
    return name


class BindingRegistry(Mapping[str, Any]):
    """
    Immutable name -> value mapping, in registration order.

    Build it once per session; there is no way to add or remove names later.
    """

    def __init__(self, bindings: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None:
        pairs = bindings.items() if isinstance(bindings, Mapping) else bindings
        data: dict[str, Any] = {}
        for name, value in pairs:
            _check_name(name)
            if name in data:
                raise BindingRegistryError(f"Duplicate binding name {name!r}")
            data[name] = value
        self._data = MappingProxyType(data)

    def __getitem__(self, name: str) -> Any:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"BindingRegistry({list(self._data)!r})"

    @property
    def names(self) -> list[str]:
        return list(self._data)


def default_registry() -> BindingRegistry:
    """The policy DSL surface, in the order scripts and editor declarations use."""
    return BindingRegistry(
        [
            ("createPolicy", dsl.createPolicy),
            ("column", dsl.column),
            ("auth", dsl.auth),
            ("session", dsl.session),
            ("currentUser", dsl.currentUser),
            ("from_", dsl.from_),
            ("hasRole", dsl.hasRole),
            ("alwaysTrue", dsl.alwaysTrue),
            ("call", dsl.call),
            ("policies", dsl.policies),
        ]
    )
