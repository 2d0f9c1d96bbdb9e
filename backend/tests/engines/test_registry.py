"""Unit tests for engines.registry."""

import pytest

from rls_playground import dsl
from rls_playground.engines import BindingRegistry, BindingRegistryError, default_registry


class TestBindingRegistry:
    def test_preserves_order(self) -> None:
        reg = BindingRegistry([("b", 1), ("a", 2), ("c", 3)])
        assert reg.names == ["b", "a", "c"]
        assert list(reg) == ["b", "a", "c"]

    def test_accepts_mapping(self) -> None:
        reg = BindingRegistry({"x": 1, "y": 2})
        assert reg["x"] == 1
        assert len(reg) == 2

    def test_empty_registry(self) -> None:
        reg = BindingRegistry({})
        assert reg.names == []

    def test_duplicate_name_rejected(self) -> None:
        with pytest.raises(BindingRegistryError, match="Duplicate"):
            BindingRegistry([("x", 1), ("x", 2)])

    @pytest.mark.parametrize("name", ["not valid", "1abc", "", "class", "_hidden", 3])
    def test_unusable_names_rejected(self, name: object) -> None:
        with pytest.raises(BindingRegistryError):
            BindingRegistry([(name, 1)])

    def test_values_are_not_copied(self) -> None:
        value = object()
        reg = BindingRegistry({"v": value})
        assert reg["v"] is value

    def test_source_mapping_changes_do_not_leak(self) -> None:
        source = {"a": 1}
        reg = BindingRegistry(source)
        source["b"] = 2
        assert reg.names == ["a"]

    def test_immutable(self) -> None:
        reg = BindingRegistry({"a": 1})
        with pytest.raises(TypeError):
            reg["b"] = 2  # type: ignore[index]

    def test_error_is_value_error(self) -> None:
        assert issubclass(BindingRegistryError, ValueError)


class TestDefaultRegistry:
    def test_names_and_order(self) -> None:
        assert default_registry().names == [
            "createPolicy",
            "column",
            "auth",
            "session",
            "currentUser",
            "from_",
            "hasRole",
            "alwaysTrue",
            "call",
            "policies",
        ]

    def test_values_are_dsl_objects(self) -> None:
        reg = default_registry()
        assert reg["createPolicy"] is dsl.createPolicy
        assert reg["auth"] is dsl.auth
        assert reg["policies"] is dsl.policies

    def test_repr_lists_names(self) -> None:
        assert "createPolicy" in repr(default_registry())
