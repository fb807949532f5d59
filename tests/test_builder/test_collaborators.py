"""Tests for routespec.builder.collaborators."""

from __future__ import annotations

import pytest

from routespec.builder.collaborators import (
    DefinitionRegistry,
    default_definition_name,
    default_operation_identifier,
    escape_json_pointer,
)
from routespec.exceptions import CollaboratorError
from routespec.models import HTTPMethod, RouteDeclaration, SchemaDefinition


class TestDefaultDefinitionName:
    def test_uses_segment_after_last_slash(self) -> None:
        assert default_definition_name("k8s.io/api/core/v1.Pod") == ("v1.Pod", None)

    def test_name_without_slash_is_unchanged(self) -> None:
        assert default_definition_name("Pod") == ("Pod", None)


class TestDefaultOperationIdentifier:
    def test_returns_operation_name_and_no_tags(self) -> None:
        route = RouteDeclaration(method=HTTPMethod.GET, path="/pods", operation="listPods")
        assert default_operation_identifier(route) == ("listPods", [])

    def test_missing_operation_raises(self) -> None:
        route = RouteDeclaration(method=HTTPMethod.DELETE, path="/pods/{name}")
        with pytest.raises(CollaboratorError, match=r"DELETE /pods/\{name\}"):
            default_operation_identifier(route)


class TestDefinitionRegistry:
    def test_classify_unknown_name_is_none(self) -> None:
        assert DefinitionRegistry().classify("example.com/pets.Pet") is None

    def test_register_and_lookup(self) -> None:
        registry = DefinitionRegistry()
        definition = SchemaDefinition(schema={"type": "object"})
        registry.register("example.com/pets.Pet", definition)
        assert "example.com/pets.Pet" in registry
        assert len(registry) == 1
        assert registry.definition_for("example.com/pets.Pet") is definition

    def test_definitions_are_copied_from_input(self) -> None:
        source = {"a.A": SchemaDefinition()}
        registry = DefinitionRegistry(source)
        registry.register("b.B", SchemaDefinition())
        assert "b.B" not in source


class TestEscapeJsonPointer:
    @pytest.mark.parametrize(
        "token,expected",
        [
            ("v1.Pod", "v1.Pod"),
            ("a/b", "a~1b"),
            ("a~b", "a~0b"),
            ("~/", "~0~1"),
        ],
    )
    def test_escapes(self, token: str, expected: str) -> None:
        assert escape_json_pointer(token) == expected
