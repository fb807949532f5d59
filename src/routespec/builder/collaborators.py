"""Collaborator contracts consumed by the document builder, plus defaults.

The builder never reaches into process-wide registries. Everything it needs
to know about payload types and operation naming comes from three injected
collaborators:

* :class:`TypeResolver` -- classifies a canonical type name as primitive or
  hands back its :class:`~routespec.models.SchemaDefinition`.
* :data:`DefinitionNamer` -- maps a canonical type name to the document-unique
  display name used as the ``components/schemas`` key, plus extension keys to
  attach to the definition.
* :data:`OperationIdentifier` -- derives the ``operationId`` and tags for a
  route.

:class:`DefinitionRegistry`, :func:`default_definition_name` and
:func:`default_operation_identifier` are the implementations used when the
caller supplies none (the CLI always uses them).
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol

from routespec.exceptions import CollaboratorError
from routespec.models import RouteDeclaration, SchemaDefinition

DefinitionNamer = Callable[[str], tuple[str, Optional[dict[str, Any]]]]
"""``(type_name) -> (display_name, extensions)``."""

OperationIdentifier = Callable[[RouteDeclaration], tuple[Optional[str], list[str]]]
"""``(route) -> (operation_id, tags)``; raises :class:`CollaboratorError` on failure."""


class TypeResolver(Protocol):
    """Source of schema metadata for canonical type names."""

    def classify(self, type_name: str) -> Optional[tuple[str, str]]:
        """Return ``(type, format)`` for primitives, ``None`` otherwise."""
        ...

    def definition_for(self, type_name: str) -> Optional[SchemaDefinition]:
        """Return the schema definition for *type_name*, ``None`` if unknown."""
        ...


# ---------------------------------------------------------------------------
# Primitive types
# ---------------------------------------------------------------------------

# (type, format) pairs for names that are rendered inline. "float" is the
# OpenAPI name; Python floats are double precision and map to "double".
_PRIMITIVE_TYPES: dict[str, tuple[str, str]] = {
    # OpenAPI names
    "string": ("string", ""),
    "integer": ("integer", ""),
    "number": ("number", ""),
    "boolean": ("boolean", ""),
    "object": ("object", ""),
    "int32": ("integer", "int32"),
    "int64": ("integer", "int64"),
    "float": ("number", "float"),
    "double": ("number", "double"),
    "byte": ("string", "byte"),
    "binary": ("string", "binary"),
    # Python names
    "str": ("string", ""),
    "int": ("integer", ""),
    "bool": ("boolean", ""),
    "bytes": ("string", "byte"),
    "dict": ("object", ""),
    "typing.Any": ("object", ""),
    "datetime.datetime": ("string", "date-time"),
    "datetime.date": ("string", "date"),
    "datetime.time": ("string", "time"),
    "decimal.Decimal": ("number", ""),
    "uuid.UUID": ("string", "uuid"),
}


# ---------------------------------------------------------------------------
# Default collaborators
# ---------------------------------------------------------------------------


class DefinitionRegistry:
    """A :class:`TypeResolver` backed by an in-memory mapping.

    Args:
        definitions: Canonical type name to schema definition.
        primitives: Extra primitive names, merged over the built-in table.

    Example::

        registry = DefinitionRegistry({
            "example.com/pets.Pet": SchemaDefinition(schema={"type": "object"}),
        })
        registry.classify("string")                  # ("string", "")
        registry.definition_for("example.com/pets.Pet")
    """

    def __init__(
        self,
        definitions: Optional[Mapping[str, SchemaDefinition]] = None,
        primitives: Optional[Mapping[str, tuple[str, str]]] = None,
    ) -> None:
        self._definitions: dict[str, SchemaDefinition] = dict(definitions or {})
        self._primitives: dict[str, tuple[str, str]] = dict(_PRIMITIVE_TYPES)
        if primitives:
            self._primitives.update(primitives)

    def classify(self, type_name: str) -> Optional[tuple[str, str]]:
        return self._primitives.get(type_name)

    def definition_for(self, type_name: str) -> Optional[SchemaDefinition]:
        return self._definitions.get(type_name)

    def register(self, type_name: str, definition: SchemaDefinition) -> None:
        """Add or replace the definition for *type_name*."""
        self._definitions[type_name] = definition

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


def default_definition_name(type_name: str) -> tuple[str, Optional[dict[str, Any]]]:
    """Use the segment after the last ``/`` as the display name.

    ``"example.com/pets/v1.Pet"`` becomes ``"v1.Pet"``. No extensions are
    attached.
    """
    return type_name[type_name.rfind("/") + 1:], None


def default_operation_identifier(route: RouteDeclaration) -> tuple[Optional[str], list[str]]:
    """Use the route's operation name as ``operationId``, with no tags.

    Raises:
        CollaboratorError: If the route declares no operation name.
    """
    if not route.operation:
        raise CollaboratorError(
            f"route {route.describe()} declares no operation name; "
            "set 'operation' on the route or supply an operation identifier"
        )
    return route.operation, []


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def escape_json_pointer(token: str) -> str:
    """Escape a reference token for use in a JSON Pointer (RFC 6901).

    ``~`` must be escaped before ``/`` so that the ``~`` introduced by
    ``~1`` is not escaped again.
    """
    return token.replace("~", "~0").replace("/", "~1")
