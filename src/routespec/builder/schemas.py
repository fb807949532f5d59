"""Resolve payload type names into ``components/schemas`` entries.

Responses reference their payload types by canonical type name. This module
turns such a name into either an inline primitive schema
(``{"type": "integer", "format": "int32"}``) or a ``$ref`` pointer into the
document's schema map, registering the referenced definition -- and,
transitively, everything it depends on -- exactly once.

Cycles are handled by reserving the map slot before recursing: the
definition body is inserted under its display name first, then its
dependencies are walked. A type that (directly or indirectly) refers back to
itself finds its own entry already present and stops there.

Memoization is keyed by **display name**, not by canonical type name. When
two distinct type names map to the same display name, the first one
registered wins and later requests silently reuse it.

The single public class is :class:`SchemaAssembler`.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from routespec.builder.collaborators import (
    DefinitionNamer,
    TypeResolver,
    escape_json_pointer,
)
from routespec.exceptions import UnknownTypeError
from routespec.models import Components

logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX = "#/components/schemas/"
"""Prefix of every reference emitted into the document."""


class SchemaAssembler:
    """Resolves type names against a :class:`TypeResolver` into a schema map.

    The assembler mutates ``components.schemas`` in place and only ever adds
    entries. It is owned by a single build and is not safe for concurrent
    use.

    Args:
        components: The document components whose ``schemas`` map is filled.
        resolver: Source of primitive classification and schema definitions.
        namer: Maps a type name to its display name and extensions.

    Example::

        assembler = SchemaAssembler(document.components, registry, default_definition_name)
        assembler.to_schema("int32")
        # {"type": "integer", "format": "int32"}
        assembler.to_schema("example.com/pets.Pet")
        # {"$ref": "#/components/schemas/pets.Pet"}
    """

    def __init__(
        self,
        components: Components,
        resolver: TypeResolver,
        namer: DefinitionNamer,
    ) -> None:
        self._components = components
        self._resolver = resolver
        self._namer = namer

    @property
    def schemas(self) -> dict[str, dict[str, Any]]:
        return self._components.schemas

    def to_schema(self, type_name: str) -> dict[str, Any]:
        """Return the schema to embed wherever *type_name* is used.

        Primitive types are rendered inline and leave the document untouched;
        every other type is registered (if needed) and referenced.

        Raises:
            UnknownTypeError: If *type_name*, or anything it depends on, has
                no definition.
        """
        primitive = self._resolver.classify(type_name)
        if primitive is not None:
            openapi_type, openapi_format = primitive
            schema: dict[str, Any] = {"type": openapi_type}
            if openapi_format:
                schema["format"] = openapi_format
            return schema
        return {"$ref": self.build_definition_for_type(type_name)}

    def build_definition_for_type(self, type_name: str) -> str:
        """Register *type_name* and its dependencies, returning its reference string."""
        self._build_definition_recursively(type_name)
        display_name, _ = self._namer(type_name)
        return SCHEMA_REF_PREFIX + escape_json_pointer(display_name)

    def _build_definition_recursively(self, type_name: str) -> None:
        display_name, extensions = self._namer(type_name)
        if display_name in self.schemas:
            return

        definition = self._resolver.definition_for(type_name)
        if definition is None:
            raise UnknownTypeError(type_name)

        schema = copy.deepcopy(definition.schema_)
        if extensions:
            schema.update(extensions)
        # Reserve the slot before walking dependencies so cycles terminate.
        self.schemas[display_name] = schema
        logger.debug("Registered schema %s for %s", display_name, type_name)

        for dependency in definition.dependencies:
            if self._resolver.classify(dependency) is not None:
                continue
            self._build_definition_recursively(dependency)
