"""Document assembly engine -- turn declared routes into an OpenAPI 3 document.

Typical usage::

    from routespec.builder import DefinitionRegistry, build_openapi_spec
    from routespec.models import BuilderConfig

    document = build_openapi_spec(
        web_services,
        BuilderConfig(protocol_list=["https"]),
        resolver=DefinitionRegistry(definitions),
    )

Sub-modules:

* :mod:`~routespec.builder.collaborators` -- Contracts for the injected type
  resolver, definition namer and operation identifier, with defaults.
* :mod:`~routespec.builder.schemas` -- Recursive, memoized resolution of
  payload types into ``components/schemas`` entries.
* :mod:`~routespec.builder.parameters` -- Parameter conversion and
  path-level hoisting of parameters shared by every method.
* :mod:`~routespec.builder.operations` -- Per-route operations and response
  merging.
* :mod:`~routespec.builder.document` -- The per-path, per-service driver.
"""

from routespec.builder.collaborators import (
    DefinitionRegistry,
    TypeResolver,
    default_definition_name,
    default_operation_identifier,
)
from routespec.builder.document import DocumentBuilder, build_openapi_spec

__all__ = [
    "DefinitionRegistry",
    "DocumentBuilder",
    "TypeResolver",
    "build_openapi_spec",
    "default_definition_name",
    "default_operation_identifier",
]
