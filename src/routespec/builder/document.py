"""Assemble a :class:`~routespec.models.Document` from declared web services.

This is the top of the build pipeline.  For each web service it:

1. skips the service when its root path starts with an ignored prefix;
2. builds the service-wide parameters once;
3. groups the service's routes by path template, normalising a trailing
   greedy marker (``{path:*}``) to a plain placeholder (``{path}``);
4. skips ignored paths, rejects paths already installed by an earlier
   service, and installs one :class:`~routespec.models.PathItem` per path
   carrying the service parameters plus the hoisted parameters, sorted, and
   one operation per route.

The build is a single synchronous pass.  Any error aborts it; there is no
partial result.

The public entry point is :func:`build_openapi_spec`.
"""

from __future__ import annotations

import logging
from typing import Iterable

from routespec.builder.collaborators import (
    DefinitionNamer,
    OperationIdentifier,
    TypeResolver,
    default_definition_name,
    default_operation_identifier,
)
from routespec.builder.operations import build_operation
from routespec.builder.parameters import (
    build_parameters,
    find_common_parameters,
    sort_parameters,
)
from routespec.builder.schemas import SchemaAssembler
from routespec.exceptions import DuplicateOperationError, DuplicatePathError
from routespec.models import (
    BuilderConfig,
    Document,
    PathItem,
    RouteDeclaration,
    WebService,
)

logger = logging.getLogger(__name__)

_GREEDY_SUFFIX = ":*}"


def build_openapi_spec(
    web_services: Iterable[WebService],
    config: BuilderConfig,
    *,
    resolver: TypeResolver,
    definition_namer: DefinitionNamer = default_definition_name,
    operation_identifier: OperationIdentifier = default_operation_identifier,
) -> Document:
    """Build the document for *web_services*.

    Args:
        web_services: The route registry, one entry per web service.
        config: Ignore prefixes, schemes, and common/default responses.
        resolver: Classifies and defines payload types.
        definition_namer: Maps type names to schema display names.
        operation_identifier: Derives operation ids and tags.

    Returns:
        The finished :class:`~routespec.models.Document`.

    Raises:
        BuildError: If any route, parameter or type cannot be assembled.
        CollaboratorError: Propagated unchanged from the collaborators.

    Example::

        document = build_openapi_spec(
            [web_service],
            BuilderConfig(protocol_list=["https"]),
            resolver=DefinitionRegistry(definitions),
        )
        print(json.dumps(document.to_dict(), indent=2))
    """
    builder = DocumentBuilder(
        config,
        resolver=resolver,
        definition_namer=definition_namer,
        operation_identifier=operation_identifier,
    )
    return builder.build(web_services)


class DocumentBuilder:
    """Owns one document under construction and the state of a single build.

    Instances must not be shared across threads; concurrent builds use
    independent builders.
    """

    def __init__(
        self,
        config: BuilderConfig,
        *,
        resolver: TypeResolver,
        definition_namer: DefinitionNamer = default_definition_name,
        operation_identifier: OperationIdentifier = default_operation_identifier,
    ) -> None:
        self._config = config
        self._operation_identifier = operation_identifier
        self.document = Document(info=config.info)
        self._schemas = SchemaAssembler(
            self.document.components, resolver, definition_namer
        )

    def build(self, web_services: Iterable[WebService]) -> Document:
        for web_service in web_services:
            self._add_web_service(web_service)
        logger.debug(
            "Built %d paths and %d schemas",
            len(self.document.paths),
            len(self.document.components.schemas),
        )
        return self.document

    def _is_ignored(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self._config.ignore_prefixes)

    def _add_web_service(self, web_service: WebService) -> None:
        if self._is_ignored(web_service.root_path):
            logger.debug("Skipping ignored web service %s", web_service.root_path)
            return

        service_params = build_parameters(web_service.path_parameters, web_service.root_path)

        for path, routes in group_routes_by_path(web_service.routes).items():
            if self._is_ignored(path):
                logger.debug("Skipping ignored path %s", path)
                continue
            if path in self.document.paths:
                raise DuplicatePathError(path)

            common = find_common_parameters(routes)
            path_item = PathItem(parameters=[*service_params, *common.values()])
            sort_parameters(path_item.parameters)

            for route in routes:
                if path_item.get_operation(route.method) is not None:
                    raise DuplicateOperationError(path, route.method.value)
                operation = build_operation(
                    route,
                    common.keys(),
                    config=self._config,
                    schemas=self._schemas,
                    operation_identifier=self._operation_identifier,
                )
                path_item.set_operation(route.method, operation)

            self.document.paths[path] = path_item


def normalize_path(path: str) -> str:
    """Replace a trailing greedy marker: ``/files/{path:*}`` -> ``/files/{path}``."""
    if path.endswith(_GREEDY_SUFFIX):
        return path[: -len(_GREEDY_SUFFIX)] + "}"
    return path


def group_routes_by_path(
    routes: Iterable[RouteDeclaration],
) -> dict[str, list[RouteDeclaration]]:
    """Group routes by normalised path template, keeping first-seen order."""
    grouped: dict[str, list[RouteDeclaration]] = {}
    for route in routes:
        grouped.setdefault(normalize_path(route.path), []).append(route)
    return grouped

