"""Build the operation for one HTTP method on one path.

An operation collects everything a single route contributes to the
document: its description, media types, extensions, identifier and tags,
its responses, and the parameters that were not hoisted to path level.

**Response merging** happens in a fixed order:

1. One response per declared error response of the route.
2. If nothing was declared but the route has a success payload sample, a
   single ``200 OK`` response for it.
3. Every configured common response whose status code is still missing.
   Common responses never override explicit ones.
4. If there is still no status-coded response, the configured default
   response becomes the operation's ``default``.
"""

from __future__ import annotations

from typing import Collection, Optional, Sequence

from routespec.builder.collaborators import OperationIdentifier
from routespec.builder.parameters import build_parameter
from routespec.builder.schemas import SchemaAssembler
from routespec.exceptions import DuplicateMediaTypeError
from routespec.models import (
    BuilderConfig,
    MediaType,
    Operation,
    ParameterKey,
    Response,
    Responses,
    RouteDeclaration,
)

EXTENSION_PREFIX = "x-"
"""Route metadata keys starting with this prefix become operation extensions."""

_STATUS_OK = 200


def build_operation(
    route: RouteDeclaration,
    common_keys: Collection[ParameterKey],
    *,
    config: BuilderConfig,
    schemas: SchemaAssembler,
    operation_identifier: OperationIdentifier,
) -> Operation:
    """Build the :class:`~routespec.models.Operation` for *route*.

    Args:
        route: The route to convert.
        common_keys: Keys of the parameters hoisted to path level; these are
            left out of the operation's own parameter list.
        config: Supplies the scheme list and the common and default
            responses.
        schemas: Resolves response payload types.
        operation_identifier: Derives the operation id and tags.  Its errors
            propagate unchanged.

    Returns:
        The assembled operation.

    Raises:
        BuildError: Any parameter, schema or media type error.
        CollaboratorError: From *operation_identifier*.
    """
    operation = Operation(
        description=route.doc or None,
        produces=list(route.produces) or None,
        schemes=list(config.protocol_list) or None,
    )

    for key, value in route.metadata.items():
        if key.startswith(EXTENSION_PREFIX):
            if operation.extensions is None:
                operation.extensions = {}
            operation.extensions[key] = value

    operation_id, tags = operation_identifier(route)
    operation.operation_id = operation_id
    operation.tags = list(tags) or None

    operation.responses = _build_responses(route, config, schemas)

    operation.parameters = [
        build_parameter(declaration, route.describe())
        for declaration in route.parameters
        if declaration.key not in common_keys
    ]
    return operation


def _build_responses(
    route: RouteDeclaration,
    config: BuilderConfig,
    schemas: SchemaAssembler,
) -> Responses:
    responses = Responses()
    by_code = responses.status_code_responses

    for declared in route.response_errors:
        by_code[declared.code] = build_response(
            declared.model, declared.message, route.consumes, schemas,
            route=route.describe(),
        )

    # No declared responses but a write sample: assume it is the 200 payload.
    if not by_code and route.write_sample is not None:
        by_code[_STATUS_OK] = build_response(
            route.write_sample, "OK", route.consumes, schemas,
            route=route.describe(),
        )

    for code, common in config.common_responses.items():
        if code not in by_code:
            by_code[code] = common.model_copy(deep=True)

    if not by_code and config.default_response is not None:
        responses.default = config.default_response.model_copy(deep=True)
    return responses


def build_response(
    model: Optional[str],
    description: str,
    media_types: Sequence[str],
    schemas: SchemaAssembler,
    *,
    route: Optional[str] = None,
) -> Response:
    """Build a response whose content lists *model* under every media type.

    Args:
        model: Payload type name, or ``None`` for a response without a body.
        description: Response description (the declared message).
        media_types: Media types to fan the schema out to.
        schemas: Resolves *model* into an inline schema or a reference.
        route: The declaring route, included in error messages.

    Raises:
        UnknownTypeError: If *model* cannot be resolved.
        DuplicateMediaTypeError: If *media_types* repeats an entry.
    """
    response = Response(description=description)
    if model is None:
        return response

    schema = schemas.to_schema(model)
    content: dict[str, MediaType] = {}
    for media_type in media_types:
        if media_type in content:
            raise DuplicateMediaTypeError(media_type, model, route)
        content[media_type] = MediaType(schema=dict(schema))
    response.content = content or None
    return response
