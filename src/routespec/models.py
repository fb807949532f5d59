"""Canonical Pydantic models shared across all routespec modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Route registry models** -- the immutable input describing declared routes:
    :class:`HTTPMethod`, :class:`ParameterKind`, :class:`ParameterDeclaration`,
    :class:`ResponseDeclaration`, :class:`RouteDeclaration`,
    :class:`WebService`, and :class:`SchemaDefinition`.

**Document models** -- the OpenAPI 3 style tree produced by the builder:
    :class:`Info`, :class:`Parameter`, :class:`MediaType`, :class:`Response`,
    :class:`Responses`, :class:`Operation`, :class:`PathItem`,
    :class:`Components`, and :class:`Document`.

**Configuration models** -- the knobs consumed by a build and the manifest
that bundles everything for the CLI:
    :class:`BuilderConfig` and :class:`RouteManifest`.

All models use Pydantic v2. Document models serialise to the OpenAPI shape
via :meth:`Document.to_dict` (camelCase aliases, ``None`` fields omitted).
"""

from __future__ import annotations

import enum
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer


# --- Route registry models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods that can be bound to a route and stored on a path item."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterKind(str, enum.Enum):
    """Kinds a route parameter can be declared with.

    Only ``path``, ``query`` and ``header`` have a slot in the document;
    ``body`` and ``form`` payloads are expressed as typed request models by
    the surrounding system, and declaring them as parameters fails the build.
    """

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    BODY = "body"
    FORM = "form"


class ParameterKey(NamedTuple):
    """Identity of a parameter within one route."""

    name: str
    kind: ParameterKind


class ParameterDeclaration(BaseModel):
    """A single parameter declared on a route or on a whole web service."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: ParameterKind
    description: str = ""
    required: bool = False
    data_type: Optional[str] = Field(
        default=None, description="Informational data type, e.g. 'string'"
    )

    @property
    def key(self) -> ParameterKey:
        return ParameterKey(self.name, self.kind)


class ResponseDeclaration(BaseModel):
    """A status code a route may answer with, and the payload type it carries."""

    code: int
    message: str = ""
    model: Optional[str] = Field(
        default=None, description="Canonical type name of the response payload"
    )


class RouteDeclaration(BaseModel):
    """One HTTP method bound to a path template.

    Owned by the route registry and treated as immutable input. ``path`` is
    the full template including the web service root, e.g.
    ``/foo/test/{path:*}``.
    """

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    path: str
    doc: str = ""
    operation: Optional[str] = Field(
        default=None, description="Operation name, used as the default operationId"
    )
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)
    parameters: list[ParameterDeclaration] = Field(default_factory=list)
    response_errors: list[ResponseDeclaration] = Field(default_factory=list)
    write_sample: Optional[str] = Field(
        default=None, description="Type name of the success payload"
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    def describe(self) -> str:
        """Return ``"GET /foo/{id}"`` style text for error messages."""
        return f"{self.method.value.upper()} {self.path}"


class WebService(BaseModel):
    """A group of routes sharing a root path and service-wide parameters."""

    root_path: str = "/"
    path_parameters: list[ParameterDeclaration] = Field(
        default_factory=list,
        description="Parameters applied to every path the service serves",
    )
    routes: list[RouteDeclaration] = Field(default_factory=list)


class SchemaDefinition(BaseModel):
    """Schema body for a named payload type plus the type names it depends on."""

    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")
    dependencies: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


# --- Document models ---


class Info(BaseModel):
    """Document metadata (the OpenAPI *Info Object*)."""

    title: str = "Untitled API"
    version: str = "unversioned"
    description: Optional[str] = None


class Parameter(BaseModel):
    """A document parameter (the OpenAPI *Parameter Object*)."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    in_: str = Field(alias="in")
    description: Optional[str] = None
    required: bool = False


class MediaType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")


class Response(BaseModel):
    """A single response; ``content`` is keyed by media type."""

    description: str = ""
    content: Optional[dict[str, MediaType]] = None


class Responses(BaseModel):
    """Responses of one operation.

    Serialises flat, the way OpenAPI expects: status codes become string keys
    next to an optional ``default`` entry.
    """

    status_code_responses: dict[int, Response] = Field(default_factory=dict)
    default: Optional[Response] = None

    @model_serializer(mode="wrap")
    def _flatten(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        codes = data.pop("status_code_responses", None) or {}
        flat: dict[str, Any] = {}
        for code in sorted(codes, key=int):
            flat[str(code)] = codes[code]
        if data.get("default") is not None:
            flat["default"] = data["default"]
        return flat


class Operation(BaseModel):
    """One HTTP method on one path (the OpenAPI *Operation Object*).

    ``extensions`` holds ``x-`` keys; they are merged into the operation
    object itself on serialisation.
    """

    model_config = ConfigDict(populate_by_name=True)

    operation_id: Optional[str] = Field(default=None, alias="operationId")
    tags: Optional[list[str]] = None
    description: Optional[str] = None
    produces: Optional[list[str]] = None
    schemes: Optional[list[str]] = None
    parameters: list[Parameter] = Field(default_factory=list)
    responses: Responses = Field(default_factory=Responses)
    extensions: Optional[dict[str, Any]] = None

    @model_serializer(mode="wrap")
    def _flatten_extensions(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        extensions = data.pop("extensions", None) or {}
        data.update(extensions)
        return data


class PathItem(BaseModel):
    """A path template's hoisted parameters and its per-method operations."""

    parameters: list[Parameter] = Field(default_factory=list)
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None

    def get_operation(self, method: HTTPMethod) -> Optional[Operation]:
        return getattr(self, method.value)

    def set_operation(self, method: HTTPMethod, operation: Operation) -> None:
        setattr(self, method.value, operation)

    def operations(self) -> dict[HTTPMethod, Operation]:
        """Return the populated method slots in declaration order."""
        return {
            method: op
            for method in HTTPMethod
            if (op := self.get_operation(method)) is not None
        }


class Components(BaseModel):
    schemas: dict[str, dict[str, Any]] = Field(default_factory=dict)


class Document(BaseModel):
    """The assembled API description.

    Created empty at the start of a build and only ever grown: paths and
    schema entries are added, never removed or edited.
    """

    openapi: str = "3.0.0"
    info: Optional[Info] = None
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)

    def to_dict(self) -> dict[str, Any]:
        """Return the OpenAPI-shaped, JSON-compatible tree."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Configuration models ---


class BuilderConfig(BaseModel):
    """Configuration consumed by a single document build.

    Loaded from the manifest's ``config`` block and the project-local
    ``routespec.json``, then overridden by environment variables and CLI
    flags. See :func:`~routespec.config.resolve_builder_config` for the full
    precedence chain.
    """

    ignore_prefixes: list[str] = Field(
        default_factory=list,
        description="Web service roots and paths starting with these are skipped",
    )
    protocol_list: list[str] = Field(
        default_factory=list, description="Schemes copied onto every operation"
    )
    common_responses: dict[int, Response] = Field(
        default_factory=dict,
        description="Responses added to every operation that lacks the status code",
    )
    default_response: Optional[Response] = Field(
        default=None,
        description="Used when an operation ends up with no status-coded response",
    )
    info: Optional[Info] = None


class RouteManifest(BaseModel):
    """A route registry bundled in one JSON/YAML file for the CLI.

    Route paths inside ``web_services`` are relative to their service's
    ``root_path``; :func:`~routespec.manifest.parse_manifest` joins them.
    """

    info: Optional[Info] = None
    config: BuilderConfig = Field(default_factory=BuilderConfig)
    definitions: dict[str, SchemaDefinition] = Field(default_factory=dict)
    web_services: list[WebService] = Field(default_factory=list)
