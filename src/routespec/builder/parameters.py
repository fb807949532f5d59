"""Build document parameters and hoist the ones shared by every method on a path.

Route declarations carry :class:`~routespec.models.ParameterDeclaration`
objects. This module converts them into document
:class:`~routespec.models.Parameter` objects and finds the parameters that
can be declared once at path level instead of once per operation.

**Mapping rules:**

* ``path``, ``query`` and ``header`` kinds map to the ``in`` value of the
  same name.  Any other kind (``body``, ``form``) fails the build.
* Path parameters must be declared ``required``; the document format has no
  optional path segments.

**Hoisting rules:**

* A parameter is identified within a route by its
  :class:`~routespec.models.ParameterKey` ``(name, kind)``.  Declaring the
  same key twice on one route fails the build.
* A key is hoisted when every route of the path declares it, every
  declaration is identical, and its kind is not ``body``.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from routespec.exceptions import (
    DuplicateParameterError,
    InvalidRequirednessError,
    UnsupportedParameterKindError,
)
from routespec.models import (
    Parameter,
    ParameterDeclaration,
    ParameterKey,
    ParameterKind,
    RouteDeclaration,
)

logger = logging.getLogger(__name__)

_LOCATIONS: dict[ParameterKind, str] = {
    ParameterKind.PATH: "path",
    ParameterKind.QUERY: "query",
    ParameterKind.HEADER: "header",
}


def build_parameter(
    declaration: ParameterDeclaration, route: Optional[str] = None
) -> Parameter:
    """Convert one declared parameter into a document parameter.

    Args:
        declaration: The parameter as declared on a route or web service.
        route: Where the parameter was declared (``"GET /pods/{name}"`` or a
            path template), included in error messages.

    Returns:
        The document :class:`~routespec.models.Parameter`.

    Raises:
        UnsupportedParameterKindError: For ``body``, ``form``, or any other
            kind without a document location.
        InvalidRequirednessError: For a path parameter not marked required.
    """
    location = _LOCATIONS.get(declaration.kind)
    if location is None:
        raise UnsupportedParameterKindError(declaration.name, declaration.kind.value, route)
    if declaration.kind == ParameterKind.PATH and not declaration.required:
        raise InvalidRequirednessError(declaration.name, route)

    return Parameter(
        name=declaration.name,
        in_=location,
        description=declaration.description or None,
        required=declaration.required,
    )


def build_parameters(
    declarations: Iterable[ParameterDeclaration], route: Optional[str] = None
) -> list[Parameter]:
    """Build every declaration in order."""
    return [build_parameter(declaration, route) for declaration in declarations]


def find_common_parameters(
    routes: Sequence[RouteDeclaration],
) -> dict[ParameterKey, Parameter]:
    """Find the parameters every route of one path declares identically.

    Args:
        routes: All routes sharing a path template.

    Returns:
        A mapping from :class:`~routespec.models.ParameterKey` to the built
        path-level parameter.  Iteration order is not meaningful; callers
        sort with :func:`sort_parameters` before emitting.

    Raises:
        DuplicateParameterError: If a route declares the same key twice.
        UnsupportedParameterKindError: If a hoisted parameter has a kind
            without a document location (``form``).
        InvalidRequirednessError: If a hoisted path parameter is optional.

    Example::

        common = find_common_parameters([get_route, post_route])
        # {ParameterKey("path", ParameterKind.PATH): Parameter(name="path", ...)}
    """
    counts: dict[ParameterKey, int] = {}
    representatives: dict[ParameterKey, ParameterDeclaration] = {}
    consistent: dict[ParameterKey, bool] = {}

    for route in routes:
        seen: set[ParameterKey] = set()
        for declaration in route.parameters:
            key = declaration.key
            if key in seen:
                raise DuplicateParameterError(
                    declaration.name, declaration.kind.value, route.describe()
                )
            seen.add(key)
            counts[key] = counts.get(key, 0) + 1
            if key in representatives:
                if representatives[key] != declaration:
                    consistent[key] = False
            else:
                representatives[key] = declaration
                consistent[key] = True

    common: dict[ParameterKey, Parameter] = {}
    for key, count in counts.items():
        if count != len(routes) or not consistent[key]:
            continue
        if key.kind == ParameterKind.BODY:
            continue
        common[key] = build_parameter(representatives[key], routes[0].path)
        logger.debug("Hoisting %s parameter %r to path level", key.kind.value, key.name)
    return common


def sort_parameters(parameters: list[Parameter]) -> None:
    """Sort *parameters* in place by location, then name."""
    parameters.sort(key=lambda p: (p.in_, p.name))
