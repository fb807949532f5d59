"""Exception hierarchy for routespec.

All exceptions inherit from :class:`RoutespecError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`routespec.exit_codes`.
The top-level error handler in :func:`routespec.app.main` catches
``RoutespecError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Every build error is fatal: the document is all-or-nothing and the partially
assembled tree is discarded by the caller.

Subclass hierarchy::

    RoutespecError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- BuildError          (exit 3)
    |   +-- DuplicatePathError
    |   +-- DuplicateOperationError
    |   +-- DuplicateParameterError
    |   +-- UnsupportedParameterKindError
    |   +-- InvalidRequirednessError
    |   +-- UnknownTypeError
    |   +-- DuplicateMediaTypeError
    +-- ManifestError       (exit 4)
    +-- CollaboratorError   (exit 5)
    +-- ConfigError         (exit 1)
"""

from routespec.exit_codes import (
    EXIT_BUILD_FAILURE,
    EXIT_COLLABORATOR_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MANIFEST_ERROR,
)


class RoutespecError(Exception):
    """Base exception for all routespec errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`routespec.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RoutespecError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class BuildError(RoutespecError):
    """Base class for every condition that aborts a document build."""

    exit_code = EXIT_BUILD_FAILURE


class DuplicatePathError(BuildError):
    """Raised when the same resolved path template is installed twice."""

    def __init__(self, path: str):
        super().__init__(f"duplicate webservice route has been found for path: {path}")
        self.path = path


class DuplicateOperationError(BuildError):
    """Raised when two routes bind the same HTTP method to one path template."""

    def __init__(self, path: str, method: str):
        super().__init__(f"duplicate {method.upper()} operation for path: {path}")
        self.path = path
        self.method = method


class DuplicateParameterError(BuildError):
    """Raised when one route declares the same ``(name, kind)`` parameter twice."""

    def __init__(self, name: str, kind: str, route: str):
        super().__init__(f"duplicate {kind} parameter {name!r} for route {route}")
        self.name = name
        self.kind = kind
        self.route = route


class UnsupportedParameterKindError(BuildError):
    """Raised for parameter kinds with no slot in the document (``body``, ``form``)."""

    def __init__(self, name: str, kind: str, route: str | None = None):
        message = f"unsupported parameter kind {kind!r} for parameter {name!r}"
        if route:
            message += f" on route {route}"
        super().__init__(message)
        self.name = name
        self.kind = kind
        self.route = route


class InvalidRequirednessError(BuildError):
    """Raised when a path parameter is not marked as required."""

    def __init__(self, name: str, route: str | None = None):
        message = f"path parameters should be marked as required for parameter {name!r}"
        if route:
            message += f" on route {route}"
        super().__init__(message)
        self.name = name
        self.route = route


class UnknownTypeError(BuildError):
    """Raised when the type resolver has no definition for a referenced payload type."""

    def __init__(self, type_name: str):
        super().__init__(
            f"cannot find model definition for {type_name}. If you added a new type, "
            "you may need to register its schema definition with the type resolver"
        )
        self.type_name = type_name


class DuplicateMediaTypeError(BuildError):
    """Raised when a response lists the same media type twice."""

    def __init__(self, media_type: str, type_name: str | None, route: str | None = None):
        message = f"duplicate media type {media_type} for {type_name}"
        if route:
            message += f" on route {route}"
        super().__init__(message)
        self.media_type = media_type
        self.type_name = type_name
        self.route = route


class ManifestError(RoutespecError):
    """Raised when a route manifest cannot be read, parsed, or validated."""

    exit_code = EXIT_MANIFEST_ERROR


class CollaboratorError(RoutespecError):
    """Raised by injected collaborators (operation identifiers, namers, resolvers).

    The builder propagates these unchanged.
    """

    exit_code = EXIT_COLLABORATOR_ERROR


class ConfigError(RoutespecError):
    """Raised for configuration problems (invalid project config, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE
