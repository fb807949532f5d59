"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~routespec.exceptions.RoutespecError` subclass.
Build pipelines can inspect the exit code to tell a broken route registry
apart from an unreadable manifest without parsing stderr.

Example::

    $ routespec build routes.yaml
    $ echo $?
    3   # EXIT_BUILD_FAILURE -- the document could not be assembled
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_BUILD_FAILURE = 3
"""The document could not be assembled from the declared routes."""

EXIT_MANIFEST_ERROR = 4
"""The route manifest could not be loaded or validated."""

EXIT_COLLABORATOR_ERROR = 5
"""An injected collaborator (type resolver, namer, operation identifier) failed."""
